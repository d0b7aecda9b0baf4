# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-09
# Updated: 2026-02-03
# Description: settings.py
# -----------------------------------------------------------------------------
import os
from typing import List


def _env(name: str, default: str = "") -> str:
    """Read env var safely and strip whitespace."""
    return (os.getenv(name) or default).strip()


def _env_int(name: str, default: int) -> int:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return int(v)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be an int, got {v!r}") from e


def _env_list(name: str, default: List[str]) -> List[str]:
    v = _env(name, "")
    if v == "":
        return list(default)
    return [part.strip() for part in v.split(",") if part.strip()]


# -----------------------------------------------------------------------------
# searchAll() default collections (curated list)
# -----------------------------------------------------------------------------
_CURATED_COLLECTIONS = [
    # Core
    "projects", "teamMembers", "contacts", "inventoryItems",
    # Sessions & workflow
    "sessions", "workflows", "workflowInstances", "workflowSteps",
    # Timecards
    "timecards", "timecard_entries",
    # Media & post-production
    "postProductionTasks", "mediaFiles",
    # Network delivery
    "networkDeliveryBibles", "deliverables",
    # Call sheets
    "callSheets", "scenes",
    # Budget & financial
    "budgets", "invoices",
    # ClipShow
    "clipShowProjects", "clipShowPitches", "clipShowStories",
    # Notes & communication
    "notes", "messages",
    # Calendar
    "calendarEvents",
    # Clients, roles, locations
    "clients", "roles", "locations",
]

SEARCH_ALL_COLLECTIONS: List[str] = _env_list("TS_SEARCH_ALL_COLLECTIONS", _CURATED_COLLECTIONS)


# -----------------------------------------------------------------------------
# Result limits
# -----------------------------------------------------------------------------
DEFAULT_SEARCH_LIMIT = _env_int("TS_DEFAULT_SEARCH_LIMIT", 10)
DEFAULT_SIMILAR_LIMIT = _env_int("TS_DEFAULT_SIMILAR_LIMIT", 5)
MAX_SEARCH_LIMIT = _env_int("TS_MAX_SEARCH_LIMIT", 100)

# Snippet window (characters)
SNIPPET_MAX_LENGTH = _env_int("TS_SNIPPET_MAX_LENGTH", 200)


# -----------------------------------------------------------------------------
# Sanity checks
# -----------------------------------------------------------------------------
if not SEARCH_ALL_COLLECTIONS:
    raise RuntimeError("SEARCH_ALL_COLLECTIONS resolved to an empty list")

if DEFAULT_SEARCH_LIMIT > MAX_SEARCH_LIMIT or DEFAULT_SIMILAR_LIMIT > MAX_SEARCH_LIMIT:
    raise RuntimeError("Default search limits must not exceed TS_MAX_SEARCH_LIMIT")
