# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-31
# Description: TextExtraction
# -----------------------------------------------------------------------------
"""
Searchable-text strategy: collection name -> attribute paths to concatenate.

Dotted paths reach into nested dicts; list values are joined with spaces.
Unknown collections use DEFAULT_FIELDS.
"""
from typing import Any, Dict, List, Mapping, Sequence

from store.filters import get_path

DEFAULT_FIELDS: List[str] = [
    "name", "title", "description", "label", "text", "content", "notes", "comment",
    "metadata.description", "metadata.notes", "tags", "categories",
]

SEARCHABLE_FIELDS: Dict[str, List[str]] = {
    # Core
    "projects": ["name", "description", "status", "phase", "type", "priority",
                 "metadata.extendedStatus", "tags"],
    "teamMembers": ["name", "firstName", "lastName", "email", "role", "position", "title",
                    "skills", "department", "bio"],
    "contacts": ["firstName", "lastName", "name", "company", "position", "title", "email",
                 "phone", "address", "skills", "notes"],
    "inventoryItems": ["name", "description", "category", "model", "serialNumber",
                       "specifications", "manufacturer", "location"],

    # Sessions & workflow
    "sessions": ["name", "title", "description", "status", "phase", "type", "notes"],
    "workflows": ["name", "title", "description", "type", "category", "notes"],
    "workflowTemplates": ["name", "title", "description", "type", "category", "notes"],
    "workflowInstances": ["name", "workflowName", "status", "phase", "notes"],
    "workflowSteps": ["name", "title", "description", "type", "status", "notes"],

    # Timecards
    "timecards": ["projectName", "taskDescription", "notes", "status", "category"],
    "user_timecards": ["projectName", "taskDescription", "notes", "status", "category"],
    "timecard_entries": ["projectName", "taskDescription", "notes", "status", "category"],

    # Media & post-production
    "postProductionTasks": ["name", "title", "description", "taskType", "status", "notes",
                            "assignedTo"],
    "mediaFiles": ["name", "filename", "description", "fileType", "category", "tags",
                   "metadata.description"],

    # Network delivery
    "networkDeliveryBibles": ["name", "title", "network", "description", "requirements",
                              "specifications"],
    "deliverables": ["name", "title", "description", "type", "status", "requirements"],

    # Call sheets
    "callSheets": ["title", "projectName", "date", "location", "notes", "weather", "callTime"],
    "callsheets": ["title", "projectName", "date", "location", "notes", "weather", "callTime"],
    "scenes": ["sceneNumber", "title", "description", "location", "timeOfDay", "characters",
               "notes"],

    # Budget & financial
    "budgets": ["name", "title", "description", "projectName", "category", "notes"],
    "invoices": ["invoiceNumber", "clientName", "description", "notes", "status"],

    # ClipShow
    "clipShowProjects": ["name", "title", "description", "status", "type"],
    "clipShowPitches": ["title", "description", "pitchType", "status", "notes"],
    "clipShowStories": ["title", "story", "description", "category", "tags"],

    # PBM
    "pbmProjects": ["name", "title", "description", "status", "episode"],
    "pbmSchedules": ["name", "description", "status", "location"],

    # Notes & communication
    "notes": ["title", "content", "category", "tags"],
    "messages": ["subject", "message", "content", "body"],
    "chats": ["subject", "message", "content", "body"],

    # Calendar
    "calendarEvents": ["title", "name", "description", "location", "notes"],
    "schedulerEvents": ["title", "name", "description", "location", "notes"],

    # Clients, roles, locations, cue sheets
    "clients": ["name", "companyName", "description", "contactName", "email", "phone", "address"],
    "roles": ["name", "title", "description", "department", "responsibilities"],
    "locations": ["name", "address", "description", "type", "notes"],
    "cueSheets": ["title", "projectName", "description", "musicTitle", "composer"],
}


def fields_for(collection: str) -> List[str]:
    return SEARCHABLE_FIELDS.get(collection, DEFAULT_FIELDS)


def register_fields(collection: str, fields: Sequence[str]) -> None:
    """Add or replace the field list for a collection."""
    if not collection:
        raise ValueError("collection must not be empty")
    if not fields:
        raise ValueError(f"field list for '{collection}' must not be empty")
    SEARCHABLE_FIELDS[collection] = list(fields)


def _as_text(value: Any) -> str:
    if value is None or isinstance(value, (dict, bool)):
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(_as_text(v) for v in value if v is not None).strip()
    return str(value).strip()


def extract_searchable_text(collection: str, data: Mapping[str, Any]) -> str:
    parts = [_as_text(get_path(data, path)) for path in fields_for(collection)]
    return " ".join(p for p in parts if p).strip()
