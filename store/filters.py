# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-27
# Description: filters.py
# -----------------------------------------------------------------------------
"""
Typed filter primitives for document store queries.

Only this closed set is accepted by the stores: equality, range, membership
and not-null. Field names are plain top-level keys (or dotted paths into
nested dicts); values are compared as-is, never interpreted as expressions.
"""
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

_MISSING = object()

Scalar = Union[str, int, float, bool]


def get_path(data: Mapping[str, Any], path: str, default: Any = None) -> Any:
    """Resolve a dotted path ("metadata.description") against nested dicts."""
    cur: Any = data
    for part in path.split("."):
        if not isinstance(cur, Mapping) or part not in cur:
            return default
        cur = cur[part]
    return cur


def _check_field(field: str) -> None:
    if not isinstance(field, str) or not field.strip():
        raise ValueError("filter field must be a non-empty string")


@dataclass(frozen=True)
class Eq:
    field: str
    value: Scalar

    def __post_init__(self) -> None:
        _check_field(self.field)
        if not isinstance(self.value, (str, int, float, bool)):
            raise TypeError(f"Eq value for '{self.field}' must be a scalar, got {type(self.value).__name__}")

    def matches(self, data: Mapping[str, Any]) -> bool:
        return get_path(data, self.field, _MISSING) == self.value

    def to_where(self) -> Optional[Dict[str, Any]]:
        return {self.field: {"$eq": self.value}}


@dataclass(frozen=True)
class Range:
    """Half-open or closed numeric/string range; unset bounds are ignored."""
    field: str
    gt: Optional[Any] = None
    gte: Optional[Any] = None
    lt: Optional[Any] = None
    lte: Optional[Any] = None

    def __post_init__(self) -> None:
        _check_field(self.field)
        if all(b is None for b in (self.gt, self.gte, self.lt, self.lte)):
            raise ValueError(f"Range on '{self.field}' needs at least one bound")

    def _bounds(self) -> Tuple[Tuple[str, Any], ...]:
        return tuple(
            (op, v)
            for op, v in (("$gt", self.gt), ("$gte", self.gte), ("$lt", self.lt), ("$lte", self.lte))
            if v is not None
        )

    def matches(self, data: Mapping[str, Any]) -> bool:
        value = get_path(data, self.field, None)
        if value is None or isinstance(value, bool):
            return False
        try:
            if self.gt is not None and not value > self.gt:
                return False
            if self.gte is not None and not value >= self.gte:
                return False
            if self.lt is not None and not value < self.lt:
                return False
            if self.lte is not None and not value <= self.lte:
                return False
        except TypeError:
            # incomparable types (e.g. str vs int) never match
            return False
        return True

    def to_where(self) -> Optional[Dict[str, Any]]:
        # Chroma only supports numeric range operators
        bounds = self._bounds()
        if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for _, v in bounds):
            return None
        clauses = [{self.field: {op: v}} for op, v in bounds]
        return clauses[0] if len(clauses) == 1 else {"$and": clauses}


@dataclass(frozen=True)
class In:
    field: str
    values: Tuple[Scalar, ...]

    def __post_init__(self) -> None:
        _check_field(self.field)
        object.__setattr__(self, "values", tuple(self.values))
        if not self.values:
            raise ValueError(f"In on '{self.field}' needs at least one value")
        for v in self.values:
            if not isinstance(v, (str, int, float, bool)):
                raise TypeError(f"In values for '{self.field}' must be scalars, got {type(v).__name__}")

    def matches(self, data: Mapping[str, Any]) -> bool:
        return get_path(data, self.field, _MISSING) in self.values

    def to_where(self) -> Optional[Dict[str, Any]]:
        return {self.field: {"$in": list(self.values)}}


@dataclass(frozen=True)
class NotNull:
    field: str

    def __post_init__(self) -> None:
        _check_field(self.field)

    def matches(self, data: Mapping[str, Any]) -> bool:
        return get_path(data, self.field, None) is not None

    def to_where(self) -> Optional[Dict[str, Any]]:
        # Chroma metadata has no "exists" operator; stores special-case known fields
        return None


Filter = Union[Eq, Range, In, NotNull]


def matches_all(data: Mapping[str, Any], filters: Sequence[Filter]) -> bool:
    return all(f.matches(data) for f in filters)
