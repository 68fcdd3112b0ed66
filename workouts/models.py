"""Typed dataclasses for the workout checklist data model.

All persisted models use from_dict/to_dict for JSON/YAML serialization.
camelCase in JSON is mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Iterator

logger = logging.getLogger(__name__)


# ── Weekdays ──────────────────────────────────────────────────

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def weekday_name(d: date) -> str:
    """'Monday' … 'Sunday' for a calendar date."""
    return WEEKDAYS[d.weekday()]


def normalize_day(name: str) -> str | None:
    """Match a day name case-insensitively ('monday', 'Mon') to its canonical form."""
    key = (name or "").strip().lower()
    if not key:
        return None
    for day in WEEKDAYS:
        if day.lower() == key or day[:3].lower() == key:
            return day
    return None


# ── Timestamps ────────────────────────────────────────────────


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO 8601 timestamp into an aware datetime.

    Accepts a trailing 'Z' as written by browsers; naive values are taken as UTC.
    """
    if isinstance(value, datetime):
        dt = value
    else:
        s = str(value or "").strip()
        if not s:
            raise ValueError("Missing timestamp")
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_timestamp(dt: datetime) -> str:
    return dt.isoformat(timespec="seconds")


def new_item_id() -> str:
    return uuid.uuid4().hex


def legacy_item_id(day: str, position: int, raw: dict[str, Any]) -> str:
    """Id for a stored item that predates ids.

    Derived from where and what the item is, so repeated loads agree on it
    until a save writes it out.
    """
    created = raw.get("createdAt", raw.get("dateAdded"))
    return uuid.uuid5(uuid.NAMESPACE_URL, f"workouts:{day}/{position}/{raw.get('name')}/{created}").hex


# ── Checklist ─────────────────────────────────────────────────


@dataclass
class ChecklistItem:
    name: str
    created_at: datetime
    checked: bool = False
    id: str = field(default_factory=new_item_id)

    @classmethod
    def from_dict(cls, d: dict[str, Any], fallback_id: str | None = None) -> ChecklistItem:
        """Build an item from stored JSON.

        Raises ValueError for entries that do not conform (blank name,
        missing or unparseable timestamp). Entries without an id take *fallback_id*,
        or a fresh one when none is given.
        """
        if not isinstance(d, dict):
            raise ValueError(f"Item is not an object: {d!r}")
        name = str(d.get("name", "")).strip()
        if not name:
            raise ValueError("Item has no name")
        created_at = parse_timestamp(d.get("createdAt", d.get("dateAdded")))
        return cls(
            name=name,
            created_at=created_at,
            checked=d.get("checked") is True,
            id=str(d.get("id") or fallback_id or new_item_id()),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "checked": self.checked,
            "createdAt": format_timestamp(self.created_at),
        }


@dataclass
class WeekRecords:
    """Weekday name -> ordered checklist items. Always holds all seven days."""

    days: dict[str, list[ChecklistItem]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for day in WEEKDAYS:
            self.days.setdefault(day, [])

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> WeekRecords:
        if not d or not isinstance(d, dict):
            return cls()
        days: dict[str, list[ChecklistItem]] = {}
        for key, raw_items in d.items():
            if key not in WEEKDAYS:
                logger.warning("Dropping unknown day key %r from stored workouts", key)
                continue
            items = []
            for position, raw in enumerate(raw_items if isinstance(raw_items, list) else []):
                try:
                    fallback = legacy_item_id(key, position, raw) if isinstance(raw, dict) else None
                    items.append(ChecklistItem.from_dict(raw, fallback))
                except ValueError as e:
                    logger.warning("Dropping malformed %s entry: %s", key, e)
            days[key] = items
        return cls(days=days)

    def to_dict(self) -> dict[str, Any]:
        return {day: [item.to_dict() for item in self.days[day]] for day in WEEKDAYS}

    def items_for(self, day: str) -> list[ChecklistItem]:
        return self.days[day]

    def all_items(self) -> Iterator[ChecklistItem]:
        for day in WEEKDAYS:
            yield from self.days[day]

    def total_items(self) -> int:
        return sum(len(items) for items in self.days.values())

    def is_empty(self) -> bool:
        return self.total_items() == 0


# ── Profile ───────────────────────────────────────────────────

HISTORY_MODES = ("weekday", "month", "year")


@dataclass
class Profile:
    timezone: str = "UTC"
    default_history_mode: str = "weekday"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Profile:
        if not d or not isinstance(d, dict):
            return cls()
        mode = str(d.get("default_history_mode", "weekday")).strip().lower()
        return cls(
            timezone=str(d.get("timezone", "UTC") or "UTC"),
            default_history_mode=mode if mode in HISTORY_MODES else "weekday",
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "timezone": self.timezone,
            "default_history_mode": self.default_history_mode,
        }


# ── History ───────────────────────────────────────────────────


@dataclass
class AggregatedBucket:
    label: str = ""
    display_label: str = ""
    total_count: int = 0
    completed_count: int = 0

    def completion_rate(self) -> float:
        if not self.total_count:
            return 0.0
        return self.completed_count / self.total_count

    def completion_pct(self) -> int:
        return round(self.completion_rate() * 100)

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "displayLabel": self.display_label,
            "totalCount": self.total_count,
            "completedCount": self.completed_count,
            "completionRate": round(self.completion_rate(), 3),
            "completionPct": self.completion_pct(),
        }
