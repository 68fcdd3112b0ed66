"""Checklist add/toggle/remove/clear for a single weekday."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from workouts.errors import OutOfRangeError, ValidationError
from workouts.models import ChecklistItem, WeekRecords, normalize_day
from workouts.store import RecordStore

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ChecklistController:
    """Operates on one weekday's items; every change is one store transaction.

    Items are addressed by their stable id. ``toggle_at``/``remove_at`` accept
    a position for index-based list views.
    """

    def __init__(
        self,
        store: RecordStore,
        day: str,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        canonical = normalize_day(day)
        if canonical is None:
            raise ValidationError(f"Unknown weekday: {day!r}")
        self.store = store
        self.day = canonical
        self.clock = clock or _utc_now

    def items(self) -> list[ChecklistItem]:
        return list(self.store.load().items_for(self.day))

    def _find(self, records: WeekRecords, item_id: str) -> int:
        for i, item in enumerate(records.items_for(self.day)):
            if item.id == item_id:
                return i
        raise OutOfRangeError(f"No item {item_id!r} on {self.day}")

    def _check_position(self, records: WeekRecords, position: int) -> int:
        size = len(records.items_for(self.day))
        if not isinstance(position, int) or isinstance(position, bool) or not 0 <= position < size:
            raise OutOfRangeError(f"Position {position!r} out of range for {self.day} ({size} items)")
        return position

    # ── Mutations ────────────────────────────────────────────

    def add(self, name: str) -> list[ChecklistItem]:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Workout name must not be empty")
        item = ChecklistItem(name=name, created_at=self.clock().replace(microsecond=0))
        with self.store.transaction() as records:
            items = records.items_for(self.day)
            items.append(item)
        logger.debug("Added %r to %s", name, self.day)
        return list(items)

    def _toggle_index(self, records: WeekRecords, index: int) -> list[ChecklistItem]:
        items = records.items_for(self.day)
        items[index].checked = not items[index].checked
        return list(items)

    def toggle(self, item_id: str) -> list[ChecklistItem]:
        with self.store.transaction() as records:
            items = self._toggle_index(records, self._find(records, item_id))
        return items

    def toggle_at(self, position: int) -> list[ChecklistItem]:
        with self.store.transaction() as records:
            items = self._toggle_index(records, self._check_position(records, position))
        return items

    def _remove_index(self, records: WeekRecords, index: int) -> list[ChecklistItem]:
        items = records.items_for(self.day)
        removed = items.pop(index)
        logger.debug("Removed %r from %s", removed.name, self.day)
        return list(items)

    def remove(self, item_id: str) -> list[ChecklistItem]:
        with self.store.transaction() as records:
            items = self._remove_index(records, self._find(records, item_id))
        return items

    def remove_at(self, position: int) -> list[ChecklistItem]:
        with self.store.transaction() as records:
            items = self._remove_index(records, self._check_position(records, position))
        return items

    def clear_all(self) -> list[ChecklistItem]:
        """Empty the day. Confirmation is the caller's job."""
        with self.store.transaction() as records:
            records.items_for(self.day).clear()
        return []
