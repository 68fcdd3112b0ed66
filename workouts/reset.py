"""Daily rollover: uncheck every workout once per calendar day.

A session must start through ``start_session`` so the reset runs before
any checklist is read.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Callable

from workouts.checklist import ChecklistController
from workouts.models import weekday_name
from workouts.store import RecordStore
from workouts.workspace import get_user_timezone, workspace_root

logger = logging.getLogger(__name__)


def reset_if_new_day(store: RecordStore, today: date) -> bool:
    """Uncheck all items on every weekday if the marker is not *today*.

    Names, ids and creation times are preserved. The marker is written even
    when there are no records. Returns True if a reset was performed; a second
    call on the same day is a no-op.
    """
    last = store.load_marker()
    if last == today:
        return False

    with store.transaction() as records:
        cleared = 0
        for item in records.all_items():
            if item.checked:
                item.checked = False
                cleared += 1
    store.save_marker(today)
    logger.info("New day %s (last %s): cleared %d checked item(s)", today, last, cleared)
    return True


@dataclass
class Session:
    store: RecordStore
    now: datetime
    reset_performed: bool
    clock: Callable[[], datetime] | None = None

    @property
    def today(self) -> date:
        return self.now.date()

    @property
    def day(self) -> str:
        """Weekday name of today, the default checklist tab."""
        return weekday_name(self.today)

    def checklist(self, day: str | None = None) -> ChecklistController:
        return ChecklistController(self.store, day or self.day, clock=self.clock)


def start_session(
    root: Path | None = None,
    now: datetime | None = None,
    clock: Callable[[], datetime] | None = None,
) -> Session:
    """Run the daily reset for the workspace and return a ready session.

    *now* defaults to the current time in the profile timezone; *clock* is
    forwarded to the controllers for item timestamps.
    """
    if root is None:
        root = workspace_root()
    tz = get_user_timezone(root)
    if now is None:
        now = datetime.now(tz)
    if clock is None:
        def clock() -> datetime:
            return datetime.now(tz)
    store = RecordStore.open(root)
    performed = reset_if_new_day(store, now.date())
    return Session(store=store, now=now, reset_performed=performed, clock=clock)
