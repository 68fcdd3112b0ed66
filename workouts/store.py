"""Local persistence: key/value files, the workout record store, notes and user name.

Every persisted value lives in its own JSON file under ``<root>/storage/``,
addressed by a stable key name:

    workouts.json   weekday -> checklist items
    lastDate.json   ISO date of the last daily reset
    legends.json    weekday -> free-text note
    userName.json   name captured on first run
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Any, Iterator

from workouts.errors import StorageCorruptionError, ValidationError
from workouts.fileio import read_json, write_json_atomic
from workouts.models import WEEKDAYS, WeekRecords, normalize_day
from workouts.workspace import storage_dir

logger = logging.getLogger(__name__)

WORKOUTS_KEY = "workouts"
LAST_DATE_KEY = "lastDate"
LEGENDS_KEY = "legends"
USERNAME_KEY = "userName"


class KeyValueStore:
    """One JSON document per key inside a directory."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Any:
        """Return the stored value, None if absent.

        Raises StorageCorruptionError if the file exists but cannot be decoded.
        """
        try:
            return read_json(self.path_for(key))
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
            raise StorageCorruptionError(key, str(e)) from e

    def set(self, key: str, value: Any) -> None:
        write_json_atomic(self.path_for(key), value)

    def delete(self, key: str) -> bool:
        path = self.path_for(key)
        if not path.exists():
            return False
        path.unlink()
        return True


def open_storage(root: Path | None = None) -> KeyValueStore:
    return KeyValueStore(storage_dir(root))


# ── Workout records ───────────────────────────────────────────


class RecordStore:
    """Owns the weekday -> items blob and the daily reset marker."""

    def __init__(self, kv: KeyValueStore) -> None:
        self.kv = kv

    @classmethod
    def open(cls, root: Path | None = None) -> RecordStore:
        return cls(open_storage(root))

    def _decode(self, raw: Any) -> WeekRecords:
        if raw is None:
            return WeekRecords()
        if not isinstance(raw, dict):
            raise StorageCorruptionError(WORKOUTS_KEY, f"expected an object, got {type(raw).__name__}")
        return WeekRecords.from_dict(raw)

    def load(self) -> WeekRecords:
        """Load all records. Missing or unreadable data yields an empty week."""
        try:
            return self._decode(self.kv.get(WORKOUTS_KEY))
        except StorageCorruptionError as e:
            logger.warning("%s; starting from empty records", e)
            return WeekRecords()

    def save(self, records: WeekRecords) -> None:
        self.kv.set(WORKOUTS_KEY, records.to_dict())

    @contextmanager
    def transaction(self) -> Iterator[WeekRecords]:
        """Load, hand the records to the caller for mutation, then save.

        Nothing is written if the block raises.
        """
        records = self.load()
        yield records
        self.save(records)

    # Reset marker

    def load_marker(self) -> date | None:
        try:
            raw = self.kv.get(LAST_DATE_KEY)
        except StorageCorruptionError as e:
            logger.warning("%s; treating marker as absent", e)
            return None
        if not raw:
            return None
        try:
            return date.fromisoformat(str(raw))
        except ValueError:
            # Dates written as 'Mon Oct 27 2025' by older versions never match.
            logger.info("Unrecognized reset marker %r; treating as absent", raw)
            return None

    def save_marker(self, day: date) -> None:
        self.kv.set(LAST_DATE_KEY, day.isoformat())


# ── Notes ─────────────────────────────────────────────────────


def _require_day(day: str) -> str:
    canonical = normalize_day(day)
    if canonical is None:
        raise ValidationError(f"Unknown weekday: {day!r}")
    return canonical


class NoteStore:
    """Per-weekday free-text notes, independent of the workout records."""

    def __init__(self, kv: KeyValueStore) -> None:
        self.kv = kv

    @classmethod
    def open(cls, root: Path | None = None) -> NoteStore:
        return cls(open_storage(root))

    def load(self) -> dict[str, str]:
        try:
            raw = self.kv.get(LEGENDS_KEY)
        except StorageCorruptionError as e:
            logger.warning("%s; starting from empty notes", e)
            return {}
        if not isinstance(raw, dict):
            return {}
        return {day: str(raw[day]) for day in WEEKDAYS if raw.get(day) is not None}

    def get(self, day: str) -> str:
        return self.load().get(_require_day(day), "")

    def set(self, day: str, text: str) -> str:
        day = _require_day(day)
        notes = self.load()
        if text:
            notes[day] = text
        else:
            notes.pop(day, None)
        self.kv.set(LEGENDS_KEY, notes)
        return text


# ── User name ─────────────────────────────────────────────────


def load_user_name(kv: KeyValueStore) -> str:
    try:
        raw = kv.get(USERNAME_KEY)
    except StorageCorruptionError as e:
        logger.warning("%s; asking for the name again", e)
        return ""
    return str(raw).strip() if isinstance(raw, str) else ""


def save_user_name(kv: KeyValueStore, name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Name must not be empty")
    kv.set(USERNAME_KEY, name)
    return name
