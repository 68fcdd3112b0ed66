"""Shared test fixtures for the workout checklist tests."""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path

import pytest
import yaml

from workouts.store import KeyValueStore, RecordStore


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with a profile and seeded storage."""
    root = tmp_path / "workspace"
    (root / "storage").mkdir(parents=True)

    # Profile
    profile = {"timezone": "UTC", "default_history_mode": "weekday"}
    (root / "profile.yaml").write_text(
        yaml.dump(profile, default_flow_style=False), encoding="utf-8"
    )

    # Workouts
    workouts = {
        "Monday": [
            {"id": "m1", "name": "Pushups", "checked": True, "createdAt": "2024-01-10T08:00:00+00:00"},
            {"id": "m2", "name": "Squats", "checked": False, "createdAt": "2024-02-05T18:30:00+00:00"},
        ],
        "Wednesday": [
            {"id": "w1", "name": "Plank", "checked": True, "createdAt": "2023-12-31T23:30:00+00:00"},
        ],
    }
    (root / "storage" / "workouts.json").write_text(
        json.dumps(workouts, indent=2), encoding="utf-8"
    )

    # Reset marker
    (root / "storage" / "lastDate.json").write_text(json.dumps("2024-01-09"), encoding="utf-8")

    # Legends
    legends = {"Monday": "3 sets of 15, rest 60s"}
    (root / "storage" / "legends.json").write_text(json.dumps(legends), encoding="utf-8")

    # Set env var
    os.environ["WORKOUTS_ROOT"] = str(root)
    yield root
    # Cleanup
    if "WORKOUTS_ROOT" in os.environ:
        del os.environ["WORKOUTS_ROOT"]


@pytest.fixture
def store(tmp_path: Path) -> RecordStore:
    """An empty record store in its own directory."""
    return RecordStore(KeyValueStore(tmp_path / "storage"))


@pytest.fixture
def fixed_clock():
    """Clock returning successive minutes from 2024-03-04 09:00 UTC."""
    ticks = {"n": 0}

    def clock() -> datetime:
        ticks["n"] += 1
        return datetime(2024, 3, 4, 9, ticks["n"], 30, 123456, tzinfo=timezone.utc)

    return clock
