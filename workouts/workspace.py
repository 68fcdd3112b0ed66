"""Workspace root, profile, timezone and path helpers."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from workouts.fileio import read_yaml, write_yaml_atomic
from workouts.models import Profile

logger = logging.getLogger(__name__)


def workspace_root() -> Path:
    """Get the workspace root directory (contains profile.yaml and storage/)."""
    return Path(
        os.environ.get("WORKOUTS_ROOT", str(Path.home() / ".workouts"))
    ).expanduser().resolve()


# ── Path helpers ──────────────────────────────────────────────

def profile_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "profile.yaml"


def storage_dir(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "storage"


# ── Profile ───────────────────────────────────────────────────

def load_profile(root: Path | None = None) -> Profile:
    """Load profile.yaml into a Profile model (defaults when missing)."""
    return Profile.from_dict(read_yaml(profile_path(root)))


def save_profile(profile: Profile, root: Path | None = None) -> None:
    write_yaml_atomic(profile_path(root), profile.to_dict())


def get_user_timezone(root: Path | None = None) -> ZoneInfo:
    """Get user's timezone from profile.yaml, defaulting to UTC."""
    name = load_profile(root).timezone
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        logger.warning("Unknown timezone %r in profile, using UTC", name)
        return ZoneInfo("UTC")
