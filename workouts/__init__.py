"""Workout checklist core library: local store, daily reset and history.

Public API re-exports for convenient imports:
    from workouts import start_session, RecordStore, aggregate, ...
"""

# Workspace & paths
from workouts.workspace import (
    workspace_root,
    profile_path,
    storage_dir,
    load_profile,
    save_profile,
    get_user_timezone,
)

# File I/O
from workouts.fileio import (
    read_text,
    read_json,
    read_yaml,
    write_json_atomic,
    write_yaml_atomic,
)

# Errors
from workouts.errors import (
    WorkoutError,
    ValidationError,
    OutOfRangeError,
    StorageCorruptionError,
)

# Models
from workouts.models import (
    WEEKDAYS,
    HISTORY_MODES,
    weekday_name,
    normalize_day,
    ChecklistItem,
    WeekRecords,
    Profile,
    AggregatedBucket,
)

# Storage
from workouts.store import (
    KeyValueStore,
    RecordStore,
    NoteStore,
    open_storage,
    load_user_name,
    save_user_name,
)

# Checklist & daily reset
from workouts.checklist import ChecklistController
from workouts.reset import Session, reset_if_new_day, start_session

# History
from workouts.history import (
    by_weekday,
    by_month,
    by_year,
    aggregate,
    history_summary,
)
