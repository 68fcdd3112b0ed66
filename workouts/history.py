"""History aggregation for the workout checklist.

Turns a snapshot of the weekly records into completion buckets grouped by
weekday, calendar month or calendar year. Everything here is pure: the same
records always produce the same buckets, and the only dates consulted are
the stored creation timestamps.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Any, Callable

from workouts.errors import ValidationError
from workouts.models import HISTORY_MODES, WEEKDAYS, AggregatedBucket, ChecklistItem, WeekRecords


def by_weekday(records: WeekRecords) -> list[AggregatedBucket]:
    """Seven buckets, Monday first, zero-filled for empty days."""
    buckets = []
    for day in WEEKDAYS:
        items = records.items_for(day)
        buckets.append(AggregatedBucket(
            label=day,
            display_label=day[:3],
            total_count=len(items),
            completed_count=sum(1 for item in items if item.checked),
        ))
    return buckets


def _local(item: ChecklistItem, tz: tzinfo | None) -> datetime:
    return item.created_at.astimezone(tz) if tz is not None else item.created_at


def _group_by_created(
    records: WeekRecords,
    key_fn: Callable[[datetime], str],
    label_fn: Callable[[datetime], str],
    tz: tzinfo | None,
) -> list[AggregatedBucket]:
    # Only periods with at least one item appear; no zero-filling.
    buckets: dict[str, AggregatedBucket] = {}
    for item in records.all_items():
        when = _local(item, tz)
        key = key_fn(when)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = AggregatedBucket(label=key, display_label=label_fn(when))
        bucket.total_count += 1
        if item.checked:
            bucket.completed_count += 1
    return [buckets[k] for k in sorted(buckets)]


def by_month(records: WeekRecords, tz: tzinfo | None = None) -> list[AggregatedBucket]:
    """Buckets keyed 'YYYY-MM' by item creation time, ascending."""
    return _group_by_created(
        records,
        key_fn=lambda dt: f"{dt.year:04d}-{dt.month:02d}",
        label_fn=lambda dt: dt.strftime("%b %Y"),
        tz=tz,
    )


def by_year(records: WeekRecords, tz: tzinfo | None = None) -> list[AggregatedBucket]:
    """Buckets keyed 'YYYY' by item creation time, ascending."""
    return _group_by_created(
        records,
        key_fn=lambda dt: f"{dt.year:04d}",
        label_fn=lambda dt: f"{dt.year:04d}",
        tz=tz,
    )


def aggregate(records: WeekRecords, mode: str, tz: tzinfo | None = None) -> list[AggregatedBucket]:
    """Dispatch on grouping mode: 'weekday', 'month' or 'year'."""
    mode = (mode or "").strip().lower()
    if mode == "weekday":
        return by_weekday(records)
    if mode == "month":
        return by_month(records, tz)
    if mode == "year":
        return by_year(records, tz)
    raise ValidationError(f"Unknown history mode: {mode!r} (expected one of {', '.join(HISTORY_MODES)})")


def history_summary(records: WeekRecords, tz: tzinfo | None = None) -> dict[str, Any]:
    """All three groupings, serialized for the display layer."""
    return {
        "totalItems": records.total_items(),
        **{mode: [b.to_dict() for b in aggregate(records, mode, tz)] for mode in HISTORY_MODES},
    }
