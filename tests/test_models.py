"""Tests for workouts/models.py: parsing, normalization and bucket rates."""

from datetime import date, datetime, timezone

import pytest

from workouts.models import (
    WEEKDAYS,
    AggregatedBucket,
    ChecklistItem,
    Profile,
    WeekRecords,
    normalize_day,
    parse_timestamp,
    weekday_name,
)


def test_weekday_name():
    assert weekday_name(date(2024, 1, 8)) == "Monday"
    assert weekday_name(date(2024, 1, 14)) == "Sunday"


def test_normalize_day():
    assert normalize_day("monday") == "Monday"
    assert normalize_day("  TUE ") == "Tuesday"
    assert normalize_day("Sun") == "Sunday"
    assert normalize_day("Funday") is None
    assert normalize_day("") is None


def test_parse_timestamp_browser_z_suffix():
    dt = parse_timestamp("2024-01-10T08:00:00.000Z")
    assert dt == datetime(2024, 1, 10, 8, 0, tzinfo=timezone.utc)


def test_parse_timestamp_naive_is_utc():
    dt = parse_timestamp("2024-01-10T08:00:00")
    assert dt.tzinfo is not None
    assert dt.utcoffset().total_seconds() == 0


def test_parse_timestamp_missing():
    with pytest.raises(ValueError):
        parse_timestamp(None)


def test_item_from_dict_accepts_date_added_alias():
    item = ChecklistItem.from_dict({"name": "Pushups", "checked": True, "dateAdded": "2024-01-10T08:00:00.000Z"})
    assert item.name == "Pushups"
    assert item.checked is True
    assert item.created_at.month == 1
    assert item.id  # generated


def test_item_from_dict_keeps_id():
    item = ChecklistItem.from_dict({"id": "abc", "name": "Row", "createdAt": "2024-01-10T08:00:00+00:00"})
    assert item.id == "abc"
    assert item.checked is False


@pytest.mark.parametrize("raw", [
    {"name": "   ", "createdAt": "2024-01-10T08:00:00+00:00"},
    {"name": "Pushups"},
    {"name": "Pushups", "createdAt": "yesterday"},
    "Pushups",
])
def test_item_from_dict_rejects_malformed(raw):
    with pytest.raises(ValueError):
        ChecklistItem.from_dict(raw)


def test_item_to_dict():
    item = ChecklistItem(name="Lunges", created_at=datetime(2024, 5, 1, 7, 0, tzinfo=timezone.utc), id="x")
    assert item.to_dict() == {
        "id": "x",
        "name": "Lunges",
        "checked": False,
        "createdAt": "2024-05-01T07:00:00+00:00",
    }


def test_week_records_always_has_seven_days():
    records = WeekRecords()
    assert list(records.days) == WEEKDAYS
    assert records.is_empty()
    assert list(records.to_dict()) == WEEKDAYS


def test_week_records_drops_unknown_keys_and_bad_entries():
    records = WeekRecords.from_dict({
        "Monday": [
            {"name": "Pushups", "createdAt": "2024-01-10T08:00:00Z"},
            {"name": "", "createdAt": "2024-01-10T08:00:00Z"},
            42,
        ],
        "Someday": [{"name": "Ghost", "createdAt": "2024-01-10T08:00:00Z"}],
        "Tuesday": "not a list",
    })
    assert [i.name for i in records.items_for("Monday")] == ["Pushups"]
    assert records.items_for("Tuesday") == []
    assert "Someday" not in records.days
    assert records.total_items() == 1


@pytest.mark.parametrize("value", ["false", "true", 1, None])
def test_item_checked_only_when_true(value):
    item = ChecklistItem.from_dict({"name": "Row", "checked": value, "createdAt": "2024-01-10T08:00:00Z"})
    assert item.checked is False


def test_week_records_ids_for_items_without_one_repeat_across_loads():
    raw = {"Friday": [
        {"name": "Swim", "dateAdded": "2024-01-12T07:00:00Z"},
        {"name": "Swim", "dateAdded": "2024-01-12T07:00:00Z"},
        {"id": "keep", "name": "Bike", "createdAt": "2024-01-12T09:00:00Z"},
    ]}
    first = [i.id for i in WeekRecords.from_dict(raw).items_for("Friday")]
    second = [i.id for i in WeekRecords.from_dict(raw).items_for("Friday")]
    assert first == second
    assert len(set(first)) == 3
    assert first[2] == "keep"


def test_week_records_all_items_in_weekday_order():
    records = WeekRecords.from_dict({
        "Sunday": [{"name": "Yoga", "createdAt": "2024-01-14T08:00:00Z"}],
        "Monday": [{"name": "Run", "createdAt": "2024-01-08T08:00:00Z"}],
    })
    assert [i.name for i in records.all_items()] == ["Run", "Yoga"]


def test_bucket_rates():
    assert AggregatedBucket(total_count=0, completed_count=0).completion_rate() == 0.0
    assert AggregatedBucket(total_count=3, completed_count=1).completion_pct() == 33
    b = AggregatedBucket(label="2024", display_label="2024", total_count=4, completed_count=3)
    d = b.to_dict()
    assert d["completionRate"] == 0.75
    assert d["completionPct"] == 75
    assert d["totalCount"] == 4


def test_profile_defaults_and_bad_mode():
    assert Profile.from_dict({}) == Profile()
    p = Profile.from_dict({"timezone": "Europe/Berlin", "default_history_mode": "decade"})
    assert p.timezone == "Europe/Berlin"
    assert p.default_history_mode == "weekday"
