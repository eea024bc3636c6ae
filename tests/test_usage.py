"""Tests for taskfoundry.usage module."""

import json
from datetime import date

import pytest

from taskfoundry.usage import (
    JsonFileUsageStore,
    MemoryUsageStore,
    UsageCounter,
    UsageStore,
    UsageTracker,
    day_key,
    month_key,
)


def _record(day_count, month_count, day, month):
    return {
        "day_count": day_count,
        "month_count": month_count,
        "last_day_key": day,
        "last_month_key": month,
    }


class TestKeys:
    """Tests for period keys."""

    def test_day_key(self):
        assert day_key(date(2024, 3, 5)) == "2024-03-05"

    def test_month_key(self):
        assert month_key(date(2024, 3, 5)) == "2024-03"


class TestReadCounters:
    """Tests for UsageTracker.read_counters."""

    def test_missing_record_is_zero(self, usage_tracker, fixed_today):
        counter = usage_tracker.read_counters()

        assert counter.day_count == 0
        assert counter.month_count == 0
        assert counter.last_day_key == "2024-03-15"
        assert counter.last_month_key == "2024-03"

    def test_same_day_keeps_counts(self, fixed_today):
        store = MemoryUsageStore(_record(7, 40, "2024-03-15", "2024-03"))
        tracker = UsageTracker(store=store, clock=lambda: fixed_today)

        counter = tracker.read_counters()

        assert counter.day_count == 7
        assert counter.month_count == 40

    def test_new_day_resets_day_only(self, fixed_today):
        """Test the day counter rolls over while the month keeps counting."""
        store = MemoryUsageStore(_record(50, 300, "2024-03-14", "2024-03"))
        tracker = UsageTracker(store=store, clock=lambda: fixed_today)

        counter = tracker.read_counters()

        assert counter.day_count == 0
        assert counter.month_count == 300
        assert counter.last_day_key == "2024-03-15"

    def test_new_month_resets_both(self):
        """Test the first day of a month resets both counters."""
        store = MemoryUsageStore(_record(12, 999, "2024-02-29", "2024-02"))
        tracker = UsageTracker(store=store, clock=lambda: date(2024, 3, 1))

        counter = tracker.read_counters()

        assert counter.day_count == 0
        assert counter.month_count == 0
        assert counter.last_month_key == "2024-03"

    def test_corrupt_record_is_zero(self, fixed_today):
        store = MemoryUsageStore({"day_count": "lots", "month_count": None})
        tracker = UsageTracker(store=store, clock=lambda: fixed_today)

        counter = tracker.read_counters()

        assert counter.day_count == 0
        assert counter.month_count == 0

    def test_corrupt_json_file_is_zero(self, temp_dir, fixed_today):
        path = temp_dir / "usage.json"
        path.write_text("{not json")
        tracker = UsageTracker(store=JsonFileUsageStore(path), clock=lambda: fixed_today)

        counter = tracker.read_counters()

        assert counter.day_count == 0


class TestLimits:
    """Tests for can_use and remaining."""

    def test_under_limits(self, usage_tracker):
        counter = UsageCounter(day_count=49, month_count=100)

        assert usage_tracker.can_use(counter)
        assert usage_tracker.remaining(counter) == 1

    def test_daily_limit_reached(self, usage_tracker):
        counter = UsageCounter(day_count=50, month_count=100)

        assert not usage_tracker.can_use(counter)
        assert usage_tracker.remaining(counter) == 0

    def test_monthly_limit_reached(self, usage_tracker):
        counter = UsageCounter(day_count=0, month_count=1000)

        assert not usage_tracker.can_use(counter)

    def test_remaining_takes_tighter_limit(self, usage_tracker):
        counter = UsageCounter(day_count=10, month_count=995)

        assert usage_tracker.remaining(counter) == 5

    def test_custom_limits(self, usage_store, fixed_today):
        tracker = UsageTracker(
            store=usage_store, daily_limit=2, monthly_limit=3, clock=lambda: fixed_today
        )

        assert not tracker.can_use(UsageCounter(day_count=2))


class TestRecordUse:
    """Tests for UsageTracker.record_use."""

    def test_increments_and_persists(self, usage_tracker, usage_store):
        counter = usage_tracker.read_counters()

        updated = usage_tracker.record_use(counter)

        assert updated.day_count == 1
        assert updated.month_count == 1
        assert usage_store.saves == 1
        assert usage_store.data["day_count"] == 1
        assert usage_store.data["last_day_key"] == "2024-03-15"

    def test_does_not_mutate_input(self, usage_tracker):
        counter = usage_tracker.read_counters()

        usage_tracker.record_use(counter)

        assert counter.day_count == 0

    def test_json_file_round_trip(self, temp_dir, fixed_today):
        """Test counters survive a fresh tracker reading the same file."""
        path = temp_dir / "nested" / "usage.json"
        first = UsageTracker(store=JsonFileUsageStore(path), clock=lambda: fixed_today)
        first.record_use(first.read_counters())
        first.record_use(first.read_counters())

        second = UsageTracker(store=JsonFileUsageStore(path), clock=lambda: fixed_today)

        assert second.read_counters().day_count == 2
        assert json.loads(path.read_text())["month_count"] == 2

    def test_default_path_is_in_config_dir(self, isolated_config):
        store = JsonFileUsageStore()

        assert store.path == isolated_config / "usage.json"

    def test_write_failure_is_logged(self, fixed_today, caplog):
        class ReadOnlyStore(MemoryUsageStore):
            def save(self, data):
                raise OSError("read-only filesystem")

        tracker = UsageTracker(store=ReadOnlyStore(), clock=lambda: fixed_today)

        with caplog.at_level("WARNING", logger="taskfoundry"):
            updated = tracker.record_use(tracker.read_counters())

        assert updated.day_count == 1
        assert "Could not save free-tier usage" in caplog.text


class TestUsageStore:
    """Tests for the UsageStore interface."""

    def test_cannot_instantiate_interface(self):
        with pytest.raises(TypeError):
            UsageStore()

    def test_subclass_must_implement_save(self):
        class LoadOnly(UsageStore):
            def load(self):
                return None

        with pytest.raises(TypeError):
            LoadOnly()
