"""Free-tier usage tracking.

The shared community key has a daily and monthly allowance. Counters are
persisted as a single JSON record (~/.taskfoundry/usage.json) and re-read on
every free-tier call so day and month rollover is always current.

Concurrent CLI processes are not synchronized; a read-modify-write race can
miscount by the number of overlapping calls.
"""

import json
import logging
from abc import ABC, abstractmethod
from datetime import date
from pathlib import Path
from typing import Callable, Optional

from pydantic import BaseModel, ValidationError

from taskfoundry import global_config
from taskfoundry.config import FREE_TIER_DAILY_LIMIT, FREE_TIER_MONTHLY_LIMIT

logger = logging.getLogger("taskfoundry")


class UsageCounter(BaseModel):
    """Free-tier request counters for the current day and month."""

    day_count: int = 0
    month_count: int = 0
    last_day_key: str = ""
    last_month_key: str = ""


class UsageStore(ABC):
    """Persistence interface for the usage record."""

    @abstractmethod
    def load(self) -> Optional[dict]:
        """Return the stored record, or None if nothing is stored."""
        pass

    @abstractmethod
    def save(self, data: dict) -> None:
        pass


class JsonFileUsageStore(UsageStore):
    """Usage record stored as a JSON file (whole-file overwrite)."""

    def __init__(self, path: Optional[Path] = None):
        self._path = path

    @property
    def path(self) -> Path:
        # Resolved lazily so tests can redirect the config dir
        return self._path or global_config.get_usage_file_path()

    def load(self) -> Optional[dict]:
        if not self.path.exists():
            return None
        with open(self.path, "r") as f:
            return json.load(f)

    def save(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(data, f, indent=2)


class MemoryUsageStore(UsageStore):
    """In-memory usage record."""

    def __init__(self, data: Optional[dict] = None):
        self.data = dict(data) if data is not None else None
        self.saves = 0

    def load(self) -> Optional[dict]:
        return dict(self.data) if self.data is not None else None

    def save(self, data: dict) -> None:
        self.data = dict(data)
        self.saves += 1


def day_key(day: date) -> str:
    return day.isoformat()


def month_key(day: date) -> str:
    return day.strftime("%Y-%m")


class UsageTracker:
    """Read, roll over and increment the free-tier counters.

    Args:
        store: Where the record lives. Defaults to ~/.taskfoundry/usage.json.
        daily_limit: Requests allowed per calendar day.
        monthly_limit: Requests allowed per calendar month.
        clock: Returns today's date; injectable for tests.
    """

    def __init__(
        self,
        store: Optional[UsageStore] = None,
        daily_limit: int = FREE_TIER_DAILY_LIMIT,
        monthly_limit: int = FREE_TIER_MONTHLY_LIMIT,
        clock: Callable[[], date] = date.today,
    ):
        self.store = store or JsonFileUsageStore()
        self.daily_limit = daily_limit
        self.monthly_limit = monthly_limit
        self.clock = clock

    def _fresh(self, today: date) -> UsageCounter:
        return UsageCounter(last_day_key=day_key(today), last_month_key=month_key(today))

    def read_counters(self) -> UsageCounter:
        """Load the counters, resetting any whose period has ended.

        A missing or corrupted record yields zero counters.
        """
        today = self.clock()
        try:
            data = self.store.load()
            if data is None:
                return self._fresh(today)
            counter = UsageCounter.model_validate(data)
        except (OSError, ValueError, TypeError, ValidationError) as e:
            logger.debug("Resetting unreadable usage record: %s", e)
            return self._fresh(today)

        if counter.last_day_key != day_key(today):
            counter.day_count = 0
            counter.last_day_key = day_key(today)
        if counter.last_month_key != month_key(today):
            counter.month_count = 0
            counter.last_month_key = month_key(today)
        return counter

    def can_use(self, counter: UsageCounter) -> bool:
        return counter.day_count < self.daily_limit and counter.month_count < self.monthly_limit

    def remaining(self, counter: UsageCounter) -> int:
        """Requests left before either limit is hit."""
        return max(
            0,
            min(self.daily_limit - counter.day_count, self.monthly_limit - counter.month_count),
        )

    def record_use(self, counter: UsageCounter) -> UsageCounter:
        """Count one successful free-tier call and persist it immediately.

        A failed write is logged; the caller's generation has already succeeded.
        """
        updated = counter.model_copy(
            update={
                "day_count": counter.day_count + 1,
                "month_count": counter.month_count + 1,
            }
        )
        try:
            self.store.save(updated.model_dump())
        except OSError as e:
            logger.warning("Could not save free-tier usage: %s", e)
        return updated
