"""Daily counter of billable provider calls."""

from __future__ import annotations

import logging
import threading
from datetime import date

from pydantic import BaseModel, ConfigDict, Field

_logger = logging.getLogger(__name__)


class QuotaState(BaseModel):
    """Snapshot of a :class:`QuotaCounter`, suitable for persisting."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    count: int = Field(default=0, ge=0)
    day: date = Field(default_factory=date.today)


class QuotaCounter:
    """Thread-safe count of billable calls made on the current day.

    The counter never resets itself: :meth:`reset` is called by whatever
    scheduler the deployment runs at local midnight. Calls are charged on
    attempt, so a failed provider call still counts.
    """

    def __init__(self, state: QuotaState | None = None) -> None:
        self._lock = threading.Lock()
        self._count = 0
        self._day = date.today()
        if state is not None:
            self.restore(state)

    @property
    def count(self) -> int:
        with self._lock:
            return self._count

    @property
    def day(self) -> date:
        with self._lock:
            return self._day

    def consume(self) -> None:
        """Charge one billable call."""
        with self._lock:
            self._count += 1
            count = self._count
        _logger.debug("Daily quota consumed: count=%d", count)

    def reached(self, limit: int) -> bool:
        """Whether *limit* calls have already been made today."""
        with self._lock:
            return self._count >= limit

    def reset(self, day: date | None = None) -> None:
        """Zero the counter and move it to *day* (default: today)."""
        with self._lock:
            previous = self._count
            self._count = 0
            self._day = day or date.today()
            new_day = self._day
        _logger.info("Daily quota reset for %s (previous count=%d)", new_day.isoformat(), previous)

    def state(self) -> QuotaState:
        with self._lock:
            return QuotaState(count=self._count, day=self._day)

    def restore(self, state: QuotaState) -> None:
        """Load a persisted snapshot.

        A snapshot from an earlier day is stale: it restores as a fresh
        counter for today instead.
        """
        today = date.today()
        with self._lock:
            if state.day < today:
                self._count = 0
                self._day = today
            else:
                self._count = state.count
                self._day = state.day
