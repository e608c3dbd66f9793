"""Counters and gauges kept by the cache about nodes, applications and allocations."""

from __future__ import annotations

import threading
from collections import defaultdict

ACTIVE_NODES = "active_nodes"
FAILED_NODES = "failed_nodes"
TOTAL_APPLICATIONS_ADDED = "total_applications_added"
TOTAL_APPLICATIONS_REJECTED = "total_applications_rejected"
TOTAL_APPLICATIONS_RUNNING = "total_applications_running"
TOTAL_APPLICATIONS_COMPLETED = "total_applications_completed"
SCHEDULED_ALLOCATION_SUCCESSES = "scheduled_allocation_successes"
SCHEDULED_ALLOCATION_FAILURES = "scheduled_allocation_failures"
SCHEDULED_ALLOCATION_ERRORS = "scheduled_allocation_errors"


class SchedulerMetrics:
    """Thread-safe named counters; a metric that was never touched reads as zero."""

    def __init__(self) -> None:
        self._values: defaultdict[str, int] = defaultdict(int)
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        with self._lock:
            return f"SchedulerMetrics({dict(self._values)!r})"

    @staticmethod
    def _check(name: str, amount: int) -> None:
        if not name:
            raise ValueError("metric name must not be empty")
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise TypeError(f"metric amount must be an integer, got {amount!r}")
        if amount < 0:
            raise ValueError(f"metric amount must not be negative, got {amount}")

    def increment(self, name: str, amount: int = 1) -> int:
        """Raise a metric by ``amount`` and return its new value."""
        self._check(name, amount)
        with self._lock:
            self._values[name] += amount
            return self._values[name]

    def decrement(self, name: str, amount: int = 1) -> int:
        """Lower a metric by ``amount`` and return its new value."""
        self._check(name, amount)
        with self._lock:
            self._values[name] -= amount
            return self._values[name]

    def value(self, name: str) -> int:
        """Return the current value of a metric, zero when never set."""
        with self._lock:
            return self._values.get(name, 0)