"""
Logical clocks for stamping replica operations.
"""

import threading
from typing import NamedTuple, Optional


class Timestamp(NamedTuple):
    """
    Lamport timestamp.

    Ordered by counter first, then by replica id, so two replicas that
    pick the same counter still produce distinct, totally ordered stamps.
    """
    counter: int
    replica_id: str

    def __str__(self) -> str:
        return f"{self.counter}@{self.replica_id}"


class LogicalClock:
    """
    Lamport clock owned by a single replica.

    tick() before every local operation, observe() after merging state
    received from another replica.
    """

    def __init__(self, replica_id: str, counter: int = 0):
        self.replica_id = replica_id
        self._counter = counter
        self._lock = threading.Lock()

    def tick(self) -> Timestamp:
        """Advance the clock and return a fresh timestamp."""
        with self._lock:
            self._counter += 1
            return Timestamp(self._counter, self.replica_id)

    def observe(self, timestamp: Optional[Timestamp]):
        """Move the clock past a timestamp seen from elsewhere."""
        if timestamp is None:
            return
        with self._lock:
            self._counter = max(self._counter, timestamp.counter)

    def current(self) -> Timestamp:
        with self._lock:
            return Timestamp(self._counter, self.replica_id)

    def __repr__(self) -> str:
        return f"LogicalClock({self.replica_id!r}, counter={self._counter})"
