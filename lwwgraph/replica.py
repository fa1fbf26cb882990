"""
A graph replica: one LWW graph, its clock, and a lock.
Thread-safe; merge is the only point where replicas meet.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, List, Optional, Set, Tuple, Union

from .config import ReplicaConfig, get_default_config
from .crdt import LWWGraph
from .errors import TimestampError
from .sync import LogicalClock, Timestamp, dumps, state_digest

logger = logging.getLogger(__name__)


@dataclass
class ReplicaStats:
    """Statistics for a replica."""
    adds: int = 0
    removes: int = 0
    merges: int = 0
    queries: int = 0
    start_time: float = field(default_factory=time.time)

    def uptime(self) -> float:
        return time.time() - self.start_time

    def to_dict(self) -> Dict:
        return {
            "adds": self.adds,
            "removes": self.removes,
            "merges": self.merges,
            "queries": self.queries,
            "uptime_seconds": self.uptime(),
        }


class ReplicaLogAdapter(logging.LoggerAdapter):
    """
    Tags records with the replica id and drops those below the replica's
    configured level. The shared module logger is never reconfigured.
    """

    def __init__(self, replica_id: str, level: int):
        super().__init__(logger, {"replica_id": replica_id})
        self.min_level = level

    def isEnabledFor(self, level: int) -> bool:
        return level >= self.min_level and self.logger.isEnabledFor(level)

    def process(self, msg, kwargs):
        return f"[{self.extra['replica_id']}] {msg}", kwargs


class Replica:
    """
    A single replica of an LWW graph.

    Every local mutation is stamped from the replica's own Lamport clock.
    Merging copies the other side's state under the other side's lock,
    then joins it under this replica's lock, so two replica locks are
    never held at once.
    """

    def __init__(self, replica_id: str, config: Optional[ReplicaConfig] = None):
        self.config = config or get_default_config(replica_id)
        self.replica_id = replica_id
        self.clock = LogicalClock(replica_id)

        self._graph: LWWGraph[Hashable, Timestamp] = LWWGraph()
        self._lock = threading.RLock()
        self._stats = ReplicaStats()

        self._logger = ReplicaLogAdapter(
            replica_id, logging.getLevelName(self.config.log_level.value))
        self._logger.info("Replica created")

    def _count(self, name: str):
        if self.config.track_stats:
            setattr(self._stats, name, getattr(self._stats, name) + 1)

    # ============ Mutations ============

    def add_vertex(self, vertex: Hashable) -> Timestamp:
        with self._lock:
            timestamp = self.clock.tick()
            self._graph.add_vertex(vertex, timestamp)
            self._count("adds")
            return timestamp

    def remove_vertex(self, vertex: Hashable) -> Timestamp:
        with self._lock:
            timestamp = self.clock.tick()
            self._graph.remove_vertex(vertex, timestamp)
            self._count("removes")
            return timestamp

    def add_edge(self, source: Hashable, target: Hashable) -> Timestamp:
        with self._lock:
            timestamp = self.clock.tick()
            self._graph.add_edge(source, target, timestamp)
            self._count("adds")
            return timestamp

    def remove_edge(self, source: Hashable, target: Hashable) -> Timestamp:
        with self._lock:
            timestamp = self.clock.tick()
            self._graph.remove_edge(source, target, timestamp)
            self._count("removes")
            return timestamp

    # ============ Queries ============

    def contains_vertex(self, vertex: Hashable) -> bool:
        with self._lock:
            self._count("queries")
            return self._graph.contains_vertex(vertex)

    def contains_edge(self, source: Hashable, target: Hashable) -> bool:
        with self._lock:
            self._count("queries")
            return self._graph.contains_edge(source, target)

    def vertices(self) -> List[Hashable]:
        with self._lock:
            self._count("queries")
            return self._graph.vertices()

    def edges(self) -> List[Tuple[Hashable, Hashable]]:
        with self._lock:
            self._count("queries")
            return self._graph.edges()

    def all_connected_vertices(self, vertex: Hashable) -> Set[Hashable]:
        with self._lock:
            self._count("queries")
            return self._graph.all_connected_vertices(vertex)

    def any_path(self, source: Hashable, target: Hashable) -> List[Hashable]:
        with self._lock:
            self._count("queries")
            return self._graph.any_path(source, target)

    # ============ Synchronization ============

    def snapshot(self) -> LWWGraph:
        """Independent copy of the current graph state."""
        with self._lock:
            return self._graph.copy()

    def merge(self, other: Union['Replica', LWWGraph]):
        """
        Fold another replica's state into this one.

        Accepts a Replica or a bare LWWGraph (for example one decoded
        from the wire).

        Raises:
            TimestampError: if the incoming graph holds anything other than
                Timestamp values; the replica is left untouched
        """
        incoming = other.snapshot() if isinstance(other, Replica) else other
        source = other.replica_id if isinstance(other, Replica) else "graph"

        for timestamp in incoming.timestamps():
            if not isinstance(timestamp, Timestamp):
                raise TimestampError(timestamp)

        with self._lock:
            self._graph.merge(incoming)
            self.clock.observe(incoming.latest_timestamp())
            self._count("merges")

        self._logger.debug("Merged state from %s", source)

    def digest(self) -> str:
        with self._lock:
            return state_digest(self._graph)

    def to_bytes(self) -> bytes:
        with self._lock:
            return dumps(self._graph)

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            stats = self._stats.to_dict()
            stats["replica_id"] = self.replica_id
            stats["clock"] = self.clock.current().counter
            stats["vertex_count"] = len(self._graph.vertices())
            stats["edge_count"] = len(self._graph.edges())
            return stats

    def __eq__(self, other) -> bool:
        if not isinstance(other, Replica):
            return NotImplemented
        return self.snapshot() == other.snapshot()

    __hash__ = None

    def __repr__(self) -> str:
        return f"Replica({self.replica_id!r}, clock={self.clock.current().counter})"
