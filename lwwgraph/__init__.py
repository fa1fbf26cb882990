"""
LWW Graph
A state-based CRDT directed graph: Last-Writer-Wins element sets of
vertices and edges that converge under merge in any order.
"""

__version__ = "1.0.0"
__author__ = "The LWW Graph Contributors"

from .errors import LWWGraphError, NotFoundError, CodecError, TimestampError
from .crdt import LWWSet, LWWGraph
from .sync import Timestamp, LogicalClock
from .config import ReplicaConfig, configure_logging
from .replica import Replica, ReplicaStats

__all__ = [
    # Errors
    'LWWGraphError',
    'NotFoundError',
    'CodecError',
    'TimestampError',
    # CRDT
    'LWWSet',
    'LWWGraph',
    # Sync
    'Timestamp',
    'LogicalClock',
    # Replica
    'ReplicaConfig',
    'configure_logging',
    'Replica',
    'ReplicaStats',
]
