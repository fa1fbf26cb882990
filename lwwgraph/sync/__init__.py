"""Replica synchronization helpers: clocks and state encoding."""

from .clock import Timestamp, LogicalClock
from .codec import encode_state, decode_state, dumps, loads, state_digest

__all__ = [
    'Timestamp', 'LogicalClock',
    'encode_state', 'decode_state', 'dumps', 'loads', 'state_digest',
]
