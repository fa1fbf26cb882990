"""State-based CRDT primitives."""

from .lww_set import LWWSet
from .lww_graph import LWWGraph

__all__ = ['LWWSet', 'LWWGraph']
