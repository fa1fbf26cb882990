"""
Last-Writer-Wins directed graph built from LWW element sets.
"""

import logging
from collections import deque
from typing import Dict, Generic, Hashable, Iterator, List, Optional, Set, Tuple, TypeVar

from .lww_set import LWWSet

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Hashable)
T = TypeVar("T")


class LWWGraph(Generic[E, T]):
    """
    Last-Writer-Wins directed graph.

    Stores vertex keys and directed edges, no payload. Vertices live in
    one LWWSet; edges live in one LWWSet of destinations per source
    vertex. Removing a vertex never touches the edge sets: edges touching
    it simply stop being visible (see contains_edge), which keeps merges
    independent of the order in which operations are observed.
    """

    __slots__ = ("_vertices", "_edges")

    def __init__(self):
        self._vertices: LWWSet[E, T] = LWWSet()
        self._edges: Dict[E, LWWSet[E, T]] = {}

    # ============ Vertices ============

    def add_vertex(self, vertex: E, timestamp: T):
        self._vertices.add(vertex, timestamp)

    def remove_vertex(self, vertex: E, timestamp: T):
        """
        Remove a vertex.

        Every edge touching the vertex that was added at or before this
        timestamp becomes invisible as well.
        """
        self._vertices.remove(vertex, timestamp)

    def contains_vertex(self, vertex: E) -> bool:
        return self._vertices.contains(vertex)

    # ============ Edges ============

    def add_edge(self, source: E, target: E, timestamp: T):
        """
        Add a directed edge.

        The edge is only visible once both vertices exist with an add
        timestamp no later than this one.
        """
        self._edge_set_for(source).add(target, timestamp)

    def remove_edge(self, source: E, target: E, timestamp: T):
        self._edge_set_for(source).remove(target, timestamp)

    def contains_edge(self, source: E, target: E) -> bool:
        """Is the edge source -> target currently valid?"""
        edge_set = self._edges.get(source)
        if edge_set is None or not edge_set.contains(target):
            return False

        vertices = self._vertices
        if not vertices.contains(source) or not vertices.contains(target):
            return False

        added_at = edge_set.add_timestamp(target)

        # A vertex removal hides every edge added no later than it
        if vertices.remove_exists(source) and added_at <= vertices.remove_timestamp(source):
            return False
        if vertices.remove_exists(target) and added_at <= vertices.remove_timestamp(target):
            return False

        # Edges may not predate their vertices
        if added_at < vertices.add_timestamp(source) or added_at < vertices.add_timestamp(target):
            return False

        return True

    def edge_set(self, source: E) -> Optional[LWWSet[E, T]]:
        """Copy of the structural edge set for a source vertex, or None if never touched."""
        edge_set = self._edges.get(source)
        return edge_set.copy() if edge_set is not None else None

    def _edge_set_for(self, source: E) -> LWWSet[E, T]:
        edge_set = self._edges.get(source)
        if edge_set is None:
            edge_set = self._edges[source] = LWWSet()
        return edge_set

    # ============ Merge ============

    def merge(self, other: "LWWGraph[E, T]"):
        """Fold the state of another replica's graph into this one."""
        self._vertices.merge(other._vertices)
        for source, edge_set in other._edges.items():
            self.merge_edge_set(source, edge_set)
        logger.debug("Merged graph with %d vertex entries and %d edge sources",
                     len(other._vertices.add_map()), len(other._edges))

    def merge_vertex_set(self, vertex_set: LWWSet[E, T]):
        """Fold a vertex set into this graph's vertices."""
        self._vertices.merge(vertex_set)

    def merge_edge_set(self, source: E, edge_set: LWWSet[E, T]):
        """Fold one structural edge set into the edges leaving source."""
        self._edge_set_for(source).merge(edge_set)

    # ============ Queries ============

    def vertices(self) -> List[E]:
        """Vertices currently present."""
        return self._vertices.elements()

    def edges(self) -> List[Tuple[E, E]]:
        """Edges currently valid, as (source, target) pairs."""
        return [
            (source, target)
            for source, edge_set in self._edges.items()
            for target in edge_set.add_map()
            if self.contains_edge(source, target)
        ]

    def all_connected_vertices(self, vertex: E) -> Set[E]:
        """
        All vertices joined to vertex by a valid edge in either direction.

        Scans every structural edge, O(edges).
        """
        connected = set()
        for source, edge_set in self._edges.items():
            if source == vertex:
                for target in edge_set.add_map():
                    if self.contains_edge(source, target):
                        connected.add(target)
            elif vertex in edge_set.add_map() and self.contains_edge(source, vertex):
                connected.add(source)
        return connected

    def any_path(self, source: E, target: E) -> List[E]:
        """
        Shortest path over valid directed edges, found by BFS.

        Returns:
            Vertices from source to target inclusive, or an empty list if
            either vertex is absent or target is unreachable.
        """
        if not self.contains_vertex(source) or not self.contains_vertex(target):
            return []

        previous: Dict[E, E] = {source: source}
        queue = deque([source])

        while queue:
            current = queue.popleft()

            if current == target:
                path = [current]
                while current != source:
                    current = previous[current]
                    path.append(current)
                path.reverse()
                logger.debug("Path %r -> %r found with %d vertices", source, target, len(path))
                return path

            edge_set = self._edges.get(current)
            if edge_set is None:
                continue

            for following in edge_set.add_map():
                if following not in previous and self.contains_edge(current, following):
                    previous[following] = current
                    queue.append(following)

        logger.debug("No path %r -> %r", source, target)
        return []

    # ============ State ============

    def timestamps(self) -> Iterator[T]:
        """Every timestamp recorded for vertices and edges."""
        yield from self._vertices.timestamps()
        for edge_set in self._edges.values():
            yield from edge_set.timestamps()

    def latest_timestamp(self) -> Optional[T]:
        """Greatest timestamp recorded anywhere in the graph."""
        return max(self.timestamps(), default=None)

    def vertex_set(self) -> LWWSet[E, T]:
        """Copy of the structural vertex set."""
        return self._vertices.copy()

    def edge_sets(self) -> Dict[E, LWWSet[E, T]]:
        """Copies of the structural edge sets, keyed by source vertex."""
        return {source: edge_set.copy() for source, edge_set in self._edges.items()}

    def copy(self) -> "LWWGraph[E, T]":
        clone = LWWGraph()
        clone._vertices = self._vertices.copy()
        clone._edges = {source: edge_set.copy() for source, edge_set in self._edges.items()}
        return clone

    def __eq__(self, other) -> bool:
        if not isinstance(other, LWWGraph):
            return NotImplemented
        return self._vertices == other._vertices and self._edges == other._edges

    __hash__ = None

    def __repr__(self) -> str:
        return f"LWWGraph(vertices={len(self._vertices)}, edge_sources={len(self._edges)})"
