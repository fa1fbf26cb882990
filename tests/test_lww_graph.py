"""
LWW Element Graph Tests: operations, precedence, connections, merging.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from lwwgraph.crdt import LWWGraph, LWWSet


# ============ Operations ============

def test_idempotent_operations():
    """Repeated identical operations have no extra effect."""
    graph = LWWGraph()

    assert not graph.contains_vertex(0)

    graph.add_vertex(0, 0)
    graph.add_vertex(0, 0)
    assert graph.contains_vertex(0)

    graph.add_vertex(1, 0)

    graph.add_edge(0, 1, 1)
    graph.add_edge(0, 1, 1)
    assert graph.contains_edge(0, 1)

    graph.remove_edge(0, 1, 2)
    assert not graph.contains_edge(0, 1)

    graph.remove_edge(0, 1, 2)
    assert not graph.contains_edge(0, 1)


def test_commutative_operations():
    """Operation order within a replica does not matter."""
    a = LWWGraph()
    b = LWWGraph()

    a.add_vertex(0, 0)
    a.add_vertex(1, 1)

    b.add_vertex(1, 1)
    b.add_vertex(0, 0)

    assert a == b

    a.add_edge(1, 0, 2)
    a.remove_edge(1, 0, 3)

    b.remove_edge(1, 0, 3)
    b.add_edge(1, 0, 2)

    assert a == b

    a.merge(b)
    assert a == b

    b.merge(a)
    assert a == b


def test_associative_merge():
    """Grouping of merges does not matter."""
    a, b, c = LWWGraph(), LWWGraph(), LWWGraph()
    a.add_vertex(0, 0)
    b.add_vertex(1, 1)
    c.add_vertex(2, 2)

    x, y, z = LWWGraph(), LWWGraph(), LWWGraph()
    x.add_vertex(0, 0)
    y.add_vertex(1, 1)
    z.add_vertex(2, 2)

    a.merge(b)
    a.merge(c)

    y.merge(z)
    x.merge(y)

    assert a == x


def test_merge_with_self_is_noop():
    graph = LWWGraph()
    graph.add_vertex(0, 0)
    graph.add_vertex(1, 0)
    graph.add_edge(0, 1, 1)
    graph.remove_vertex(1, 2)

    before = graph.copy()
    graph.merge(graph.copy())
    graph.merge(graph)

    assert graph == before


# ============ Precedence ============

def test_add_remove_same_time():
    """Vertex added and removed at the same time is absent."""
    graph = LWWGraph()

    graph.add_vertex(0, 0)
    graph.remove_vertex(0, 0)

    assert not graph.contains_vertex(0)


def test_edge_with_vertices_same_time():
    """Edge recorded before its vertices, all at the same timestamp."""
    graph = LWWGraph()

    graph.add_edge(0, 1, 0)
    graph.add_vertex(0, 0)
    graph.add_vertex(1, 0)

    assert graph.contains_edge(0, 1)
    assert not graph.contains_edge(1, 0)
    assert graph.contains_vertex(0)
    assert graph.contains_vertex(1)


def test_vertex_removal_hides_edges():
    """Removing a vertex at the edge's timestamp hides the edge."""
    graph = LWWGraph()

    graph.add_vertex(0, 0)
    graph.add_vertex(1, 0)

    graph.add_edge(0, 1, 1)
    graph.remove_vertex(1, 1)

    assert not graph.contains_edge(0, 1)
    assert graph.contains_vertex(0)
    assert not graph.contains_vertex(1)


def test_edge_before_vertices():
    """Edge stamped earlier than its vertices is invalid."""
    graph = LWWGraph()

    graph.add_vertex(0, 0)
    graph.add_vertex(1, 0)

    graph.add_edge(0, 1, -1)

    assert not graph.contains_edge(0, 1)
    assert graph.contains_vertex(0)
    assert graph.contains_vertex(1)


def test_readded_vertex_does_not_revive_old_edges():
    """Edges removed along with a vertex stay hidden after it returns."""
    graph = LWWGraph()

    graph.add_vertex(0, 0)
    graph.add_vertex(1, 0)
    graph.add_edge(0, 1, 1)
    graph.remove_vertex(1, 2)
    graph.add_vertex(1, 3)

    assert graph.contains_vertex(1)
    assert not graph.contains_edge(0, 1)

    graph.add_edge(0, 1, 4)
    assert graph.contains_edge(0, 1)


def test_edge_requires_both_vertices():
    graph = LWWGraph()

    graph.add_vertex(0, 0)
    graph.add_edge(0, 1, 1)

    assert not graph.contains_edge(0, 1)
    assert not graph.contains_edge(5, 6)


def test_vertices_and_edges_listing():
    graph = LWWGraph()
    for v in range(3):
        graph.add_vertex(v, 0)
    graph.add_edge(0, 1, 1)
    graph.add_edge(1, 2, 1)
    graph.remove_vertex(2, 2)

    assert graph.vertices() == [0, 1]
    assert graph.edges() == [(0, 1)]


# ============ Connections ============

def test_all_connected_vertices():
    """Incoming and outgoing connections are both reported."""
    graph = LWWGraph()

    graph.add_vertex(0, 0)

    connected = 20

    for i in range(1, connected + 1):
        graph.add_vertex(i, 0)
        graph.add_edge(0, i, 0)

    assert len(graph.all_connected_vertices(0)) == connected

    for i in range(1, connected + 1):
        graph.add_vertex(connected + i, 1)
        graph.add_edge(connected + i, 0, 1)

    result = graph.all_connected_vertices(0)
    assert len(result) == connected * 2
    assert result == set(range(1, 2 * connected + 1))


def test_connected_vertices_skip_invalid_edges():
    graph = LWWGraph()
    for v in range(3):
        graph.add_vertex(v, 0)
    graph.add_edge(0, 1, 1)
    graph.add_edge(2, 0, 1)
    graph.remove_edge(0, 1, 2)

    assert graph.all_connected_vertices(0) == {2}
    assert graph.all_connected_vertices(1) == set()
    assert graph.all_connected_vertices(42) == set()


def test_queries_do_not_create_edge_sets():
    """Lookups on vertices without outgoing edges leave state unchanged."""
    graph = LWWGraph()
    graph.add_vertex(0, 0)

    assert not graph.contains_edge(0, 1)
    assert graph.all_connected_vertices(0) == set()
    assert graph.edge_set(0) is None
    assert graph == _graph_with_vertex(0, 0)


def _graph_with_vertex(vertex, timestamp):
    graph = LWWGraph()
    graph.add_vertex(vertex, timestamp)
    return graph


# ============ Merging ============

def test_merge_two_vertices():
    graph, other = LWWGraph(), LWWGraph()

    graph.add_vertex(0, 0)
    other.add_vertex(1, 1)

    graph.merge(other)

    assert graph.contains_vertex(0)
    assert graph.contains_vertex(1)


def test_merge_vertex_removal():
    graph, other = LWWGraph(), LWWGraph()

    graph.add_vertex(0, 1)
    other.add_vertex(0, 0)
    other.remove_vertex(0, 2)

    graph.merge(other)

    assert not graph.contains_vertex(0)


def test_merge_cross_removal():
    graph, other = LWWGraph(), LWWGraph()

    graph.add_vertex(0, 1)
    graph.remove_vertex(0, 3)
    other.add_vertex(0, 0)
    other.remove_vertex(0, 2)

    graph.merge(other)

    assert not graph.contains_vertex(0)


def test_merge_nested_lifetimes():
    """One replica's vertex lifetime lies inside the other's."""
    graph, other = LWWGraph(), LWWGraph()

    graph.add_vertex(0, 1)
    graph.remove_vertex(0, 2)
    other.add_vertex(0, 0)
    other.remove_vertex(0, 3)

    graph.merge(other)

    assert not graph.contains_vertex(0)


def test_merge_edges_last_writer_wins():
    """One of the merged edges disappears because its vertices are newer."""
    graph, other = LWWGraph(), LWWGraph()

    graph.add_vertex(0, 0)
    graph.add_vertex(1, 1)
    graph.add_edge(1, 0, 2)

    other.add_vertex(0, 2)
    other.add_vertex(1, 3)
    other.add_edge(0, 1, 4)

    graph.merge(other)

    assert graph.contains_edge(0, 1)
    assert not graph.contains_edge(1, 0)

    other.remove_edge(0, 1, 5)
    graph.merge(other)

    assert not graph.contains_edge(0, 1)


def test_merge_converges_both_directions():
    """Replicas agree on every vertex and edge after merging both ways."""
    a, b = LWWGraph(), LWWGraph()

    a.add_vertex("x", 1)
    a.add_vertex("y", 1)
    a.add_edge("x", "y", 2)
    b.add_vertex("y", 1)
    b.remove_vertex("y", 3)
    b.add_vertex("z", 4)

    a.merge(b)
    b.merge(a)

    assert a == b
    for v in ("x", "y", "z"):
        assert a.contains_vertex(v) == b.contains_vertex(v)
    assert not a.contains_edge("x", "y")
    assert a.latest_timestamp() == 4


def test_copy_is_independent():
    graph = LWWGraph()
    graph.add_vertex(0, 0)
    graph.add_vertex(1, 0)
    graph.add_edge(0, 1, 1)

    clone = graph.copy()
    clone.remove_edge(0, 1, 2)

    assert graph.contains_edge(0, 1)
    assert not clone.contains_edge(0, 1)
    assert graph != clone


def test_structural_accessors_return_copies():
    """Mutating what the accessors hand out leaves the graph unchanged."""
    graph = LWWGraph()
    graph.add_vertex(0, 0)
    graph.add_vertex(1, 0)
    graph.add_edge(0, 1, 1)
    before = graph.copy()

    graph.vertex_set().remove(0, 5)
    graph.edge_set(0).remove(1, 5)
    graph.edge_sets()[0].remove(1, 5)

    assert graph == before
    assert graph.contains_vertex(0)
    assert graph.contains_edge(0, 1)


def test_merge_vertex_set():
    graph = LWWGraph()
    graph.add_vertex(0, 1)

    incoming = LWWSet()
    incoming.remove(0, 2)
    incoming.add(1, 2)
    graph.merge_vertex_set(incoming)

    assert graph.vertices() == [1]
    assert sorted(graph.timestamps()) == [1, 2, 2]
