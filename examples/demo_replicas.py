"""
Demo of three graph replicas diverging and converging.
Shows concurrent edits, a vertex removal hiding edges, and merge order independence.
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from lwwgraph import Replica


def print_header(text):
    """Print a section header."""
    print("\n" + "=" * 60)
    print(f" {text}")
    print("=" * 60)


def show(replica):
    print(f"  {replica.replica_id}: vertices={replica.vertices()} edges={replica.edges()}")


def demo():
    """Run the replica demo."""
    print_header("LWW Graph Replica Demo")

    a, b, c = Replica("a"), Replica("b"), Replica("c")

    # Step 1: Shared starting point
    print_header("Step 1: Build a route map on replica a and share it")
    for city in ("paris", "lyon", "nice", "milan"):
        a.add_vertex(city)
    a.add_edge("paris", "lyon")
    a.add_edge("lyon", "nice")
    a.add_edge("nice", "milan")
    b.merge(a)
    c.merge(a)
    for replica in (a, b, c):
        show(replica)

    # Step 2: Concurrent edits
    print_header("Step 2: Concurrent edits")
    b.remove_vertex("nice")
    c.add_vertex("turin")
    c.add_edge("lyon", "turin")
    c.add_edge("turin", "milan")
    for replica in (a, b, c):
        show(replica)

    # Step 3: Merge in different orders
    print_header("Step 3: Merge in different orders")
    left = Replica("left")
    left.merge(a)
    left.merge(b)
    left.merge(c)

    right = Replica("right")
    right.merge(c)
    right.merge(b)
    right.merge(a)

    show(left)
    show(right)
    print(f"  digests equal: {left.digest() == right.digest()}")
    print(f"  route paris -> milan: {' -> '.join(left.any_path('paris', 'milan'))}")


if __name__ == "__main__":
    demo()
