"""
Last-Writer-Wins element set.
"""

from typing import Dict, Generic, Hashable, Iterator, List, Mapping, Optional, TypeVar
from types import MappingProxyType

from ..errors import NotFoundError

E = TypeVar("E", bound=Hashable)
T = TypeVar("T")


class LWWSet(Generic[E, T]):
    """
    Last-Writer-Wins element set.

    Keeps the latest add timestamp and the latest remove timestamp seen
    for every element. An element is present when it was added and its
    add timestamp is strictly greater than its remove timestamp, so a
    remove wins over an add carrying the same timestamp.

    Nothing is ever deleted from the two maps; merging is the pointwise
    maximum of both maps.
    """

    __slots__ = ("_add", "_remove")

    def __init__(self):
        self._add: Dict[E, T] = {}
        self._remove: Dict[E, T] = {}

    def add(self, element: E, timestamp: T):
        """Record an add of element at timestamp."""
        current = self._add.get(element)
        if element not in self._add or timestamp > current:
            self._add[element] = timestamp

    def remove(self, element: E, timestamp: T):
        """Record a remove of element at timestamp."""
        current = self._remove.get(element)
        if element not in self._remove or timestamp > current:
            self._remove[element] = timestamp

    def add_exists(self, element: E) -> bool:
        """Was the element ever added?"""
        return element in self._add

    def remove_exists(self, element: E) -> bool:
        """Was the element ever removed?"""
        return element in self._remove

    def add_timestamp(self, element: E) -> T:
        """
        Latest add timestamp of element.

        Raises:
            NotFoundError: if the element was never added
        """
        try:
            return self._add[element]
        except KeyError:
            raise NotFoundError(element, "add") from None

    def remove_timestamp(self, element: E) -> T:
        """
        Latest remove timestamp of element.

        Raises:
            NotFoundError: if the element was never removed
        """
        try:
            return self._remove[element]
        except KeyError:
            raise NotFoundError(element, "remove") from None

    def contains(self, element: E) -> bool:
        """Is the element currently in the set?"""
        if element not in self._add:
            return False
        if element not in self._remove:
            return True
        return self._add[element] > self._remove[element]

    def merge(self, other: "LWWSet[E, T]"):
        """Fold the state of another set into this one."""
        for element, timestamp in other._add.items():
            self.add(element, timestamp)
        for element, timestamp in other._remove.items():
            self.remove(element, timestamp)

    def add_map(self) -> Mapping[E, T]:
        """Read-only view of the add timestamps."""
        return MappingProxyType(self._add)

    def remove_map(self) -> Mapping[E, T]:
        """Read-only view of the remove timestamps."""
        return MappingProxyType(self._remove)

    def elements(self) -> List[E]:
        """Present elements, in the order they were first added."""
        return [e for e in self._add if self.contains(e)]

    def timestamps(self) -> Iterator[T]:
        """Every recorded add and remove timestamp."""
        yield from self._add.values()
        yield from self._remove.values()

    def latest_timestamp(self) -> Optional[T]:
        return max(self.timestamps(), default=None)

    def copy(self) -> "LWWSet[E, T]":
        clone = LWWSet()
        clone._add = dict(self._add)
        clone._remove = dict(self._remove)
        return clone

    def __contains__(self, element) -> bool:
        return self.contains(element)

    def __len__(self) -> int:
        return sum(1 for e in self._add if self.contains(e))

    def __eq__(self, other) -> bool:
        if not isinstance(other, LWWSet):
            return NotImplemented
        return self._add == other._add and self._remove == other._remove

    __hash__ = None

    def __repr__(self) -> str:
        return f"LWWSet(added={len(self._add)}, removed={len(self._remove)})"
