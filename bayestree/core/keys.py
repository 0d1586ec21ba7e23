"""
bayestree/core/keys.py

Variable keys and elimination orderings.

Keys are opaque hashable identifiers. An Ordering is a sequence of distinct
keys that fixes the order in which variables are eliminated; it also
serves as a key -> position registry.
"""

from __future__ import annotations

from typing import Dict, Hashable, Iterable, Iterator, List, Tuple, TypeAlias

from bayestree.core.errors import OrderingError

Key: TypeAlias = Hashable


class Ordering:
    """
    Total elimination order over a set of keys.

    Every key appears at most once. Positions are assigned in insertion
    order and never change.
    """

    def __init__(self, keys: Iterable[Key] = ()):
        self._keys: List[Key] = []
        self._pos: Dict[Key, int] = {}
        for k in keys:
            self.push_back(k)

    @staticmethod
    def sorted(keys: Iterable[Key], reverse: bool = False) -> "Ordering":
        """Ordering of the given keys in sorted order."""
        return Ordering(sorted(set(keys), reverse=reverse))

    def push_back(self, key: Key) -> None:
        """Append a key; raises OrderingError on duplicates."""
        if key in self._pos:
            raise OrderingError(f"Key {key!r} appears twice in ordering")
        self._pos[key] = len(self._keys)
        self._keys.append(key)

    def position(self, key: Key) -> int:
        """Position of a key in the ordering."""
        try:
            return self._pos[key]
        except KeyError:
            raise OrderingError(f"Key {key!r} is not in the ordering") from None

    def keys(self) -> Tuple[Key, ...]:
        return tuple(self._keys)

    def __contains__(self, key: object) -> bool:
        return key in self._pos

    def __iter__(self) -> Iterator[Key]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __getitem__(self, i: int) -> Key:
        return self._keys[i]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Ordering):
            return self._keys == other._keys
        return NotImplemented

    def __repr__(self) -> str:
        return f"Ordering({self._keys!r})"
