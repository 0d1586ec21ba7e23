"""
bayestree/tree/clique.py

Bayes tree cliques.

A clique holds one or more conditionals in elimination order. Their
separators shrink along the list; the last conditional's separator is the
clique's separator. The tree owns cliques top-down through child lists;
the parent link is a weak reference so that parent <-> child never forms
an ownership cycle.
"""

from __future__ import annotations

import weakref
from typing import Iterator, List, Optional, Sequence, Tuple

from bayestree.core.keys import Key
from bayestree.factors.base import Conditional, Factor


class Clique:
    """
    Node of a Bayes tree.

    Attributes:
        conditionals: Conditionals in elimination order
    """

    def __init__(self, conditional: Conditional):
        self._conditionals: List[Conditional] = [conditional]
        self._parent: Optional[weakref.ReferenceType] = None
        self._children: List["Clique"] = []

    @classmethod
    def from_conditionals(cls, conditionals: Sequence[Conditional]) -> "Clique":
        """Clique holding the given conditionals (elimination order)."""
        clique = cls(conditionals[0])
        clique._conditionals.extend(conditionals[1:])
        return clique

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def conditionals(self) -> Tuple[Conditional, ...]:
        return tuple(self._conditionals)

    def frontals(self) -> Tuple[Key, ...]:
        """Frontal keys of all conditionals, in elimination order."""
        return tuple(k for c in self._conditionals for k in c.frontals)

    def separator(self) -> Tuple[Key, ...]:
        """Separator of the clique: the last conditional's parents."""
        return tuple(self._conditionals[-1].parents)

    def keys(self) -> Tuple[Key, ...]:
        """Frontals followed by separator."""
        return self.frontals() + self.separator()

    def parent(self) -> Optional["Clique"]:
        return self._parent() if self._parent is not None else None

    def children(self) -> Tuple["Clique", ...]:
        return tuple(self._children)

    def is_root(self) -> bool:
        return self.parent() is None

    def as_factors(self) -> List[Factor]:
        """One factor per conditional, over that conditional's keys."""
        return [c.as_factor() for c in self._conditionals]

    def subtree(self) -> Iterator["Clique"]:
        """Preorder iteration over this clique and its descendants."""
        stack = [self]
        while stack:
            c = stack.pop()
            yield c
            stack.extend(reversed(c._children))

    # ------------------------------------------------------------------
    # Structural edits (used by tree construction and updates only)
    # ------------------------------------------------------------------

    def add_conditional_front(self, conditional: Conditional) -> None:
        """Merge an earlier-eliminated conditional into this clique."""
        self._conditionals.insert(0, conditional)

    def add_child(self, child: "Clique") -> None:
        child._parent = weakref.ref(self)
        self._children.append(child)

    def remove_child(self, child: "Clique") -> None:
        self._children.remove(child)
        child._parent = None

    def _detach_all(self) -> None:
        for child in self._children:
            child._parent = None
        self._children = []

    def __repr__(self) -> str:
        front = ",".join(map(repr, self.frontals()))
        sep = self.separator()
        if not sep:
            return f"Clique({front})"
        return f"Clique({front} : {','.join(map(repr, sep))})"
