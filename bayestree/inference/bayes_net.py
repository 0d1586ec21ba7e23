"""
bayestree/inference/bayes_net.py

Bayes net: conditionals in elimination order (first eliminated first).
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Tuple

from bayestree.core.keys import Key, Ordering
from bayestree.factors.base import Conditional


class BayesNet:
    """Ordered sequence of conditionals."""

    def __init__(self, conditionals: Iterable[Conditional] = ()):
        self._conditionals: List[Conditional] = list(conditionals)

    def push_back(self, conditional: Conditional) -> None:
        self._conditionals.append(conditional)

    def frontals(self) -> Tuple[Key, ...]:
        """Frontal keys in elimination order."""
        return tuple(k for c in self._conditionals for k in c.frontals)

    def ordering(self) -> Ordering:
        """The elimination ordering that produced this Bayes net."""
        return Ordering(self.frontals())

    def structure(self) -> Tuple[Tuple[Tuple[Key, ...], frozenset], ...]:
        """(frontals, parent set) per conditional, in order."""
        return tuple((tuple(c.frontals), frozenset(c.parents)) for c in self._conditionals)

    def __iter__(self) -> Iterator[Conditional]:
        return iter(self._conditionals)

    def __reversed__(self) -> Iterator[Conditional]:
        return reversed(self._conditionals)

    def __len__(self) -> int:
        return len(self._conditionals)

    def __getitem__(self, i: int) -> Conditional:
        return self._conditionals[i]

    def __repr__(self) -> str:
        return f"BayesNet({self._conditionals!r})"
