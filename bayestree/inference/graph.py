"""
bayestree/inference/graph.py

Factor graph container.

A FactorGraph is an ordered, mutable collection of factor references.
Order is irrelevant to the semantics; it only fixes iteration order.
Factors are immutable and may be shared between graphs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, Iterator, List, Tuple

import networkx as nx

from bayestree.core.keys import Key
from bayestree.factors.base import Factor

if TYPE_CHECKING:
    from bayestree.inference.bayes_net import BayesNet


class FactorGraph:
    """
    Collection of factors.

    Maintains:
    - Factors in insertion order
    - Keys in first-appearance order
    """

    def __init__(self, factors: Iterable[Factor] = ()):
        self._factors: List[Factor] = []
        for f in factors:
            self.push_back(f)

    @classmethod
    def from_bayes_net(cls, bayes_net: "BayesNet") -> "FactorGraph":
        """One factor per conditional, each over frontals ∪ parents."""
        return cls(c.as_factor() for c in bayes_net)

    def push_back(self, factor: Factor) -> None:
        """Append a factor."""
        if not isinstance(factor, Factor):
            raise TypeError(f"Expected a Factor, got {type(factor).__name__}")
        self._factors.append(factor)

    def extend(self, factors: Iterable[Factor]) -> None:
        """Append all factors of another graph or iterable."""
        for f in factors:
            self.push_back(f)

    def keys(self) -> Tuple[Key, ...]:
        """All keys, in first-appearance order."""
        seen = set()
        out = []
        for f in self._factors:
            for k in f.keys():
                if k not in seen:
                    seen.add(k)
                    out.append(k)
        return tuple(out)

    def variable_index(self) -> Dict[Key, List[int]]:
        """Map from key to the positions of the factors touching it."""
        index: Dict[Key, List[int]] = {}
        for i, f in enumerate(self._factors):
            for k in f.keys():
                index.setdefault(k, []).append(i)
        return index

    def factors_containing(self, key: Key) -> List[Factor]:
        """All factors touching a key."""
        return [f for f in self._factors if key in f.keys()]

    def interaction_graph(self) -> nx.Graph:
        """
        Undirected variable interaction graph.

        Nodes are keys (with a 'rank' attribute giving first-appearance
        order), edges connect keys that share a factor.
        """
        g = nx.Graph()
        for rank, k in enumerate(self.keys()):
            g.add_node(k, rank=rank)
        for f in self._factors:
            ks = f.keys()
            for i in range(len(ks)):
                for j in range(i + 1, len(ks)):
                    g.add_edge(ks[i], ks[j])
        return g

    def copy(self) -> "FactorGraph":
        """Shallow copy: new container, shared factors."""
        return FactorGraph(self._factors)

    def __iter__(self) -> Iterator[Factor]:
        return iter(self._factors)

    def __len__(self) -> int:
        return len(self._factors)

    def __getitem__(self, i: int) -> Factor:
        return self._factors[i]

    def __repr__(self) -> str:
        return f"FactorGraph(factors={len(self._factors)}, keys={len(self.keys())})"
