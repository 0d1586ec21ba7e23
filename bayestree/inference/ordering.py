"""
bayestree/inference/ordering.py

Elimination ordering strategies.

A strategy is an explicit object handed to the updater; any ordering that
covers the graph's keys is correct, the choice only changes the shape of
the resulting tree (fill-in, depth).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import networkx as nx

from bayestree.core.keys import Ordering
from bayestree.inference.graph import FactorGraph


class OrderingStrategy(Protocol):
    """Computes an ordering over exactly the keys of a graph."""

    def compute_ordering(self, graph: FactorGraph) -> Ordering: ...


@dataclass(frozen=True)
class NaturalOrdering:
    """Keys in the order they first appear in the graph."""

    def compute_ordering(self, graph: FactorGraph) -> Ordering:
        return Ordering(graph.keys())


@dataclass(frozen=True)
class SortedOrdering:
    """Keys in sorted order; keys must be mutually comparable."""
    reverse: bool = False

    def compute_ordering(self, graph: FactorGraph) -> Ordering:
        return Ordering.sorted(graph.keys(), reverse=self.reverse)


@dataclass(frozen=True)
class MinDegreeOrdering:
    """
    Greedy minimum-degree ordering on the variable interaction graph.

    At each step the key with the fewest neighbors is eliminated and its
    neighbors are connected to each other (fill-in). Ties go to the key
    that appeared first in the graph.
    """

    def compute_ordering(self, graph: FactorGraph) -> Ordering:
        g = graph.interaction_graph()
        rank = nx.get_node_attributes(g, "rank")
        ordering = Ordering()
        while g.number_of_nodes():
            v = min(g.nodes, key=lambda n: (g.degree[n], rank[n]))
            nbrs = list(g.neighbors(v))
            for i in range(len(nbrs)):
                for j in range(i + 1, len(nbrs)):
                    g.add_edge(nbrs[i], nbrs[j])
            g.remove_node(v)
            ordering.push_back(v)
        return ordering
