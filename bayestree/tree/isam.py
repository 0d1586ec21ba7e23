"""
bayestree/tree/isam.py

Incremental Bayes tree updates.

New factors contaminate the cliques holding their keys and every clique
on the path from there to the root. That top part of the tree is turned
back into factors, joined with the new factors, re-eliminated and
rebuilt. Subtrees hanging below the removed part (orphans) are still
valid and are re-attached unchanged.

All fallible steps (ordering, elimination, clique assembly, orphan
placement) run against staged data; the tree is only modified by the
final commit, so a failed update leaves it exactly as it was.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Mapping, Optional, Set, Tuple

from bayestree.core.errors import OrderingError
from bayestree.core.keys import Key
from bayestree.factors.base import Factor
from bayestree.inference.elimination import eliminate
from bayestree.inference.graph import FactorGraph
from bayestree.tree.bayes_tree import BayesTree, build_bayes_tree
from bayestree.tree.builder import assemble_cliques, find_parent_clique
from bayestree.tree.clique import Clique
from bayestree.tree.params import ISAMParams

logger = logging.getLogger(__name__)


@dataclass
class TopRemoval:
    """
    The contaminated top of a Bayes tree.

    Attributes:
        removed: Cliques on the paths from contaminated keys to their roots
        orphans: Children of removed cliques that are not removed themselves
        factors: One factor per conditional of the removed cliques
        keys: Frontal keys of the removed cliques
    """
    removed: List[Clique] = field(default_factory=list)
    orphans: List[Clique] = field(default_factory=list)
    factors: FactorGraph = field(default_factory=FactorGraph)
    keys: List[Key] = field(default_factory=list)


def remove_top(tree: BayesTree, keys: Iterable[Key]) -> TopRemoval:
    """
    Find the part of the tree that must be re-eliminated for keys.

    Does not modify the tree.

    Args:
        tree: Bayes tree
        keys: Contaminated keys; keys not in the tree are ignored

    Returns:
        TopRemoval describing removed cliques, orphans and the
        reconstruction factor graph
    """
    out = TopRemoval()
    marked: Set[Clique] = set()
    for key in keys:
        clique = tree.get(key)
        while clique is not None and clique not in marked:
            marked.add(clique)
            out.removed.append(clique)
            clique = clique.parent()

    for clique in out.removed:
        out.factors.extend(clique.as_factors())
        out.keys.extend(clique.frontals())
        out.orphans.extend(c for c in clique.children() if c not in marked)

    logger.debug("remove_top: %d cliques removed, %d orphans, %d keys",
                 len(out.removed), len(out.orphans), len(out.keys))
    return out


class _SurvivingIndex(Mapping[Key, Clique]):
    """Key -> clique index of a tree, minus the keys being removed."""

    def __init__(self, tree: BayesTree, removed_keys: Iterable[Key]):
        self._nodes = tree.nodes()
        self._removed = set(removed_keys)

    def __getitem__(self, key: Key) -> Clique:
        if key in self._removed:
            raise KeyError(key)
        return self._nodes[key]

    def __contains__(self, key: object) -> bool:
        return key not in self._removed and key in self._nodes

    def __iter__(self) -> Iterator[Key]:
        return (k for k in self._nodes if k not in self._removed)

    def __len__(self) -> int:
        return sum(1 for _ in self)


class IncrementalUpdater:
    """
    Applies new factors to a Bayes tree (iSAM-style update).

    Example:
        >>> updater = IncrementalUpdater(ISAMParams(ordering=SortedOrdering()))
        >>> tree = updater.update(tree, FactorGraph([SymbolicFactor((3, 4))]))
    """

    def __init__(self, params: Optional[ISAMParams] = None):
        self.params = params if params is not None else ISAMParams()

    def update(self, tree: BayesTree, new_factors: Iterable[Factor]) -> BayesTree:
        """
        Incorporate new factors into tree, in place.

        Args:
            tree: Bayes tree to update (exclusive access for the call)
            new_factors: Factors to add

        Returns:
            The same tree object, updated

        Raises:
            OrderingError: the ordering strategy did not cover the reduced graph
            EliminationError: re-elimination failed
            AttachmentError: an orphan could not be re-attached
        """
        new_factors = new_factors if isinstance(new_factors, FactorGraph) else FactorGraph(new_factors)
        if not len(new_factors):
            return tree

        # Contamination and the removed top
        contaminated = new_factors.keys()
        removal = remove_top(tree, contaminated)

        # Reduced graph: removed conditionals as factors plus the new factors
        reduced = removal.factors.copy()
        reduced.extend(new_factors)

        ordering = self.params.ordering.compute_ordering(reduced)
        reduced_keys = set(reduced.keys())
        if set(ordering) != reduced_keys:
            raise OrderingError(
                f"Ordering strategy {type(self.params.ordering).__name__} returned "
                f"{len(ordering)} keys for a graph over {len(reduced_keys)} keys"
            )

        fragment = eliminate(reduced, ordering)

        # Stage new cliques against the index of the surviving tree
        surviving = _SurvivingIndex(tree, removal.keys)
        staged = assemble_cliques(fragment, surviving)

        attachments: List[Tuple[Optional[Clique], Clique]] = []
        for orphan in removal.orphans:
            sep = orphan.separator()
            if not sep:
                attachments.append((None, orphan))
                continue
            parent = find_parent_clique(orphan.frontals(), sep, staged, surviving)
            attachments.append((parent, orphan))

        # Commit
        tree.replace_top(removal.removed, staged, attachments)

        logger.info(
            "Update: %d new factors, %d cliques removed, %d created, %d orphans re-attached",
            len(new_factors), len(removal.removed), len(staged.cliques), len(attachments),
        )
        if self.params.check_invariants:
            tree.check_invariants()
        return tree


def update(
    tree: BayesTree,
    new_factors: Iterable[Factor],
    params: Optional[ISAMParams] = None,
) -> BayesTree:
    """Functional form of IncrementalUpdater(params).update(tree, new_factors)."""
    return IncrementalUpdater(params).update(tree, new_factors)


class ISAM:
    """
    Online estimator state: a Bayes tree kept current one batch of factors
    at a time.
    """

    def __init__(self, params: Optional[ISAMParams] = None, tree: Optional[BayesTree] = None):
        self.params = params if params is not None else ISAMParams()
        self.tree = tree if tree is not None else BayesTree()
        self._updater = IncrementalUpdater(self.params)

    @classmethod
    def from_factor_graph(cls, graph: FactorGraph, params: Optional[ISAMParams] = None) -> "ISAM":
        """Batch-eliminate graph and start incremental operation from there."""
        params = params if params is not None else ISAMParams()
        ordering = params.ordering.compute_ordering(graph)
        return cls(params, build_bayes_tree(eliminate(graph, ordering)))

    def update(self, new_factors: Iterable[Factor]) -> BayesTree:
        return self._updater.update(self.tree, new_factors)

    def __repr__(self) -> str:
        return f"ISAM({self.tree!r})"
