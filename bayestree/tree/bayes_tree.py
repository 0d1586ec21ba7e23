"""
bayestree/tree/bayes_tree.py

Bayes tree: a forest of cliques plus an index from key to the clique that
holds it as a frontal variable.

Invariants:
- every key is frontal in exactly one clique, and the index points to it
- every separator key of a clique is a key of its parent (junction tree)
- cliques form a forest; roots are exactly the cliques with empty separator
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

import networkx as nx

from bayestree.core.errors import StructuralInvariantViolation
from bayestree.core.keys import Key
from bayestree.inference.bayes_net import BayesNet
from bayestree.tree.builder import StagedCliques, assemble_cliques
from bayestree.tree.clique import Clique

logger = logging.getLogger(__name__)


class BayesTree:
    """
    Tree (in general a forest) of cliques.

    The tree owns its cliques through the root list and the children lists.
    """

    def __init__(self):
        self._roots: List[Clique] = []
        self._nodes: Dict[Key, Clique] = {}

    @classmethod
    def from_bayes_net(cls, bayes_net: BayesNet) -> "BayesTree":
        return build_bayes_tree(bayes_net)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def roots(self) -> Tuple[Clique, ...]:
        return tuple(self._roots)

    def clique_for(self, key: Key) -> Clique:
        """Clique holding key as a frontal variable."""
        try:
            return self._nodes[key]
        except KeyError:
            raise KeyError(f"Key {key!r} is not in the Bayes tree") from None

    def get(self, key: Key, default: Optional[Clique] = None) -> Optional[Clique]:
        return self._nodes.get(key, default)

    def nodes(self) -> Mapping[Key, Clique]:
        """Read-only view of the key -> clique index."""
        return MappingProxyType(self._nodes)

    def keys(self) -> Tuple[Key, ...]:
        return tuple(self._nodes)

    def cliques(self) -> Iterator[Clique]:
        """Preorder iteration over all cliques."""
        for root in self._roots:
            yield from root.subtree()

    def postorder(self) -> List[Clique]:
        """Cliques with every child before its parent."""
        return list(reversed(list(self.cliques())))

    def size(self) -> int:
        """Number of cliques."""
        return sum(1 for _ in self.cliques())

    def is_empty(self) -> bool:
        return not self._roots

    def clique_structure(self) -> FrozenSet[Tuple[FrozenSet[Key], FrozenSet[Key]]]:
        """Canonical (frontals, separator) set, for shape comparisons."""
        return frozenset(
            (frozenset(c.frontals()), frozenset(c.separator())) for c in self.cliques()
        )

    def to_networkx(self) -> nx.DiGraph:
        """
        Directed parent -> child graph of cliques.

        Nodes are Clique objects with 'frontals' and 'separator' attributes.
        Traversal stops at cliques already visited, so a malformed tree
        still yields a finite graph.
        """
        g = nx.DiGraph()
        stack: List[Tuple[Optional[Clique], Clique]] = [(None, r) for r in self._roots]
        while stack:
            parent, c = stack.pop()
            seen = c in g
            if not seen:
                g.add_node(c, frontals=c.frontals(), separator=c.separator())
            if parent is not None:
                g.add_edge(parent, c)
            if not seen:
                stack.extend((c, child) for child in c.children())
        return g

    def __contains__(self, key: object) -> bool:
        return key in self._nodes

    def __repr__(self) -> str:
        return f"BayesTree(keys={len(self._nodes)}, roots={len(self._roots)})"

    # ------------------------------------------------------------------
    # Snapshots and checks
    # ------------------------------------------------------------------

    def copy(self) -> "BayesTree":
        """
        Structural copy: fresh cliques sharing the (immutable) conditionals.
        """
        out = BayesTree()
        stack: List[Tuple[Optional[Clique], Clique]] = [(None, r) for r in reversed(self._roots)]
        while stack:
            new_parent, c = stack.pop()
            clone = Clique.from_conditionals(c.conditionals)
            if new_parent is None:
                out._roots.append(clone)
            else:
                new_parent.add_child(clone)
            for k in clone.frontals():
                out._nodes[k] = clone
            stack.extend((clone, child) for child in reversed(c.children()))
        return out

    def check_invariants(self) -> None:
        """
        Verify the structural invariants.

        Raises:
            StructuralInvariantViolation: on the first violation found
        """
        g = self.to_networkx()
        if g.number_of_nodes() and not nx.is_forest(g):
            raise StructuralInvariantViolation("Clique graph contains a cycle")
        for c in g.nodes:
            if g.in_degree(c) > 1:
                raise StructuralInvariantViolation(f"{c!r} has more than one parent")

        root_set = set(self._roots)
        owners: Dict[Key, Clique] = {}
        for c in g.nodes:
            parent = c.parent()
            preds = list(g.predecessors(c))
            if c in root_set:
                if parent is not None:
                    raise StructuralInvariantViolation(f"Root {c!r} has a parent")
                if c.separator():
                    raise StructuralInvariantViolation(f"Root {c!r} has a non-empty separator")
            else:
                if not preds or parent is not preds[0]:
                    raise StructuralInvariantViolation(f"{c!r} parent link does not match child list")
                if not c.separator():
                    raise StructuralInvariantViolation(f"Non-root {c!r} has an empty separator")
                missing = set(c.separator()) - set(parent.keys())
                if missing:
                    raise StructuralInvariantViolation(
                        f"Separator keys {sorted(map(repr, missing))} of {c!r} missing from parent {parent!r}"
                    )
            for k in c.frontals():
                if k in owners:
                    raise StructuralInvariantViolation(
                        f"Key {k!r} is frontal in both {owners[k]!r} and {c!r}"
                    )
                owners[k] = c

        if set(owners) != set(self._nodes):
            raise StructuralInvariantViolation("Index keys differ from frontal keys")
        for k, c in owners.items():
            if self._nodes[k] is not c:
                raise StructuralInvariantViolation(f"Index entry for {k!r} points to the wrong clique")

    # ------------------------------------------------------------------
    # Mutation (used by the incremental updater)
    # ------------------------------------------------------------------

    def replace_top(
        self,
        removed: Sequence[Clique],
        staged: StagedCliques,
        attachments: Iterable[Tuple[Optional[Clique], Clique]],
    ) -> None:
        """
        Swap a removed top of the tree for freshly built cliques.

        Every step here is plain bookkeeping that cannot fail, so callers do
        all fallible work before calling it.

        Args:
            removed: Cliques to drop (closed under taking parents)
            staged: New cliques and their pending links
            attachments: (new parent or None, orphan) pairs
        """
        removed_set = set(removed)
        for c in removed:
            parent = c.parent()
            if parent is None:
                self._roots.remove(c)
            elif parent not in removed_set:
                parent.remove_child(c)
        for c in removed:
            for k in c.frontals():
                del self._nodes[k]
            c._detach_all()

        self._nodes.update(staged.index)
        self._roots.extend(staged.roots)
        for parent, child in staged.links:
            parent.add_child(child)
        for parent, orphan in attachments:
            if parent is None:
                self._roots.append(orphan)
            else:
                parent.add_child(orphan)


def build_bayes_tree(bayes_net: BayesNet) -> BayesTree:
    """
    Assemble a Bayes tree from a Bayes net.

    Args:
        bayes_net: Conditionals in elimination order; every separator key
            must itself be eliminated in the net

    Returns:
        BayesTree whose roots are the cliques with empty separator
    """
    staged = assemble_cliques(bayes_net, {})
    tree = BayesTree()
    tree._roots = list(staged.roots)
    tree._nodes = dict(staged.index)
    logger.info("Built Bayes tree: %d cliques, %d roots, %d keys",
                len(staged.cliques), len(staged.roots), len(staged.index))
    return tree
