"""
bayestree/tree/builder.py

Clique construction from a Bayes net.

Conditionals are visited in reverse elimination order, so every separator
key has already been placed when a conditional is reached. Each
conditional either merges into its parent clique (when its separator is
exactly the parent's frontal ∪ separator set) or opens a new clique below
that parent. Conditionals with an empty separator start new roots.

The builder never touches cliques outside the Bayes net it is given: new
cliques whose parent is an existing clique are returned as pending links
so that callers can commit them in one step.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence, Set, Tuple

from bayestree.core.errors import AttachmentError
from bayestree.core.keys import Key
from bayestree.inference.bayes_net import BayesNet
from bayestree.tree.clique import Clique

logger = logging.getLogger(__name__)


@dataclass
class StagedCliques:
    """
    Cliques built from a Bayes net, not yet part of any tree.

    Attributes:
        index: Frontal key -> new clique holding it
        roots: New cliques with an empty separator
        links: (existing parent, new child) attachments to commit
        cliques: All new cliques in creation order
        rank: Elimination position of each key of the Bayes net
    """
    index: Dict[Key, Clique] = field(default_factory=dict)
    roots: List[Clique] = field(default_factory=list)
    links: List[Tuple[Clique, Clique]] = field(default_factory=list)
    cliques: List[Clique] = field(default_factory=list)
    rank: Dict[Key, int] = field(default_factory=dict)

    def __post_init__(self):
        self._members: Set[Clique] = set(self.cliques)

    def is_new(self, clique: Clique) -> bool:
        return clique in self._members

    def add_clique(self, clique: Clique) -> None:
        self.cliques.append(clique)
        self._members.add(clique)


def _depth(clique: Clique) -> int:
    d = 0
    p = clique.parent()
    while p is not None:
        d += 1
        p = p.parent()
    return d


def find_parent_clique(
    frontals: Sequence[Key],
    separator: Sequence[Key],
    staged: StagedCliques,
    index: Mapping[Key, Clique],
) -> Clique:
    """
    Clique a clique with the given separator must hang from.

    The parent is the owner of the separator key eliminated first, which is
    the deepest separator owner on the root path, so the whole separator is
    contained in the parent's keys. Keys of the staged Bayes net take
    precedence over keys held by existing cliques.

    Args:
        frontals: Frontal keys of the clique being attached (for errors)
        separator: Its separator keys (non-empty)
        staged: Cliques built so far
        index: Key -> existing clique lookup

    Raises:
        AttachmentError: no separator key is held by any clique
    """
    in_fragment = [k for k in separator if k in staged.index]
    if in_fragment:
        return staged.index[min(in_fragment, key=staged.rank.__getitem__)]

    existing = [index[k] for k in separator if k in index]
    if existing:
        return max(existing, key=_depth)

    raise AttachmentError(frontals, separator)


def assemble_cliques(bayes_net: BayesNet, index: Mapping[Key, Clique]) -> StagedCliques:
    """
    Build cliques for a Bayes net.

    Args:
        bayes_net: Conditionals in elimination order
        index: Key -> clique lookup for keys held by existing cliques
            (empty for batch construction)

    Returns:
        StagedCliques describing the new cliques and their attachments
    """
    staged = StagedCliques()
    for i, conditional in enumerate(bayes_net):
        for k in conditional.frontals:
            staged.rank[k] = i

    for conditional in reversed(bayes_net):
        sep = tuple(conditional.parents)
        if not sep:
            clique = Clique(conditional)
            staged.add_clique(clique)
            staged.roots.append(clique)
        else:
            parent = find_parent_clique(conditional.frontals, sep, staged, index)
            if staged.is_new(parent) and set(sep) == set(parent.keys()):
                parent.add_conditional_front(conditional)
                clique = parent
            else:
                clique = Clique(conditional)
                staged.add_clique(clique)
                if staged.is_new(parent):
                    parent.add_child(clique)
                else:
                    staged.links.append((parent, clique))
        for k in conditional.frontals:
            staged.index[k] = clique

    logger.debug("Assembled %d cliques (%d roots) from %d conditionals",
                 len(staged.cliques), len(staged.roots), len(bayes_net))
    return staged
