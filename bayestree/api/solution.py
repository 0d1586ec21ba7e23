"""
bayestree/api/solution.py

Solutions and marginals from a Bayes tree.

All queries walk the tree top-down: a clique's distribution is its own
conditionals times the marginal of its separator, which is read off the
parent clique. Only the path from the root to the queried clique is
visited for single-key queries.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import numpy as np

from bayestree.algebra.section import Section
from bayestree.core.keys import Key
from bayestree.factors.discrete import DiscreteConditional
from bayestree.factors.gaussian import GaussianConditional
from bayestree.tree.bayes_tree import BayesTree
from bayestree.tree.clique import Clique


# ----------------------------------------------------------------------
# Gaussian
# ----------------------------------------------------------------------

def _gaussian_conditionals(clique: Clique) -> List[GaussianConditional]:
    out = []
    for c in clique.conditionals:
        if not isinstance(c, GaussianConditional):
            raise TypeError(f"{clique!r} holds a non-Gaussian conditional {c!r}")
        out.append(c)
    return out


def optimize(tree: BayesTree) -> Dict[Key, np.ndarray]:
    """
    Most likely values of all keys of a Gaussian Bayes tree.

    Back-substitution from the roots down: within a clique, conditionals
    are solved last-eliminated first, so every parent value is known when
    a conditional is solved.

    Returns:
        Map from key to its mean
    """
    values: Dict[Key, np.ndarray] = {}
    for clique in tree.cliques():
        for conditional in reversed(_gaussian_conditionals(clique)):
            values.update(conditional.solve(values))
    return values


class _GaussianJoint:
    """Joint covariance over an ordered list of keys."""

    def __init__(self, keys: List[Key], dims: List[int], cov: np.ndarray):
        self.keys = keys
        self.dims = dims
        self.cov = cov

    def _idx(self, keys: Tuple[Key, ...]) -> np.ndarray:
        off = np.concatenate(([0], np.cumsum(self.dims))).astype(int)
        pos = {k: i for i, k in enumerate(self.keys)}
        if not keys:
            return np.zeros(0, dtype=int)
        return np.concatenate([np.arange(off[pos[k]], off[pos[k] + 1]) for k in keys])

    def restrict(self, keys: Tuple[Key, ...]) -> "_GaussianJoint":
        idx = self._idx(keys)
        pos = {k: i for i, k in enumerate(self.keys)}
        return _GaussianJoint(list(keys), [self.dims[pos[k]] for k in keys], self.cov[np.ix_(idx, idx)])

    def extend(self, conditional: GaussianConditional) -> "_GaussianJoint":
        """
        Add the frontals of x_f = offset - G x_s + w to the joint:

            Σ_ff = G Σ_ss G^T + cov(w),   Σ_f* = -G Σ_s*
        """
        idx = self._idx(conditional.parents)
        G = conditional.gain
        cross = -G @ self.cov[idx, :] if len(idx) else np.zeros((G.shape[0], self.cov.shape[0]))
        ff = conditional.covariance
        if len(idx):
            ff = ff + G @ self.cov[np.ix_(idx, idx)] @ G.T
        cov = np.block([[self.cov, cross.T], [cross, ff]])
        return _GaussianJoint(
            self.keys + list(conditional.frontals),
            self.dims + list(conditional.frontal_dims),
            cov,
        )


def _clique_covariance(clique: Clique, cache: Dict[Clique, _GaussianJoint]) -> _GaussianJoint:
    # Iterative root path walk, filled top-down
    path = []
    c: Optional[Clique] = clique
    while c is not None and c not in cache:
        path.append(c)
        c = c.parent()
    for c in reversed(path):
        parent = c.parent()
        if parent is None:
            joint = _GaussianJoint([], [], np.zeros((0, 0)))
        else:
            joint = cache[parent].restrict(c.separator())
        for conditional in reversed(_gaussian_conditionals(c)):
            joint = joint.extend(conditional)
        cache[c] = joint
    return cache[clique]


def marginal_covariance(tree: BayesTree, key: Key) -> np.ndarray:
    """
    Marginal covariance of one key of a Gaussian Bayes tree.

    Args:
        tree: Gaussian Bayes tree
        key: Key to query

    Returns:
        (d x d) covariance matrix
    """
    joint = _clique_covariance(tree.clique_for(key), {})
    return joint.restrict((key,)).cov


# ----------------------------------------------------------------------
# Discrete
# ----------------------------------------------------------------------

def _discrete_conditionals(clique: Clique) -> List[DiscreteConditional]:
    out = []
    for c in clique.conditionals:
        if not isinstance(c, DiscreteConditional):
            raise TypeError(f"{clique!r} holds a non-discrete conditional {c!r}")
        out.append(c)
    return out


def _clique_joint(clique: Clique, cache: Dict[Clique, Section]) -> Section:
    path = []
    c: Optional[Clique] = clique
    while c is not None and c not in cache:
        path.append(c)
        c = c.parent()
    for c in reversed(path):
        parent = c.parent()
        conditionals = _discrete_conditionals(c)
        if parent is None:
            joint = Section.unit((), (), conditionals[0].section.semiring)
        else:
            joint = cache[parent].restrict(c.separator())
        for conditional in reversed(conditionals):
            joint = joint.star(conditional.section)
        cache[c] = joint
    return cache[clique]


def discrete_marginal(tree: BayesTree, key: Key) -> np.ndarray:
    """
    Normalized marginal table of one key of a discrete Bayes tree.

    For log-space semirings the result is in log space.
    """
    joint = _clique_joint(tree.clique_for(key), {})
    return joint.restrict((key,)).normalize().data


def discrete_marginals(tree: BayesTree) -> Dict[Key, np.ndarray]:
    """Normalized marginals of every key, sharing clique joints."""
    cache: Dict[Clique, Section] = {}
    out: Dict[Key, np.ndarray] = {}
    for clique in tree.cliques():
        joint = _clique_joint(clique, cache)
        for k in clique.frontals():
            out[k] = joint.restrict((k,)).normalize().data
    return out
