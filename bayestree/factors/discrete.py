"""
bayestree/factors/discrete.py

Table factors over finite domains, backed by Section.

Eliminating a key k from a table φ(k, s):
    residual    m(s)     = ⊕_k φ(k, s)
    conditional P(k | s) = φ(k, s) ⊘ m(s)
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Tuple

import numpy as np

from bayestree.algebra.section import Section
from bayestree.algebra.semiring import prob_semiring
from bayestree.core.keys import Key
from bayestree.factors.base import Conditional, Factor


class DiscreteFactor(Factor):
    """A semiring-valued table over discrete keys."""

    def __init__(self, section: Section):
        self.section = section

    @classmethod
    def from_table(cls, keys: Sequence[Key], table: Any, semiring: Any = prob_semiring) -> "DiscreteFactor":
        """
        Build a factor from a table whose axes follow keys.

        Example:
            >>> f = DiscreteFactor.from_table(("A", "B"), [[0.9, 0.1], [0.2, 0.8]])
        """
        return cls(Section(tuple(keys), np.array(table, dtype=np.float64), semiring))

    def keys(self) -> Tuple[Key, ...]:
        return self.section.domain

    @property
    def cardinalities(self) -> Tuple[int, ...]:
        return self.section.data.shape

    def combine(self, others: Sequence[Factor]) -> "DiscreteFactor":
        self._check_kind(others)
        # star() extends the domain in first-appearance order
        out = self.section
        for f in others:
            out = out.star(f.section)
        return DiscreteFactor(out)

    def eliminate(self, key: Key) -> Tuple["DiscreteConditional", Optional["DiscreteFactor"]]:
        if key not in self.keys():
            raise ValueError(f"Key {key!r} not in factor keys {self.keys()}")
        rest = tuple(k for k in self.keys() if k != key)
        joint = self.section.restrict((key,) + rest)
        marginal = joint.restrict(rest)
        conditional = DiscreteConditional((key,), rest, joint.divide(marginal))
        residual = DiscreteFactor(marginal) if rest else None
        return conditional, residual

    def __repr__(self) -> str:
        return f"DiscreteFactor(keys={self.keys()}, shape={self.cardinalities})"


class DiscreteConditional(Conditional):
    """
    Conditional probability table P(frontals | parents).

    The section's domain is frontals followed by parents.
    """

    def __init__(self, frontals: Sequence[Key], parents: Sequence[Key], section: Section):
        self.frontals = tuple(frontals)
        self.parents = tuple(parents)
        if section.domain != self.frontals + self.parents:
            raise ValueError(
                f"Conditional table domain {section.domain} != frontals+parents "
                f"{self.frontals + self.parents}"
            )
        self.section = section

    def as_factor(self) -> DiscreteFactor:
        return DiscreteFactor(self.section)
