"""
bayestree/factors/base.py

Collaborator interfaces consumed by the elimination engine.

The engine never looks inside a factor. It only needs:
  - Factor.keys():      the variables a factor touches
  - Factor.combine():   product with other factors of the same kind
  - Factor.eliminate(): split a factor into P(key | separator) and a
                        residual factor on the separator
  - Conditional.as_factor(): turn a conditional back into a factor, used
                        when part of a Bayes tree is re-eliminated
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple

from bayestree.core.keys import Key


class Factor(ABC):
    """A constraint or measurement over a set of keys. Immutable."""

    @abstractmethod
    def keys(self) -> Tuple[Key, ...]:
        """Distinct keys touched by this factor."""

    @abstractmethod
    def combine(self, others: Sequence["Factor"]) -> "Factor":
        """Product of this factor with others of the same kind."""

    @abstractmethod
    def eliminate(self, key: Key) -> Tuple["Conditional", Optional["Factor"]]:
        """
        Eliminate a key from this factor.

        Returns:
            (conditional, residual) where the conditional has frontal (key,)
            and the residual is a factor on the separator, or None when the
            separator is empty.
        """

    def _check_kind(self, others: Sequence["Factor"]) -> None:
        for f in others:
            if not isinstance(f, type(self)):
                raise TypeError(
                    f"Cannot combine {type(self).__name__} with {type(f).__name__}"
                )


class Conditional(ABC):
    """
    P(frontals | parents), the result of eliminating one or more keys.

    Subclasses provide the `frontals` and `parents` attributes.
    """
    frontals: Tuple[Key, ...]
    parents: Tuple[Key, ...]

    @property
    def separator(self) -> Tuple[Key, ...]:
        return self.parents

    def keys(self) -> Tuple[Key, ...]:
        return tuple(self.frontals) + tuple(self.parents)

    @abstractmethod
    def as_factor(self) -> Factor:
        """Factor over frontals ∪ parents carrying the same information."""

    def __repr__(self) -> str:
        front = ",".join(map(repr, self.frontals))
        if not self.parents:
            return f"{type(self).__name__}(P({front}))"
        return f"{type(self).__name__}(P({front} | {','.join(map(repr, self.parents))}))"


def combine_and_eliminate(factors: Sequence[Factor], key: Key) -> Tuple[Conditional, Optional[Factor]]:
    """
    Multiply the given factors together and eliminate key from the product.

    Args:
        factors: Non-empty sequence of factors of one kind, all touching key
        key: Key to eliminate

    Returns:
        (conditional, residual factor or None)
    """
    if not factors:
        raise ValueError("combine_and_eliminate needs at least one factor")
    head, rest = factors[0], factors[1:]
    joint = head.combine(rest) if rest else head
    return joint.eliminate(key)


def ordered_union(key_tuples: Sequence[Sequence[Key]]) -> Tuple[Key, ...]:
    """Union of key sequences in first-appearance order."""
    seen = set()
    out = []
    for ks in key_tuples:
        for k in ks:
            if k not in seen:
                seen.add(k)
                out.append(k)
    return tuple(out)
