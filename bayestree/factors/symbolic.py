"""
bayestree/factors/symbolic.py

Structure-only factors: no numbers, just the keys they connect.
Useful for analyzing the shape of Bayes trees and for testing the
tree algorithms in isolation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from bayestree.core.keys import Key
from bayestree.factors.base import Conditional, Factor, ordered_union


@dataclass(frozen=True)
class SymbolicFactor(Factor):
    """A factor that only records its scope."""
    scope: Tuple[Key, ...]

    def __post_init__(self):
        object.__setattr__(self, "scope", tuple(self.scope))
        if len(set(self.scope)) != len(self.scope):
            raise ValueError(f"SymbolicFactor scope has duplicates: {self.scope}")

    def keys(self) -> Tuple[Key, ...]:
        return self.scope

    def combine(self, others: Sequence[Factor]) -> "SymbolicFactor":
        self._check_kind(others)
        return SymbolicFactor(ordered_union([self.scope] + [f.keys() for f in others]))

    def eliminate(self, key: Key) -> Tuple["SymbolicConditional", Optional["SymbolicFactor"]]:
        if key not in self.scope:
            raise ValueError(f"Key {key!r} not in factor scope {self.scope}")
        rest = tuple(k for k in self.scope if k != key)
        residual = SymbolicFactor(rest) if rest else None
        return SymbolicConditional((key,), rest), residual


@dataclass(frozen=True, repr=False)
class SymbolicConditional(Conditional):
    frontals: Tuple[Key, ...]
    parents: Tuple[Key, ...] = ()

    def as_factor(self) -> SymbolicFactor:
        return SymbolicFactor(self.keys())
