"""
bayestree/algebra/section.py

A Section is a semiring-valued table over a *named* domain (ordered keys).
It carries the numbers of a discrete factor or conditional.

Key operations:
  - star:     (f ⋆ g) on U∪W  (aligned pointwise multiplication)
  - restrict: ρ_{U->T}      (semiring-sum marginalization onto T)
  - divide:   f ⊘ g for dom(g) ⊆ dom(f) (joint -> conditional)
  - normalize: semiring-specific normalization

Design constraints:
  - Domain ordering is *semantic*: axes correspond 1-1 to domain entries.
  - Keys are opaque, so star() takes the union in first-appearance order
    unless an explicit union domain is given.
  - restrict(target) outputs axes in exactly target order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

import numpy as np

from bayestree.core.keys import Key


@dataclass(frozen=True)
class Section:
    """
    A semiring table over an ordered domain.

    Attributes:
        domain: Ordered keys (axis labels).
        data: ndarray shaped by the key cardinalities in the *same order*.
        semiring: Semiring implementing mul/div/add_reduce/normalize on ndarrays.
    """
    domain: Tuple[Key, ...]
    data: np.ndarray
    semiring: Any  # Semiring protocol

    def __post_init__(self):
        if len(self.domain) != self.data.ndim:
            raise ValueError(
                f"Section domain rank mismatch: |domain|={len(self.domain)} "
                f"but data.ndim={self.data.ndim}"
            )
        if len(set(self.domain)) != len(self.domain):
            raise ValueError(f"Section domain has duplicates: {self.domain}")

    @staticmethod
    def unit(domain: Sequence[Key], shape: Sequence[int], semiring: Any) -> "Section":
        """
        Unit section 1_U: constant one on D_U.
        """
        data = np.full(tuple(shape), semiring.one, dtype=np.float64)
        return Section(tuple(domain), data, semiring)

    def axis_of(self, v: Key) -> int:
        """Returns the axis index of key v in self.domain."""
        return self.domain.index(v)

    def dim_of(self, v: Key) -> int:
        """Returns the cardinality of key v, inferred from data shape."""
        return self.data.shape[self.axis_of(v)]

    def _aligned_view(self, target_domain: Tuple[Key, ...], target_shape: Tuple[int, ...]) -> np.ndarray:
        """
        Returns an ndarray aligned and broadcast to target_domain.

        - Existing axes are permuted into target order.
        - Missing axes become singleton dimensions.
        - Result is broadcast to target_shape (for pointwise ops).
        """
        src_pos = {v: i for i, v in enumerate(self.domain)}
        perm = [src_pos[v] for v in target_domain if v in src_pos]
        if len(perm) != len(self.domain):
            raise ValueError(f"Domain {self.domain} is not contained in {target_domain}")

        data = self.data
        if perm and perm != list(range(len(perm))):
            data = np.transpose(data, axes=perm)

        shape = []
        j = 0
        for v in target_domain:
            if v in src_pos:
                shape.append(data.shape[j])
                j += 1
            else:
                shape.append(1)

        data = data.reshape(shape)
        return np.broadcast_to(data, target_shape)

    def _check_semiring(self, other: "Section") -> None:
        if type(self.semiring) is not type(other.semiring):
            raise ValueError("Cannot combine sections from different semirings")

    def star(self, other: "Section", union_domain: Optional[Sequence[Key]] = None) -> "Section":
        """
        Join-product (⋆) on the union domain.

        (f ⋆ g)(x_{U∪W}) = f(x_U) ⊗ g(x_W)

        If union_domain is None, the union is self.domain followed by the
        keys of other.domain not already present.
        """
        self._check_semiring(other)

        U = set(self.domain)
        W = set(other.domain)
        if union_domain is None:
            union = self.domain + tuple(v for v in other.domain if v not in U)
        else:
            union = tuple(union_domain)

        target_shape = []
        for v in union:
            if v in U:
                size = self.dim_of(v)
                if v in W and other.dim_of(v) != size:
                    raise ValueError(
                        f"Cardinality mismatch for {v!r}: {size} vs {other.dim_of(v)}"
                    )
                target_shape.append(size)
            elif v in W:
                target_shape.append(other.dim_of(v))
            else:
                raise ValueError(f"Key {v!r} not in either domain")
        target_shape = tuple(target_shape)

        a = self._aligned_view(union, target_shape)
        b = other._aligned_view(union, target_shape)
        return Section(union, self.semiring.mul(a, b), self.semiring)

    def divide(self, other: "Section") -> "Section":
        """
        Pointwise division by a section over a subset of this domain.

        Used to turn a joint table into a conditional: P(x | y) = P(x, y) ⊘ P(y).
        """
        self._check_semiring(other)
        b = other._aligned_view(self.domain, self.data.shape)
        return Section(self.domain, self.semiring.div(self.data, b), self.semiring)

    def restrict(self, target_domain: Sequence[Key]) -> "Section":
        """
        Marginalize (ρ_{U->T}) to exactly the keys in target_domain *in that order*.

        (ρ f)(x_T) = ⊕_{x_{U\\T}} f(x_T, x_{U\\T})

        target_domain must be a subset of self.domain. A permutation of the
        domain transposes without reducing.
        """
        T = tuple(target_domain)
        U = self.domain

        Uset = set(U)
        for v in T:
            if v not in Uset:
                raise ValueError(f"restrict target key {v!r} not in section domain {U}")

        if T == U:
            return self

        if not T:
            result = self.semiring.add_reduce(self.data, axis=None)
            return Section((), np.asarray(result, dtype=np.float64).reshape(()), self.semiring)

        # Kept axes first in requested order, then eliminated axes
        Tset = set(T)
        kept_axes = [U.index(v) for v in T]
        elim_axes = [i for i, v in enumerate(U) if v not in Tset]
        perm = kept_axes + elim_axes

        data = np.transpose(self.data, axes=perm) if perm != list(range(len(U))) else self.data

        if elim_axes:
            axes_to_reduce = tuple(range(len(kept_axes), len(U)))
            data = self.semiring.add_reduce(data, axis=axes_to_reduce)

        return Section(T, np.asarray(data), self.semiring)

    def normalize(self, axis: Optional[int] = None) -> "Section":
        """
        Semiring-specific normalization along axis (or globally).
        """
        return Section(self.domain, self.semiring.normalize(self.data, axis=axis), self.semiring)

    def __repr__(self) -> str:
        return f"Section(domain={self.domain}, shape={self.data.shape}, semiring={type(self.semiring).__name__})"
