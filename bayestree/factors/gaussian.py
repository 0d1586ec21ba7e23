"""
bayestree/factors/gaussian.py

Gaussian factors in information form.

A GaussianFactor over keys x = (x_1, ..., x_n) with block dimensions d_i
represents the quadratic

    E(x) = 1/2 x^T Λ x - η^T x

where Λ is the information matrix and η the information vector.
Eliminating a key f from a factor over (f, s):

    P(x_f | x_s):  x_f = Λ_ff^{-1} (η_f - Λ_fs x_s),  covariance Λ_ff^{-1}
    residual:      Λ' = Λ_ss - Λ_sf Λ_ff^{-1} Λ_fs,   η' = η_s - Λ_sf Λ_ff^{-1} η_f

The conditional turned back into a factor plus the residual reproduces the
joint exactly, which is what makes re-elimination during incremental
updates lossless.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional, Sequence, Tuple

import numpy as np
from scipy import linalg

from bayestree.core.errors import IndeterminantSystemError
from bayestree.core.keys import Key
from bayestree.factors.base import Conditional, Factor, ordered_union


def _offsets(dims: Sequence[int]) -> np.ndarray:
    return np.concatenate(([0], np.cumsum(dims))).astype(int)


class GaussianFactor(Factor):
    """
    Information-form Gaussian factor.

    Attributes:
        keys: Ordered keys
        dims: Block dimension per key
        information: Symmetric (n x n) information matrix Λ
        information_vector: Length-n information vector η
    """

    def __init__(
        self,
        keys: Sequence[Key],
        dims: Sequence[int],
        information: np.ndarray,
        information_vector: np.ndarray,
    ):
        keys = tuple(keys)
        dims = tuple(int(d) for d in dims)
        if len(keys) != len(dims):
            raise ValueError(f"GaussianFactor: {len(keys)} keys but {len(dims)} dims")
        if len(set(keys)) != len(keys):
            raise ValueError(f"GaussianFactor: duplicate keys {keys}")
        n = sum(dims)
        info = np.atleast_2d(np.array(information, dtype=np.float64))
        vec = np.atleast_1d(np.array(information_vector, dtype=np.float64))
        if info.shape != (n, n):
            raise ValueError(f"GaussianFactor: information shape {info.shape} != {(n, n)}")
        if vec.shape != (n,):
            raise ValueError(f"GaussianFactor: information vector shape {vec.shape} != {(n,)}")
        self._keys = keys
        self._dims = dims
        self._info = info
        self._vec = vec
        self._info.setflags(write=False)
        self._vec.setflags(write=False)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_jacobian(
        cls,
        terms: Sequence[Tuple[Key, np.ndarray]],
        b: np.ndarray,
        covariance: Optional[np.ndarray] = None,
    ) -> "GaussianFactor":
        """
        Factor for the linear measurement sum_i A_i x_i = b + noise.

        Args:
            terms: (key, A_i) pairs, each A_i of shape (m, d_i)
            b: Measurement vector of length m
            covariance: Measurement noise covariance (m x m), identity if None
        """
        b = np.atleast_1d(np.asarray(b, dtype=np.float64))
        m = b.shape[0]
        blocks = [np.atleast_2d(np.asarray(A, dtype=np.float64)) for _, A in terms]
        for (k, _), A in zip(terms, blocks):
            if A.shape[0] != m:
                raise ValueError(f"Jacobian block for {k!r} has {A.shape[0]} rows, expected {m}")
        A = np.hstack(blocks)
        if covariance is None:
            W = np.eye(m)
        else:
            W = linalg.inv(np.atleast_2d(np.asarray(covariance, dtype=np.float64)))
        info = A.T @ W @ A
        vec = A.T @ W @ b
        return cls([k for k, _ in terms], [blk.shape[1] for blk in blocks], info, vec)

    @classmethod
    def prior(cls, key: Key, mean: np.ndarray, covariance: np.ndarray) -> "GaussianFactor":
        """Unary factor x ~ N(mean, covariance)."""
        mean = np.atleast_1d(np.asarray(mean, dtype=np.float64))
        return cls.from_jacobian([(key, np.eye(mean.shape[0]))], mean, covariance)

    @classmethod
    def between(
        cls, key1: Key, key2: Key, delta: np.ndarray, covariance: np.ndarray
    ) -> "GaussianFactor":
        """Relative measurement x2 - x1 = delta + noise (odometry-style)."""
        delta = np.atleast_1d(np.asarray(delta, dtype=np.float64))
        d = delta.shape[0]
        return cls.from_jacobian([(key1, -np.eye(d)), (key2, np.eye(d))], delta, covariance)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def keys(self) -> Tuple[Key, ...]:
        return self._keys

    @property
    def dims(self) -> Tuple[int, ...]:
        return self._dims

    @property
    def information(self) -> np.ndarray:
        return self._info

    @property
    def information_vector(self) -> np.ndarray:
        return self._vec

    def dim(self, key: Key) -> int:
        return self._dims[self._keys.index(key)]

    def block_slices(self) -> Dict[Key, slice]:
        off = _offsets(self._dims)
        return {k: slice(off[i], off[i + 1]) for i, k in enumerate(self._keys)}

    # ------------------------------------------------------------------
    # Factor interface
    # ------------------------------------------------------------------

    def combine(self, others: Sequence[Factor]) -> "GaussianFactor":
        self._check_kind(others)
        factors = [self] + list(others)
        keys = ordered_union([f.keys() for f in factors])

        dims: Dict[Key, int] = {}
        for f in factors:
            for k, d in zip(f.keys(), f.dims):
                if dims.setdefault(k, d) != d:
                    raise ValueError(f"Dimension mismatch for {k!r}: {dims[k]} vs {d}")

        off = _offsets([dims[k] for k in keys])
        pos = {k: i for i, k in enumerate(keys)}
        n = off[-1]
        info = np.zeros((n, n))
        vec = np.zeros(n)
        for f in factors:
            idx = np.concatenate(
                [np.arange(off[pos[k]], off[pos[k] + 1]) for k in f.keys()]
            )
            info[np.ix_(idx, idx)] += f.information
            vec[idx] += f.information_vector
        return GaussianFactor(keys, [dims[k] for k in keys], info, vec)

    def eliminate(self, key: Key) -> Tuple["GaussianConditional", Optional["GaussianFactor"]]:
        if key not in self._keys:
            raise ValueError(f"Key {key!r} not in factor keys {self._keys}")
        sl = self.block_slices()
        rest = tuple(k for k in self._keys if k != key)
        f_idx = np.arange(sl[key].start, sl[key].stop)
        s_idx = (
            np.concatenate([np.arange(sl[k].start, sl[k].stop) for k in rest])
            if rest else np.zeros(0, dtype=int)
        )

        L_ff = self._info[np.ix_(f_idx, f_idx)]
        L_fs = self._info[np.ix_(f_idx, s_idx)]
        eta_f = self._vec[f_idx]

        conditional = GaussianConditional(
            frontals=(key,),
            parents=rest,
            frontal_dims=(self.dim(key),),
            parent_dims=tuple(self.dim(k) for k in rest),
            precision=L_ff,
            cross=L_fs,
            information_vector=eta_f,
        )
        if not rest:
            return conditional, None

        L_ss = self._info[np.ix_(s_idx, s_idx)]
        eta_s = self._vec[s_idx]
        residual_info = L_ss - L_fs.T @ conditional.gain
        residual_vec = eta_s - L_fs.T @ conditional.offset
        # Symmetrize to keep round-off from accumulating across updates
        residual_info = 0.5 * (residual_info + residual_info.T)
        residual = GaussianFactor(rest, conditional.parent_dims, residual_info, residual_vec)
        return conditional, residual

    def __repr__(self) -> str:
        return f"GaussianFactor(keys={self._keys}, dims={self._dims})"


class GaussianConditional(Conditional):
    """
    Linear-Gaussian conditional

        x_f = offset - gain @ x_s + w,   w ~ N(0, precision^{-1})

    where offset = precision^{-1} η_f and gain = precision^{-1} cross.
    """

    def __init__(
        self,
        frontals: Sequence[Key],
        parents: Sequence[Key],
        frontal_dims: Sequence[int],
        parent_dims: Sequence[int],
        precision: np.ndarray,
        cross: np.ndarray,
        information_vector: np.ndarray,
    ):
        self.frontals = tuple(frontals)
        self.parents = tuple(parents)
        self.frontal_dims = tuple(frontal_dims)
        self.parent_dims = tuple(parent_dims)
        self.precision = np.asarray(precision, dtype=np.float64)
        self.cross = np.asarray(cross, dtype=np.float64).reshape(self.precision.shape[0], sum(self.parent_dims))
        self.information_vector = np.asarray(information_vector, dtype=np.float64)
        try:
            self._cho = linalg.cho_factor(self.precision)
        except linalg.LinAlgError:
            raise IndeterminantSystemError(self.frontals[0]) from None
        self.gain = linalg.cho_solve(self._cho, self.cross)
        self.offset = linalg.cho_solve(self._cho, self.information_vector)

    @property
    def covariance(self) -> np.ndarray:
        """Covariance of the frontal block given the parents."""
        return linalg.cho_solve(self._cho, np.eye(self.precision.shape[0]))

    def solve(self, values: Mapping[Key, np.ndarray]) -> Dict[Key, np.ndarray]:
        """
        Conditional mean of the frontals given parent values.

        Args:
            values: Must hold a value for every parent key

        Returns:
            Map from frontal key to its value
        """
        x = self.offset.copy()
        if self.parents:
            x_s = np.concatenate([np.atleast_1d(values[p]) for p in self.parents])
            x = x - self.gain @ x_s
        off = _offsets(self.frontal_dims)
        return {k: x[off[i]:off[i + 1]] for i, k in enumerate(self.frontals)}

    def as_factor(self) -> GaussianFactor:
        P, C = self.precision, self.cross
        if not self.parents:
            return GaussianFactor(self.frontals, self.frontal_dims, P, self.information_vector)
        info = np.block([[P, C], [C.T, C.T @ self.gain]])
        vec = np.concatenate([self.information_vector, C.T @ self.offset])
        return GaussianFactor(self.keys(), self.frontal_dims + self.parent_dims, info, vec)
