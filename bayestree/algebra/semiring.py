"""
bayestree/algebra/semiring.py

Semirings for table-valued (discrete) factors.

A commutative semiring (S, ⊕, ⊗, 0, 1) with the extra division needed to
turn a joint table into a conditional:
- mul (⊗): elementwise product
- div: elementwise inverse of ⊗ (x ⊘ 0 = 0)
- add_reduce (⊕): summation over axes (marginalization)
- normalize: rescale so that ⊕ over the given axes is one

All operations act on numpy arrays.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol, Tuple, Union

import numpy as np

Axes = Optional[Union[int, Tuple[int, ...]]]


def _logsumexp(x: np.ndarray, axis: Axes = None) -> np.ndarray:
    """Numerically stable logsumexp."""
    if x.size == 0:
        return np.array(-np.inf)

    if axis is None:
        m = np.max(x)
        if np.isneginf(m):
            return np.array(-np.inf)
        return m + np.log(np.sum(np.exp(x - m)))

    if isinstance(axis, int):
        axis = (axis,)

    m = np.max(x, axis=axis, keepdims=True)
    # Guard against -inf
    m_safe = np.where(np.isneginf(m), 0.0, m)
    y = np.log(np.sum(np.exp(x - m_safe), axis=axis, keepdims=True)) + m_safe
    y = np.where(np.isneginf(m), -np.inf, y)
    return np.squeeze(y, axis=axis)


class Semiring(Protocol):
    """Protocol for vectorized semiring operations."""
    name: str
    zero: Any
    one: Any

    def mul(self, a: np.ndarray, b: np.ndarray) -> np.ndarray: ...
    def div(self, a: np.ndarray, b: np.ndarray) -> np.ndarray: ...
    def add_reduce(self, x: np.ndarray, axis: Axes = None) -> np.ndarray: ...
    def normalize(self, x: np.ndarray, axis: Axes = None) -> np.ndarray: ...


@dataclass(frozen=True)
class ProbSemiring:
    """Nonnegative reals: add=+, mul=*."""
    name: str = "PROB"
    zero: float = 0.0
    one: float = 1.0

    def mul(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        return np.multiply(a, b)

    def div(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        a, b = np.broadcast_arrays(np.asarray(a, dtype=np.float64), np.asarray(b, dtype=np.float64))
        out = np.zeros(a.shape, dtype=np.float64)
        np.divide(a, b, out=out, where=(b != 0.0))
        return out

    def add_reduce(self, x: np.ndarray, axis: Axes = None) -> np.ndarray:
        return np.sum(x, axis=axis)

    def normalize(self, x: np.ndarray, axis: Axes = None) -> np.ndarray:
        s = np.sum(x, axis=axis, keepdims=True)
        s = np.where(s == 0.0, 1.0, s)
        return x / s


@dataclass(frozen=True)
class LogProbSemiring:
    """Log-space probabilities: add=logsumexp, mul=+."""
    name: str = "LOGPROB"
    zero: float = -np.inf
    one: float = 0.0

    def mul(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        return np.add(a, b)

    def div(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        a, b = np.broadcast_arrays(np.asarray(a, dtype=np.float64), np.asarray(b, dtype=np.float64))
        out = np.full(a.shape, -np.inf)
        np.subtract(a, b, out=out, where=~np.isneginf(b))
        return out

    def add_reduce(self, x: np.ndarray, axis: Axes = None) -> np.ndarray:
        return _logsumexp(x, axis=axis)

    def normalize(self, x: np.ndarray, axis: Axes = None) -> np.ndarray:
        if axis is None:
            return x - _logsumexp(x, axis=None)
        ax = (axis,) if isinstance(axis, int) else tuple(axis)
        z = _logsumexp(x, axis=ax)
        for a in sorted(ax):
            z = np.expand_dims(z, axis=a)
        return x - z


prob_semiring = ProbSemiring()
logprob_semiring = LogProbSemiring()
