"""
bayestree/core/errors.py

Exception hierarchy for elimination, tree construction and incremental updates.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence


class BayesTreeError(Exception):
    """Base class for all errors raised by bayestree."""


class OrderingError(BayesTreeError, ValueError):
    """An ordering is malformed or does not cover the keys it must cover."""


class EliminationError(BayesTreeError):
    """Eliminating a key failed."""

    def __init__(self, key: Any, message: Optional[str] = None):
        self.key = key
        super().__init__(message or f"Failed to eliminate key {key!r}")


class UnconnectedVariableError(EliminationError):
    """An ordering entry is referenced by no remaining factor."""

    def __init__(self, key: Any):
        super().__init__(key, f"Key {key!r} is not connected to any factor")


class IndeterminantSystemError(EliminationError):
    """The frontal block of a Gaussian elimination is not positive definite."""

    def __init__(self, key: Any):
        super().__init__(key, f"Indeterminant system while eliminating key {key!r}")


class AttachmentError(BayesTreeError):
    """
    A clique could not be attached to the tree.

    Raised when none of the separator keys of an orphan (or a freshly built
    clique) is held as a frontal key by any clique.
    """

    def __init__(self, frontals: Sequence[Any], separator: Sequence[Any]):
        self.frontals = tuple(frontals)
        self.separator = tuple(separator)
        super().__init__(
            f"No clique holds any separator key {self.separator!r} "
            f"of clique with frontals {self.frontals!r}"
        )


class StructuralInvariantViolation(BayesTreeError, AssertionError):
    """A Bayes tree invariant does not hold (debug checks only)."""
