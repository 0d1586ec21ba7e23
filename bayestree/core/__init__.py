"""
Core module: keys, orderings and the error hierarchy.
"""

from bayestree.core.keys import Key, Ordering
from bayestree.core.errors import (
    BayesTreeError,
    OrderingError,
    EliminationError,
    UnconnectedVariableError,
    IndeterminantSystemError,
    AttachmentError,
    StructuralInvariantViolation,
)

__all__ = [
    "Key",
    "Ordering",
    "BayesTreeError",
    "OrderingError",
    "EliminationError",
    "UnconnectedVariableError",
    "IndeterminantSystemError",
    "AttachmentError",
    "StructuralInvariantViolation",
]
