"""
Factors module: collaborator interfaces and reference factor kinds.
"""

from bayestree.factors.base import Factor, Conditional, combine_and_eliminate
from bayestree.factors.symbolic import SymbolicFactor, SymbolicConditional
from bayestree.factors.gaussian import GaussianFactor, GaussianConditional
from bayestree.factors.discrete import DiscreteFactor, DiscreteConditional

__all__ = [
    "Factor",
    "Conditional",
    "combine_and_eliminate",
    "SymbolicFactor",
    "SymbolicConditional",
    "GaussianFactor",
    "GaussianConditional",
    "DiscreteFactor",
    "DiscreteConditional",
]
