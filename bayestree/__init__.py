"""
bayestree: Bayes trees with incremental updates

Symbolic elimination of factor graphs into clique trees (Bayes trees), and
iSAM-style incremental re-inference: new factors only cause the affected
top of the tree to be re-eliminated.

Key components:
- core: keys, orderings and errors
- algebra: semirings and named tables for discrete factors
- factors: factor/conditional interfaces plus symbolic, Gaussian and
  discrete implementations
- inference: factor graphs, Bayes nets, elimination and ordering strategies
- tree: cliques, Bayes trees and incremental updates
- api: solutions and marginals from Bayes trees
"""

__version__ = "1.0.0"
__author__ = "bayestree Team"

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
from bayestree.factors import (
    Factor,
    Conditional,
    SymbolicFactor,
    SymbolicConditional,
    GaussianFactor,
    GaussianConditional,
    DiscreteFactor,
    DiscreteConditional,
)
from bayestree.inference import (
    FactorGraph,
    BayesNet,
    eliminate,
    eliminate_partial,
    NaturalOrdering,
    SortedOrdering,
    MinDegreeOrdering,
)
from bayestree.tree import (
    Clique,
    BayesTree,
    build_bayes_tree,
    ISAMParams,
    remove_top,
    IncrementalUpdater,
    update,
    ISAM,
)
from bayestree.api import optimize, marginal_covariance, discrete_marginal, discrete_marginals

__all__ = [
    # Core
    "Key",
    "Ordering",
    "BayesTreeError",
    "OrderingError",
    "EliminationError",
    "UnconnectedVariableError",
    "IndeterminantSystemError",
    "AttachmentError",
    "StructuralInvariantViolation",
    # Factors
    "Factor",
    "Conditional",
    "SymbolicFactor",
    "SymbolicConditional",
    "GaussianFactor",
    "GaussianConditional",
    "DiscreteFactor",
    "DiscreteConditional",
    # Inference
    "FactorGraph",
    "BayesNet",
    "eliminate",
    "eliminate_partial",
    "NaturalOrdering",
    "SortedOrdering",
    "MinDegreeOrdering",
    # Tree
    "Clique",
    "BayesTree",
    "build_bayes_tree",
    "ISAMParams",
    "remove_top",
    "IncrementalUpdater",
    "update",
    "ISAM",
    # API
    "optimize",
    "marginal_covariance",
    "discrete_marginal",
    "discrete_marginals",
]
