"""
Inference module: factor graphs, Bayes nets, elimination and orderings.
"""

from bayestree.inference.graph import FactorGraph
from bayestree.inference.bayes_net import BayesNet
from bayestree.inference.elimination import eliminate, eliminate_partial
from bayestree.inference.ordering import (
    OrderingStrategy,
    NaturalOrdering,
    SortedOrdering,
    MinDegreeOrdering,
)

__all__ = [
    "FactorGraph",
    "BayesNet",
    "eliminate",
    "eliminate_partial",
    "OrderingStrategy",
    "NaturalOrdering",
    "SortedOrdering",
    "MinDegreeOrdering",
]
