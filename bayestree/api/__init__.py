"""
API module: solutions and marginals from Bayes trees.
"""

from bayestree.api.solution import (
    optimize,
    marginal_covariance,
    discrete_marginal,
    discrete_marginals,
)

__all__ = ["optimize", "marginal_covariance", "discrete_marginal", "discrete_marginals"]
