"""
Algebra module: semirings and named tables for discrete factors.
"""

from bayestree.algebra.semiring import (
    Semiring,
    ProbSemiring,
    LogProbSemiring,
    prob_semiring,
    logprob_semiring,
)
from bayestree.algebra.section import Section

__all__ = [
    "Semiring",
    "ProbSemiring",
    "LogProbSemiring",
    "prob_semiring",
    "logprob_semiring",
    "Section",
]
