"""
Tests for semiring operations.
"""

import numpy as np
import pytest

from bayestree.algebra.semiring import (
    ProbSemiring,
    LogProbSemiring,
    prob_semiring,
    logprob_semiring,
)


class TestProbSemiring:
    def test_identities(self):
        sr = ProbSemiring()
        assert sr.zero == 0.0
        assert sr.one == 1.0

    def test_mul(self):
        out = prob_semiring.mul(np.array([2.0, 3.0]), np.array([4.0, 5.0]))
        assert np.allclose(out, [8.0, 15.0])

    def test_div_by_zero_is_zero(self):
        out = prob_semiring.div(np.array([1.0, 2.0, 0.0]), np.array([2.0, 0.0, 0.0]))
        assert np.allclose(out, [0.5, 0.0, 0.0])

    def test_add_reduce(self):
        x = np.array([[1.0, 2.0], [3.0, 4.0]])
        assert np.allclose(prob_semiring.add_reduce(x, axis=0), [4.0, 6.0])
        assert np.allclose(prob_semiring.add_reduce(x, axis=1), [3.0, 7.0])

    def test_normalize(self):
        x = np.array([[1.0, 3.0], [0.0, 0.0]])
        out = prob_semiring.normalize(x, axis=1)
        assert np.allclose(out, [[0.25, 0.75], [0.0, 0.0]])


class TestLogProbSemiring:
    def test_identities(self):
        sr = LogProbSemiring()
        assert sr.zero == -np.inf
        assert sr.one == 0.0

    def test_mul_is_add(self):
        out = logprob_semiring.mul(np.log([0.5]), np.log([0.4]))
        assert np.allclose(np.exp(out), [0.2])

    def test_div_by_zero_is_zero(self):
        out = logprob_semiring.div(np.array([0.0, -1.0]), np.array([-np.inf, -1.0]))
        assert np.isneginf(out[0])
        assert out[1] == pytest.approx(0.0)

    def test_add_reduce_matches_prob(self):
        p = np.array([[0.1, 0.2], [0.3, 0.4]])
        out = logprob_semiring.add_reduce(np.log(p), axis=(1,))
        assert np.allclose(np.exp(out), [0.3, 0.7])

    def test_add_reduce_all_neg_inf(self):
        x = np.full((2, 2), -np.inf)
        out = logprob_semiring.add_reduce(x, axis=(0,))
        assert np.all(np.isneginf(out))

    def test_normalize_global(self):
        p = np.array([1.0, 3.0])
        out = logprob_semiring.normalize(np.log(p))
        assert np.allclose(np.exp(out), [0.25, 0.75])
