"""
Tests for the symbolic, Gaussian and discrete factor kinds.
"""

import numpy as np
import pytest

from bayestree.algebra.semiring import logprob_semiring
from bayestree.core.errors import IndeterminantSystemError
from bayestree.factors import (
    DiscreteFactor,
    GaussianFactor,
    SymbolicConditional,
    SymbolicFactor,
    combine_and_eliminate,
)


class TestSymbolicFactor:
    def test_combine_keeps_first_appearance_order(self):
        f = SymbolicFactor((1, 2)).combine([SymbolicFactor((3, 2)), SymbolicFactor((1, 4))])
        assert f.keys() == (1, 2, 3, 4)

    def test_eliminate(self):
        conditional, residual = SymbolicFactor((1, 2, 3)).eliminate(2)
        assert conditional.frontals == (2,)
        assert conditional.parents == (1, 3)
        assert residual.keys() == (1, 3)

    def test_eliminate_last_key_has_no_residual(self):
        conditional, residual = SymbolicFactor(("x",)).eliminate("x")
        assert conditional.parents == ()
        assert residual is None

    def test_duplicate_keys_raise(self):
        with pytest.raises(ValueError):
            SymbolicFactor((1, 1))

    def test_conditional_as_factor(self):
        f = SymbolicConditional((1,), (2, 3)).as_factor()
        assert f.keys() == (1, 2, 3)

    def test_mixing_kinds_raises(self):
        g = GaussianFactor.prior(1, np.zeros(1), np.eye(1))
        with pytest.raises(TypeError):
            SymbolicFactor((1,)).combine([g])


class TestGaussianFactor:
    def test_prior_information(self):
        f = GaussianFactor.prior("x", [1.0, 2.0], 0.5 * np.eye(2))
        assert f.keys() == ("x",)
        assert f.dims == (2,)
        assert np.allclose(f.information, 2.0 * np.eye(2))
        assert np.allclose(f.information_vector, [2.0, 4.0])

    def test_between_information(self):
        f = GaussianFactor.between(1, 2, [3.0], np.eye(1))
        assert np.allclose(f.information, [[1.0, -1.0], [-1.0, 1.0]])
        assert np.allclose(f.information_vector, [-3.0, 3.0])

    def test_shape_validation(self):
        with pytest.raises(ValueError):
            GaussianFactor((1, 2), (1, 1), np.eye(3), np.zeros(2))
        with pytest.raises(ValueError):
            GaussianFactor((1,), (1, 1), np.eye(2), np.zeros(2))

    def test_combine_accumulates(self):
        f = GaussianFactor.prior(1, [0.0], np.eye(1))
        g = GaussianFactor.between(1, 2, [1.0], np.eye(1))
        joint = f.combine([g])
        assert joint.keys() == (1, 2)
        assert np.allclose(joint.information, [[2.0, -1.0], [-1.0, 1.0]])
        assert np.allclose(joint.information_vector, [-1.0, 1.0])

    def test_combine_dimension_mismatch_raises(self):
        f = GaussianFactor.prior(1, [0.0], np.eye(1))
        g = GaussianFactor.prior(1, [0.0, 0.0], np.eye(2))
        with pytest.raises(ValueError):
            f.combine([g])

    def test_conditional_and_residual_reproduce_joint(self):
        rng = np.random.default_rng(1)
        A = rng.normal(size=(6, 5))
        info = A.T @ A + np.eye(5)
        vec = rng.normal(size=5)
        joint = GaussianFactor(("a", "b", "c"), (2, 1, 2), info, vec)

        conditional, residual = joint.eliminate("a")
        rebuilt = conditional.as_factor().combine([residual])

        assert rebuilt.keys() == ("a", "b", "c")
        assert np.allclose(rebuilt.information, info)
        assert np.allclose(rebuilt.information_vector, vec)

    def test_eliminate_inner_key(self):
        joint = GaussianFactor.prior(1, [0.0], np.eye(1)).combine([
            GaussianFactor.between(1, 2, [1.0], np.eye(1)),
            GaussianFactor.between(2, 3, [1.0], np.eye(1)),
        ])
        conditional, residual = joint.eliminate(2)
        assert conditional.frontals == (2,)
        assert conditional.parents == (1, 3)
        assert residual.keys() == (1, 3)

    def test_conditional_solve(self):
        # x2 = x1 + 1 exactly in the mean
        joint = GaussianFactor.between(1, 2, [1.0], np.eye(1))
        conditional, _ = joint.eliminate(2)
        out = conditional.solve({1: np.array([4.0])})
        assert np.allclose(out[2], [5.0])
        assert np.allclose(conditional.covariance, [[1.0]])

    def test_indeterminant_raises(self):
        # After eliminating x1 nothing constrains x2 absolutely
        joint = GaussianFactor.between(1, 2, [1.0], np.eye(1))
        _, residual = joint.eliminate(1)
        with pytest.raises(IndeterminantSystemError) as info:
            residual.eliminate(2)
        assert info.value.key == 2

    def test_from_jacobian_row_mismatch_raises(self):
        with pytest.raises(ValueError):
            GaussianFactor.from_jacobian([(1, np.eye(2))], np.zeros(3))


class TestDiscreteFactor:
    @pytest.fixture
    def tables(self):
        return {
            "AB": np.array([[0.9, 0.1], [0.2, 0.8]]),
            "BC": np.array([[0.3, 0.7], [0.5, 0.5]]),
        }

    def test_combine(self, tables):
        f = DiscreteFactor.from_table(("A", "B"), tables["AB"])
        g = DiscreteFactor.from_table(("B", "C"), tables["BC"])
        joint = f.combine([g])
        assert joint.keys() == ("A", "B", "C")
        assert np.allclose(joint.section.data, np.einsum("ab,bc->abc", tables["AB"], tables["BC"]))

    def test_eliminate(self, tables):
        f = DiscreteFactor.from_table(("A", "B"), tables["AB"])
        conditional, residual = f.eliminate("B")

        assert conditional.frontals == ("B",)
        assert conditional.parents == ("A",)
        assert conditional.section.domain == ("B", "A")
        assert np.allclose(conditional.section.data.sum(axis=0), [1.0, 1.0])
        assert residual.keys() == ("A",)
        assert np.allclose(residual.section.data, [1.0, 1.0])

    def test_conditional_times_residual_is_joint(self, tables):
        f = DiscreteFactor.from_table(("A", "B"), tables["AB"])
        conditional, residual = f.eliminate("A")
        rebuilt = conditional.as_factor().combine([residual])
        assert np.allclose(rebuilt.section.restrict(("A", "B")).data, tables["AB"])

    def test_log_space(self, tables):
        f = DiscreteFactor.from_table(("A", "B"), np.log(tables["AB"]), logprob_semiring)
        conditional, residual = f.eliminate("B")
        assert np.allclose(np.exp(conditional.section.data).sum(axis=0), [1.0, 1.0])
        assert np.allclose(np.exp(residual.section.data), [1.0, 1.0])


class TestCombineAndEliminate:
    def test_single_factor(self):
        conditional, residual = combine_and_eliminate([SymbolicFactor((1, 2))], 1)
        assert conditional.parents == (2,)
        assert residual.keys() == (2,)

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            combine_and_eliminate([], 1)
