"""
Tests for Section operations.
"""

import numpy as np
import pytest

from bayestree.algebra.section import Section
from bayestree.algebra.semiring import ProbSemiring, LogProbSemiring


class TestSection:
    def test_creation(self):
        sr = ProbSemiring()
        data = np.array([[1.0, 2.0], [3.0, 4.0]])
        sec = Section(domain=("A", "B"), data=data, semiring=sr)

        assert sec.domain == ("A", "B")
        assert sec.data.shape == (2, 2)

    def test_domain_mismatch_raises(self):
        sr = ProbSemiring()
        data = np.array([[1.0, 2.0], [3.0, 4.0]])

        with pytest.raises(ValueError):
            Section(domain=("A",), data=data, semiring=sr)

    def test_duplicate_domain_raises(self):
        sr = ProbSemiring()
        data = np.array([[1.0, 2.0], [3.0, 4.0]])

        with pytest.raises(ValueError):
            Section(domain=("A", "A"), data=data, semiring=sr)

    def test_unit(self):
        sr = ProbSemiring()
        sec = Section.unit(domain=("X", "Y"), shape=(2, 3), semiring=sr)

        assert sec.domain == ("X", "Y")
        assert sec.data.shape == (2, 3)
        assert np.all(sec.data == 1.0)

    def test_star_same_domain(self):
        sr = ProbSemiring()
        f = Section(domain=("A",), data=np.array([2.0, 3.0]), semiring=sr)
        g = Section(domain=("A",), data=np.array([4.0, 5.0]), semiring=sr)

        h = f.star(g)
        assert h.domain == ("A",)
        assert np.allclose(h.data, [8.0, 15.0])

    def test_star_disjoint_domains(self):
        sr = ProbSemiring()
        f = Section(domain=("A",), data=np.array([2.0, 3.0]), semiring=sr)
        g = Section(domain=("B",), data=np.array([4.0, 5.0]), semiring=sr)

        h = f.star(g)
        # First-appearance order, outer product
        assert h.domain == ("A", "B")
        assert np.allclose(h.data, [[8.0, 10.0], [12.0, 15.0]])

    def test_star_non_sortable_keys(self):
        sr = ProbSemiring()
        f = Section(domain=(1,), data=np.array([1.0, 2.0]), semiring=sr)
        g = Section(domain=("b", 1), data=np.ones((3, 2)), semiring=sr)

        h = f.star(g)
        assert h.domain == (1, "b")
        assert h.data.shape == (2, 3)

    def test_star_cardinality_mismatch_raises(self):
        sr = ProbSemiring()
        f = Section(domain=("A",), data=np.ones(2), semiring=sr)
        g = Section(domain=("A",), data=np.ones(3), semiring=sr)

        with pytest.raises(ValueError):
            f.star(g)

    def test_star_mixed_semirings_raises(self):
        f = Section(domain=("A",), data=np.ones(2), semiring=ProbSemiring())
        g = Section(domain=("A",), data=np.zeros(2), semiring=LogProbSemiring())

        with pytest.raises(ValueError):
            f.star(g)

    def test_restrict(self):
        sr = ProbSemiring()
        data = np.array([[1.0, 2.0], [3.0, 4.0]])
        sec = Section(domain=("A", "B"), data=data, semiring=sr)

        # Marginalize out B
        marg = sec.restrict(("A",))
        assert marg.domain == ("A",)
        assert np.allclose(marg.data, [3.0, 7.0])

    def test_restrict_permutes(self):
        sr = ProbSemiring()
        data = np.array([[1.0, 2.0], [3.0, 4.0]])
        sec = Section(domain=("A", "B"), data=data, semiring=sr)

        swapped = sec.restrict(("B", "A"))
        assert swapped.domain == ("B", "A")
        assert np.allclose(swapped.data, data.T)

    def test_restrict_to_empty(self):
        sr = ProbSemiring()
        data = np.array([[1.0, 2.0], [3.0, 4.0]])
        sec = Section(domain=("A", "B"), data=data, semiring=sr)

        marg = sec.restrict(())
        assert marg.domain == ()
        assert np.isclose(marg.data, 10.0)

    def test_restrict_unknown_key_raises(self):
        sec = Section(domain=("A",), data=np.ones(2), semiring=ProbSemiring())
        with pytest.raises(ValueError):
            sec.restrict(("Z",))

    def test_divide_gives_conditional(self):
        sr = ProbSemiring()
        joint = Section(domain=("A", "B"), data=np.array([[1.0, 3.0], [1.0, 1.0]]), semiring=sr)
        marg_b = joint.restrict(("B",))

        cond = joint.divide(marg_b)
        assert cond.domain == ("A", "B")
        assert np.allclose(cond.data.sum(axis=0), [1.0, 1.0])
        assert np.allclose(cond.data[:, 1], [0.75, 0.25])


class TestSectionLogSpace:
    def test_restrict_logsumexp(self):
        sr = LogProbSemiring()
        p = np.array([[0.1, 0.2], [0.3, 0.4]])
        sec = Section(domain=("A", "B"), data=np.log(p), semiring=sr)

        marg = sec.restrict(("B",))
        assert np.allclose(np.exp(marg.data), [0.4, 0.6])

    def test_normalize(self):
        sr = LogProbSemiring()
        sec = Section(domain=("A",), data=np.log([2.0, 6.0]), semiring=sr)

        out = sec.normalize()
        assert np.allclose(np.exp(out.data), [0.25, 0.75])
