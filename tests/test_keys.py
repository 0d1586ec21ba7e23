"""
Tests for keys, orderings and errors.
"""

import pytest

from bayestree.core.errors import (
    BayesTreeError,
    EliminationError,
    OrderingError,
    UnconnectedVariableError,
)
from bayestree.core.keys import Ordering


class TestOrdering:
    def test_positions(self):
        ordering = Ordering(["x", "y", "z"])

        assert len(ordering) == 3
        assert ordering.position("y") == 1
        assert ordering[2] == "z"
        assert list(ordering) == ["x", "y", "z"]
        assert "x" in ordering
        assert "w" not in ordering

    def test_duplicate_raises(self):
        with pytest.raises(OrderingError):
            Ordering([1, 2, 1])

    def test_unknown_position_raises(self):
        with pytest.raises(OrderingError):
            Ordering([1]).position(2)

    def test_sorted(self):
        assert Ordering.sorted([3, 1, 2, 1]).keys() == (1, 2, 3)
        assert Ordering.sorted([3, 1, 2], reverse=True).keys() == (3, 2, 1)

    def test_equality(self):
        assert Ordering([1, 2]) == Ordering([1, 2])
        assert Ordering([1, 2]) != Ordering([2, 1])


class TestErrors:
    def test_hierarchy(self):
        err = UnconnectedVariableError("x")
        assert isinstance(err, EliminationError)
        assert isinstance(err, BayesTreeError)
        assert err.key == "x"

    def test_ordering_error_is_value_error(self):
        assert issubclass(OrderingError, ValueError)
