"""
Тесты аккумуляторов центроидов: свойства combine.
"""

import numpy as np
import pytest

from dkmeans.core.accumulator import (
    CentroidAccumulator,
    ClusterAssignment,
    assignment_key,
    combine_assignments,
)
from dkmeans.core.point import Point


def _acc(coords, count):
    return CentroidAccumulator(Point(coords), count)


class TestCentroidAccumulator:
    """combine ассоциативен и коммутативен."""

    def test_singleton_default(self):
        acc = CentroidAccumulator(Point([1.0, 2.0]))
        assert acc.count == 1

    def test_combine(self):
        c = _acc([1.0, 2.0], 1).combine(_acc([3.0, 4.0], 2))
        assert c.sum == Point([4.0, 6.0])
        assert c.count == 3

    def test_combine_is_pure(self):
        a = _acc([1.0, 1.0], 1)
        b = _acc([2.0, 2.0], 1)
        a.combine(b)
        assert a == _acc([1.0, 1.0], 1)
        assert b == _acc([2.0, 2.0], 1)

    def test_commutative(self):
        a = _acc([0.1, 0.7], 2)
        b = _acc([3.3, -1.2], 5)
        assert a.combine(b) == b.combine(a)

    def test_associative(self):
        # целые значения складываются точно в любом порядке
        a = _acc([1.0, 2.0], 1)
        b = _acc([10.0, -4.0], 3)
        c = _acc([7.0, 5.0], 2)
        assert a.combine(b).combine(c) == a.combine(b.combine(c))

    def test_associative_random(self):
        rng = np.random.default_rng(0)
        a, b, c = (_acc(rng.normal(size=4), int(n)) for n in (1, 2, 3))
        left = a.combine(b).combine(c)
        right = a.combine(b.combine(c))
        assert left.count == right.count == 6
        np.testing.assert_allclose(left.sum.to_numpy(), right.sum.to_numpy(), rtol=1e-12)

    def test_mean(self):
        assert _acc([3.0, 6.0], 3).mean() == Point([1.0, 2.0])

    def test_frozen(self):
        acc = _acc([1.0], 1)
        with pytest.raises(AttributeError):
            acc.count = 2


class TestAssignments:
    def test_key(self):
        assert assignment_key(ClusterAssignment(3, _acc([1.0], 1))) == 3

    def test_combine_assignments(self):
        merged = combine_assignments(
            ClusterAssignment(1, _acc([1.0, 0.0], 1)),
            ClusterAssignment(1, _acc([0.0, 1.0], 1)),
        )
        assert merged.cluster_id == 1
        assert merged.accumulator == _acc([1.0, 1.0], 2)
