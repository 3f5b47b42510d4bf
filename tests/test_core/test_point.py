"""
Unit-тесты для Point.
"""

import pickle

import numpy as np
import pytest

from dkmeans.core.errors import DimensionMismatch
from dkmeans.core.point import Point


class TestPoint:
    """Арифметика и свойства значения."""

    def test_dimension(self):
        assert Point([1.0, 2.0, 3.0]).dimension() == 3
        assert len(Point([1.0])) == 1

    def test_add(self):
        p = Point([1.0, 2.0]).add(Point([3.0, -1.0]))
        assert p == Point([4.0, 1.0])

    def test_scale_divide(self):
        p = Point([3.0, 6.0]).scale_divide(3)
        np.testing.assert_allclose(p.to_numpy(), [1.0, 2.0])

    def test_squared_distance(self):
        assert Point([0.0, 0.0]).squared_distance(Point([3.0, 4.0])) == 25.0

    def test_operators(self):
        assert Point([1.0, 1.0]) + Point([1.0, 2.0]) == Point([2.0, 3.0])
        assert Point([2.0, 4.0]) / 2 == Point([1.0, 2.0])

    @pytest.mark.parametrize("op", ["add", "squared_distance"])
    def test_dimension_mismatch(self, op):
        with pytest.raises(DimensionMismatch) as exc:
            getattr(Point([1.0, 2.0]), op)(Point([1.0, 2.0, 3.0]))
        assert exc.value.expected == 2
        assert exc.value.actual == 3

    def test_immutable(self):
        """Исходный массив не разделяется, результат read-only."""
        src = np.array([1.0, 2.0])
        p = Point(src)
        src[0] = 100.0
        assert p[0] == 1.0
        with pytest.raises(ValueError):
            p.to_numpy()[0] = 5.0

    def test_operations_do_not_mutate(self):
        a = Point([1.0, 2.0])
        b = Point([3.0, 4.0])
        a.add(b)
        a.scale_divide(2)
        assert a == Point([1.0, 2.0])
        assert b == Point([3.0, 4.0])

    def test_rejects_non_vector(self):
        with pytest.raises(ValueError):
            Point([[1.0, 2.0], [3.0, 4.0]])

    def test_equality_and_hash(self):
        assert Point([1.0, 2.0]) == Point([1, 2])
        assert hash(Point([1.0, 2.0])) == hash(Point([1.0, 2.0]))
        assert Point([1.0, 2.0]) != Point([1.0, 2.0, 0.0])

    def test_pickle(self):
        p = Point([0.5, -1.5, 2.0])
        restored = pickle.loads(pickle.dumps(p))
        assert restored == p
        assert not restored.to_numpy().flags.writeable

    def test_iteration(self):
        assert list(Point([1.0, 2.0])) == [1.0, 2.0]
        assert Point([1.0, 2.0]).to_list() == [1.0, 2.0]
