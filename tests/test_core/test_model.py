"""
Тесты модели: классификация, стоимость, сохранение.
"""

import math

import numpy as np
import pytest

from dkmeans.core.centroids import CentroidSet
from dkmeans.core.errors import DimensionMismatch
from dkmeans.core.model import KMeansModel
from dkmeans.core.point import Point


@pytest.fixture
def model():
    return KMeansModel(
        dimensions=2,
        num_clusters=3,
        iterations=4,
        centroids=[Point([0.0, 0.0]), Point([4.0, 0.0]), Point([0.0, 6.0])],
    )


class TestKMeansModel:
    def test_accessors(self, model):
        assert model.dimensions == 2
        assert model.num_clusters == 3
        assert model.iterations == 4
        assert isinstance(model.centroids, CentroidSet)
        assert len(model.centroids) == 3

    def test_classify(self, model):
        assert model.classify(Point([3.0, 1.0])) == 1
        assert model.classify(Point([0.0, 5.0])) == 2

    def test_classify_deterministic(self, model):
        p = Point([1.7, 2.2])
        first = model.classify(p)
        assert all(model.classify(p) == first for _ in range(10))

    def test_classify_tie_break(self, model):
        """Точка ровно посередине между центроидами 0 и 1 → 0."""
        assert model.classify(Point([2.0, 0.0])) == 0

    def test_compute_cost(self, model):
        assert model.compute_cost(Point([3.0, 1.0])) == 2.0
        assert model.compute_cost(Point([0.0, 0.0])) == 0.0

    def test_dimension_mismatch(self, model):
        with pytest.raises(DimensionMismatch):
            model.classify(Point([1.0, 2.0, 3.0]))
        with pytest.raises(DimensionMismatch):
            model.compute_cost(Point([1.0]))

    def test_total_cost_is_sum(self, model, serial_ctx, integer_grid_points):
        """Стоимость по датасету равна сумме стоимостей точек."""
        points = serial_ctx.parallelize(integer_grid_points, num_partitions=3)
        expected = sum(model.compute_cost(p) for p in integer_grid_points)
        assert model.compute_total_cost(points) == expected

    @pytest.mark.parametrize("num_partitions", [1, 2, 7, 64])
    def test_total_cost_real_valued_exact(self, serial_ctx, num_partitions):
        """Для вещественных данных сумма точна при любом разбиении."""
        rng = np.random.default_rng(7)
        pts = [Point(row) for row in rng.normal(size=(1000, 3)) * 1e3]
        model = KMeansModel(
            dimensions=3,
            num_clusters=4,
            iterations=1,
            centroids=pts[:4],
        )
        expected = math.fsum(model.compute_cost(p) for p in pts)
        points = serial_ctx.parallelize(pts, num_partitions=num_partitions)
        assert model.compute_total_cost(points) == expected

    def test_classify_all(self, model, serial_ctx):
        pts = [Point([0.1, 0.0]), Point([3.9, 0.2]), Point([0.0, 7.0])]
        seq = serial_ctx.parallelize(pts, num_partitions=2)
        assert model.classify_all(seq).all_gather() == [0, 1, 2]

    def test_classify_pairs(self, model, serial_ctx):
        pts = [Point([0.1, 0.0]), Point([0.0, 7.0])]
        pairs = model.classify_pairs(serial_ctx.parallelize(pts)).all_gather()
        assert pairs == [(pts[0], 0), (pts[1], 2)]

    def test_requires_centroids(self):
        with pytest.raises(ValueError):
            KMeansModel(dimensions=2, num_clusters=1, iterations=0, centroids=[])

    def test_centroid_dimension_checked(self):
        with pytest.raises(DimensionMismatch):
            KMeansModel(dimensions=3, num_clusters=1, iterations=0, centroids=[Point([1.0])])

    def test_dict_round_trip(self, model):
        restored = KMeansModel.from_dict(model.to_dict())
        assert restored.centroids == model.centroids
        assert restored.num_clusters == 3

    def test_save_load(self, model, tmp_path):
        path = tmp_path / "model.json"
        model.save(path)
        loaded = KMeansModel.load(path)

        assert loaded.dimensions == model.dimensions
        assert loaded.iterations == model.iterations
        assert loaded.centroids == model.centroids
