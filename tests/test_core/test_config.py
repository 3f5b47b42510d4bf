"""
Тесты параметров запуска.
"""

import pytest

from dkmeans.core.config import EmptyClusterPolicy, KMeansConfig


class TestKMeansConfig:
    def test_defaults(self):
        cfg = KMeansConfig(dimensions=2, num_clusters=3, iterations=5)
        assert cfg.seed is None
        assert cfg.empty_cluster_policy is EmptyClusterPolicy.DROP

    def test_policy_from_string(self):
        cfg = KMeansConfig(2, 3, 5, empty_cluster_policy="retain-previous")
        assert cfg.empty_cluster_policy is EmptyClusterPolicy.RETAIN_PREVIOUS

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"dimensions": 0, "num_clusters": 1, "iterations": 1},
            {"dimensions": 2, "num_clusters": 0, "iterations": 1},
            {"dimensions": 2, "num_clusters": 1, "iterations": -1},
            {"dimensions": 2, "num_clusters": 1, "iterations": 1, "empty_cluster_policy": "keep"},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            KMeansConfig(**kwargs)
