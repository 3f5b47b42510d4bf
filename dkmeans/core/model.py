"""
Результат кластеризации: итоговые центроиды и запросы к ним.
"""

from __future__ import annotations

import json
from functools import partial
from pathlib import Path
from typing import Any, Dict, Iterable, Tuple

from dkmeans.dataflow.sequence import PartitionedSequence

from .centroids import CentroidSet
from .errors import DimensionMismatch
from .point import Point


def _classify(point: Point, model: KMeansModel) -> int:
    return model.classify(point)


def _classify_pair(point: Point, model: KMeansModel) -> Tuple[Point, int]:
    return point, model.classify(point)


def _cost(point: Point, model: KMeansModel) -> float:
    return model.compute_cost(point)


class KMeansModel:
    """
    Неизменяемая модель k-means.

    ``num_clusters`` хранит запрошенное K; фактическое число центроидов
    (``len(model.centroids)``) может быть меньше, если при политике
    ``drop`` часть кластеров опустела.
    """

    def __init__(
        self,
        dimensions: int,
        num_clusters: int,
        iterations: int,
        centroids: CentroidSet | Iterable[Point],
    ) -> None:
        if not isinstance(centroids, CentroidSet):
            centroids = CentroidSet(centroids)
        if len(centroids) == 0:
            raise ValueError("KMeansModel requires at least one centroid")
        if centroids.dimension() != dimensions:
            raise DimensionMismatch(dimensions, centroids.dimension())

        self._dimensions = dimensions
        self._num_clusters = num_clusters
        self._iterations = iterations
        self._centroids = centroids

    # --- Доступ к полям ---

    @property
    def dimensions(self) -> int:
        return self._dimensions

    @property
    def num_clusters(self) -> int:
        return self._num_clusters

    @property
    def iterations(self) -> int:
        return self._iterations

    @property
    def centroids(self) -> CentroidSet:
        return self._centroids

    # --- Классификация ---

    def _check(self, point: Point) -> None:
        if point.dimension() != self._dimensions:
            raise DimensionMismatch(self._dimensions, point.dimension())

    def classify(self, point: Point) -> int:
        """Id ближайшего центроида (при равенстве побеждает меньший id)."""
        self._check(point)
        return self._centroids.nearest(point)[0]

    def classify_all(self, points: PartitionedSequence) -> PartitionedSequence:
        """Ленивая последовательность id кластеров для всех точек."""
        return points.map(partial(_classify, model=self))

    def classify_pairs(self, points: PartitionedSequence) -> PartitionedSequence:
        """Ленивая последовательность пар (точка, id кластера)."""
        return points.map(partial(_classify_pair, model=self))

    # --- Стоимость ---

    def compute_cost(self, point: Point) -> float:
        """Квадрат расстояния до ближайшего центроида."""
        self._check(point)
        return self._centroids.nearest(point)[1]

    def compute_total_cost(self, points: PartitionedSequence) -> float:
        """Сумма квадратов расстояний всех точек до ближайших центроидов."""
        return points.map(partial(_cost, model=self)).sum()

    # --- Сохранение ---

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dimensions": self._dimensions,
            "num_clusters": self._num_clusters,
            "iterations": self._iterations,
            "centroids": [p.to_list() for p in self._centroids],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> KMeansModel:
        return cls(
            dimensions=int(data["dimensions"]),
            num_clusters=int(data["num_clusters"]),
            iterations=int(data["iterations"]),
            centroids=[Point(c) for c in data["centroids"]],
        )

    def save(self, path: str | Path) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, ensure_ascii=False, indent=2)

    @classmethod
    def load(cls, path: str | Path) -> KMeansModel:
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))

    def __repr__(self) -> str:
        return (
            f"KMeansModel(dimensions={self._dimensions}, "
            f"num_clusters={self._num_clusters}, iterations={self._iterations}, "
            f"centroids={len(self._centroids)})"
        )
