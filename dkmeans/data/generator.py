"""
Генераторы синтетических точек.

- generate_blobs: кластеризованные данные через sklearn.make_blobs;
- UniformPointSource: равномерные точки в [0, 1)^D для ctx.generate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
from sklearn.datasets import make_blobs
from sklearn.preprocessing import StandardScaler

from dkmeans.core.point import Point

from .dataset import PointDataset


def generate_blobs(
    N: int,
    D: int,
    K: int,
    cluster_std: float = 1.0,
    seed: int = 42,
    center_box_range: tuple[float, float] = (-3.0, 3.0),
    normalize: bool = True,
) -> PointDataset:
    """
    Генерация датасета из K гауссовых облаков.

    Args:
        N: Количество точек
        D: Размерность пространства
        K: Количество кластеров
        cluster_std: Стандартное отклонение кластеров
        seed: Seed генератора
        center_box_range: Диапазон расположения центров кластеров
        normalize: Приводить ли признаки к нулевому среднему и единичной дисперсии

    Returns:
        PointDataset с истинными метками и центрами в метаданных
    """
    data, labels, centers = make_blobs(
        n_samples=N,
        n_features=D,
        centers=K,
        cluster_std=cluster_std,
        center_box=center_box_range,
        random_state=seed,
        return_centers=True,
    )

    if normalize:
        scaler = StandardScaler()
        data = scaler.fit_transform(data)
        centers = scaler.transform(centers)

    metadata = {
        "K": K,
        "cluster_std": cluster_std,
        "center_box_range": list(center_box_range),
        "normalized": normalize,
        "seed": seed,
        "data_type": "synthetic_blobs",
        "centers": np.asarray(centers).tolist(),
    }
    return PointDataset(data, labels, metadata)


@dataclass(frozen=True)
class UniformPointSource:
    """
    Точка i равномерно распределена в [0, 1)^D.

    С seed результат детерминирован по индексу; без seed каждое чтение
    даёт новые значения, поэтому такую последовательность обязательно
    кэшировать до повторного использования.
    """

    dimensions: int
    seed: Optional[int] = None

    def __call__(self, i: int) -> Point:
        if self.seed is None:
            rng = np.random.default_rng()
        else:
            rng = np.random.default_rng([self.seed, i])
        return Point(rng.random(self.dimensions))
