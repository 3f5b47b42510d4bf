"""
Общие фикстуры для всех тестов.
"""

import numpy as np
import pytest

from dkmeans.core.point import Point
from dkmeans.dataflow.context import DataflowContext, MultiprocessingConfig


def make_points(rows):
    return [Point(r) for r in rows]


@pytest.fixture
def serial_ctx():
    """Контекст без пула: всё исполняется в текущем процессе."""
    with DataflowContext(MultiprocessingConfig(n_processes=1)) as ctx:
        yield ctx


@pytest.fixture
def pool_ctx():
    """Контекст с пулом (не больше двух процессов, но пул есть всегда)."""
    with DataflowContext(MultiprocessingConfig(n_processes=2)) as ctx:
        yield ctx


@pytest.fixture
def two_sides_points():
    """Четыре точки: две слева (x=0), две справа (x=10)."""
    return make_points([[0.0, 0.0], [0.0, 1.0], [10.0, 0.0], [10.0, 1.0]])


@pytest.fixture
def small_dataset():
    """Фикстура с небольшим тестовым датасетом (2D, 2 кластера)."""
    np.random.seed(42)
    # Два явно разделённых кластера
    cluster1 = np.random.randn(30, 2) + [0, 0]
    cluster2 = np.random.randn(30, 2) + [5, 5]
    X = np.vstack([cluster1, cluster2])
    initial_centroids = make_points([[-1.0, -1.0], [6.0, 6.0]])
    return make_points(X), initial_centroids


@pytest.fixture
def medium_dataset():
    """Фикстура со средним тестовым датасетом (10D, 3 кластера)."""
    np.random.seed(42)
    cluster1 = np.random.randn(50, 10) + [0] * 10
    cluster2 = np.random.randn(50, 10) + [5] * 10
    cluster3 = np.random.randn(50, 10) + [-5] * 10
    X = np.vstack([cluster1, cluster2, cluster3])
    initial_centroids = make_points([[-1.0] * 10, [6.0] * 10, [-6.0] * 10])
    return make_points(X), initial_centroids


@pytest.fixture
def integer_grid_points():
    """Точки с целыми координатами: суммы вычисляются точно."""
    return make_points([[x, y] for x in range(0, 12, 3) for y in range(0, 8, 2)])
