"""
Шаги одной итерации Ллойда: назначение, редукция, обновление.

Все функции объявлены на уровне модуля, чтобы их можно было передать
в процессы пула (pickle). Снимок центроидов передаётся явным аргументом
через functools.partial, а не захватывается замыканием.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Tuple

from .accumulator import (
    CentroidAccumulator,
    ClusterAssignment,
    assignment_key,
    combine_assignments,
)
from .centroids import CentroidSet
from .config import EmptyClusterPolicy
from .point import Point

__all__ = [
    "classify_assign",
    "assignment_key",
    "combine_assignments",
    "assignment_mean",
    "assemble_centroids",
]


def classify_assign(point: Point, centroids: CentroidSet) -> ClusterAssignment:
    """Назначение точки ближайшему центроиду + одноточечный аккумулятор."""
    cluster_id, _ = centroids.nearest(point)
    return ClusterAssignment(cluster_id, CentroidAccumulator(point, 1))


def assignment_mean(assignment: ClusterAssignment) -> Tuple[int, Point]:
    """Редуцированный аккумулятор → (cluster_id, новый центроид)."""
    return assignment.cluster_id, assignment.accumulator.mean()


def assemble_centroids(
    means: Iterable[Tuple[int, Point]],
    previous: CentroidSet,
    policy: EmptyClusterPolicy = EmptyClusterPolicy.DROP,
    logger: Any | None = None,
) -> CentroidSet:
    """
    Сборка нового набора центроидов из средних по кластерам.

    - DROP: id без точек выпадают, оставшиеся перенумеровываются подряд
      в порядке возрастания старых id;
    - RETAIN_PREVIOUS: для пустых id берётся центроид из ``previous``.
    """
    policy = EmptyClusterPolicy(policy)
    by_id = dict(means)
    empty: List[int] = [i for i in range(len(previous)) if i not in by_id]

    if policy is EmptyClusterPolicy.RETAIN_PREVIOUS:
        new_points = [by_id.get(i, previous[i]) for i in range(len(previous))]
    else:
        new_points = [by_id[i] for i in sorted(by_id)]

    if empty and logger:
        level = logging.WARNING if policy is EmptyClusterPolicy.DROP else logging.INFO
        logger.log(
            level,
            f"  Empty clusters {empty} ({policy.value}): "
            f"{len(previous)} -> {len(new_points)} centroids",
        )

    return CentroidSet(new_points)
