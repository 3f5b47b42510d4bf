"""
Аккумуляторы центроидов: сумма точек + их количество.

combine ассоциативен и коммутативен, поэтому результат редукции не зависит
ни от границ партиций, ни от порядка прихода частичных сумм.
"""

from __future__ import annotations

from dataclasses import dataclass

from .point import Point


@dataclass(frozen=True)
class CentroidAccumulator:
    """Сумма ``count`` точек, свёрнутых в один аккумулятор."""

    sum: Point
    count: int = 1

    def combine(self, other: CentroidAccumulator) -> CentroidAccumulator:
        return CentroidAccumulator(self.sum.add(other.sum), self.count + other.count)

    def mean(self) -> Point:
        return self.sum.scale_divide(self.count)


@dataclass(frozen=True)
class ClusterAssignment:
    """Назначение точки (или группы точек) кластеру ``cluster_id``."""

    cluster_id: int
    accumulator: CentroidAccumulator


def assignment_key(assignment: ClusterAssignment) -> int:
    """Ключ для reduce_by_key."""
    return assignment.cluster_id


def combine_assignments(a: ClusterAssignment, b: ClusterAssignment) -> ClusterAssignment:
    """Слияние двух назначений одного кластера."""
    return ClusterAssignment(a.cluster_id, a.accumulator.combine(b.accumulator))
