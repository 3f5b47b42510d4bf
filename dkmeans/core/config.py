from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class EmptyClusterPolicy(str, Enum):
    """Что делать с кластером, которому на итерации не досталось ни одной точки."""

    # id выпадает из набора центроидов, число кластеров уменьшается
    DROP = "drop"
    # на место пустого кластера переносится его предыдущий центроид
    RETAIN_PREVIOUS = "retain-previous"


class DriverState(str, Enum):
    INIT = "init"
    SAMPLE = "sample"
    BROADCAST = "broadcast"
    CLASSIFY = "classify"
    REDUCE = "reduce"
    UPDATE = "update"
    GATHER = "gather"
    DONE = "done"


@dataclass(frozen=True)
class KMeansConfig:
    """Параметры одного запуска k-means (алгоритм Ллойда)."""

    dimensions: int
    num_clusters: int
    iterations: int
    seed: Optional[int] = None
    empty_cluster_policy: EmptyClusterPolicy = EmptyClusterPolicy.DROP

    def __post_init__(self) -> None:
        if self.dimensions <= 0:
            raise ValueError("dimensions must be positive")
        if self.num_clusters <= 0:
            raise ValueError("num_clusters must be positive")
        if self.iterations < 0:
            raise ValueError("iterations must be non-negative")
        # допускаем строку "drop" / "retain-previous" из CLI
        object.__setattr__(
            self, "empty_cluster_policy", EmptyClusterPolicy(self.empty_cluster_policy)
        )
