from __future__ import annotations

from functools import partial
from typing import Any, Iterable, Optional

from dkmeans.dataflow.sequence import PartitionedSequence
from dkmeans.metrics.timers import StepTimings, Timer

from .centroids import CentroidSet
from .config import DriverState, EmptyClusterPolicy, KMeansConfig
from .errors import DimensionMismatch, InsufficientData
from .model import KMeansModel
from .point import Point
from .steps import (
    assemble_centroids,
    assignment_key,
    assignment_mean,
    classify_assign,
    combine_assignments,
)


class IterationDriver:
    """
    Драйвер алгоритма Ллойда поверх партиционированной последовательности.

    Состояния: INIT → SAMPLE → {BROADCAST → CLASSIFY → REDUCE → UPDATE} × iterations
    → GATHER → DONE. Число итераций фиксировано, ранней остановки нет.

    Только драйвер заменяет текущий набор центроидов, и делает
    это только между итерациями. При ошибке запуск прерывается, ``state``
    остаётся в том состоянии, где она произошла.

    Тайминги (``timings``):
    - t_classify_total: назначение + редукция (выполняются одним проходом);
    - t_update_total: вычисление средних и сборка нового набора;
    - t_iter_total: сумма двух предыдущих.
    """

    def __init__(self, config: KMeansConfig, logger: Any | None = None) -> None:
        self.config = config
        self.logger = logger

        self.state = DriverState.INIT
        self.centroids: CentroidSet | None = None
        self.timings = StepTimings()

    def _enter(self, state: DriverState) -> None:
        self.state = state
        if self.logger:
            self.logger.debug(f"  state -> {state.value}")

    def _initial_centroids(
        self,
        points: PartitionedSequence,
        initial_centroids: Optional[Iterable[Point]],
    ) -> CentroidSet:
        cfg = self.config

        available = points.size()
        if available < cfg.num_clusters:
            raise InsufficientData(available, cfg.num_clusters)

        if initial_centroids is None:
            sampled = points.sample(cfg.num_clusters, seed=cfg.seed).all_gather()
            centroids = CentroidSet(sampled)
        else:
            centroids = CentroidSet(initial_centroids)
            if len(centroids) != cfg.num_clusters:
                raise ValueError(
                    f"Expected {cfg.num_clusters} initial centroids, got {len(centroids)}"
                )

        if centroids.dimension() != cfg.dimensions:
            raise DimensionMismatch(cfg.dimensions, centroids.dimension())
        return centroids

    def _iterate(self, points: PartitionedSequence, snapshot: CentroidSet) -> CentroidSet:
        """Одна итерация против фиксированного снимка центроидов."""
        cfg = self.config

        with Timer() as t_classify:
            self._enter(DriverState.CLASSIFY)
            closest = points.map(partial(classify_assign, centroids=snapshot))
            self._enter(DriverState.REDUCE)
            reduced = closest.reduce_by_key(assignment_key, combine_assignments)

        with Timer() as t_update:
            self._enter(DriverState.UPDATE)
            means = reduced.map(assignment_mean).collapse().all_gather()
            new_centroids = assemble_centroids(
                means, snapshot, cfg.empty_cluster_policy, logger=self.logger
            )

        self.timings.add_iteration(t_classify.elapsed, t_update.elapsed)
        return new_centroids

    def run(
        self,
        points: PartitionedSequence,
        initial_centroids: Optional[Iterable[Point]] = None,
    ) -> KMeansModel:
        cfg = self.config
        self.timings = StepTimings()
        self.centroids = None

        self._enter(DriverState.INIT)
        points = points.cache()

        self._enter(DriverState.SAMPLE)
        self.centroids = self._initial_centroids(points, initial_centroids)

        if self.logger:
            self.logger.info(
                f"  Start: N={points.size()} D={cfg.dimensions} K={cfg.num_clusters} "
                f"iterations={cfg.iterations} partitions={points.num_partitions}"
            )

        for i in range(cfg.iterations):
            self._enter(DriverState.BROADCAST)
            snapshot = self.centroids
            new_centroids = self._iterate(points, snapshot)
            self.centroids = new_centroids

            last = i + 1 == cfg.iterations
            if self.logger and (i == 0 or (i + 1) % 10 == 0 or last):
                self.logger.info(
                    f"  Iteration {i + 1}/{cfg.iterations} "
                    f"(K={len(new_centroids)}, "
                    f"T_classify={self.timings.t_classify_last:.6f}s, "
                    f"T_update={self.timings.t_update_last:.6f}s)"
                )

        self._enter(DriverState.GATHER)
        model = KMeansModel(
            dimensions=cfg.dimensions,
            num_clusters=cfg.num_clusters,
            iterations=cfg.iterations,
            centroids=self.centroids,
        )
        self._enter(DriverState.DONE)
        return model


def kmeans(
    points: PartitionedSequence,
    dimensions: int,
    num_clusters: int,
    iterations: int,
    *,
    seed: Optional[int] = None,
    empty_cluster_policy: EmptyClusterPolicy | str = EmptyClusterPolicy.DROP,
    initial_centroids: Optional[Iterable[Point]] = None,
    logger: Any | None = None,
) -> KMeansModel:
    """
    Кластеризация k-means (Ллойд) за фиксированное число итераций.

    Args:
        points: Последовательность Point из DataflowContext; кэшируется
            один раз перед выборкой и первой итерацией
        dimensions: Размерность точек
        num_clusters: Число кластеров K
        iterations: Число итераций (ровно столько и выполняется)
        seed: Seed для равномерной выборки начальных центроидов
        empty_cluster_policy: "drop" (по умолчанию) или "retain-previous"
        initial_centroids: Явные начальные центроиды вместо выборки
        logger: Логгер для сообщений по итерациям

    Returns:
        KMeansModel с итоговыми центроидами

    Raises:
        InsufficientData: Если точек меньше, чем num_clusters
        DimensionMismatch: Если размерность точек не равна dimensions
    """
    config = KMeansConfig(
        dimensions=dimensions,
        num_clusters=num_clusters,
        iterations=iterations,
        seed=seed,
        empty_cluster_policy=empty_cluster_policy,
    )
    return IterationDriver(config, logger=logger).run(points, initial_centroids)
