from __future__ import annotations

from dataclasses import dataclass
from multiprocessing import Pool, cpu_count
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, TypeVar

import numpy as np

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class MultiprocessingConfig:
    """Параметры исполнения: число процессов и размер партиции."""

    n_processes: int = 4
    chunk_size: Optional[int] = None


# Закэшированные партиции, переданные воркеру при старте пула: {token: partitions}
_WORKER_PARTITIONS: Dict[int, List[Sequence[Any]]] = {}


def _init_worker_partitions(shared: Dict[int, List[Sequence[Any]]]) -> None:
    global _WORKER_PARTITIONS
    _WORKER_PARTITIONS = shared


@dataclass(frozen=True)
class SharedPartition:
    """Ссылка на партицию, которая уже лежит в памяти воркеров."""

    token: int
    index: int

    def resolve(self) -> Sequence[Any]:
        return _WORKER_PARTITIONS[self.token][self.index]


class DataflowContext:
    """
    Исполнитель партиционированных последовательностей.

    При n_processes <= 1 всё выполняется в текущем процессе, иначе задачи
    по партициям раздаются в multiprocessing.Pool из
    min(n_processes, cpu_count()) процессов. Пул создаётся лениво
    при первой задаче и закрывается в close() (или при выходе из ``with``).

    Закэшированные партиции копируются в воркеры один раз, через
    initializer пула; задачи по ним несут только SharedPartition.
    """

    def __init__(
        self,
        mp: MultiprocessingConfig = MultiprocessingConfig(),
        logger: Any | None = None,
    ) -> None:
        self.mp = mp
        self.logger = logger
        self._pool: Optional[Pool] = None
        self._shared: Dict[int, List[Sequence[Any]]] = {}

        if self.mp.chunk_size is not None and int(self.mp.chunk_size) <= 0:
            raise ValueError("chunk_size must be positive")

    @property
    def n_workers(self) -> int:
        return max(1, min(int(self.mp.n_processes), cpu_count()))

    @property
    def is_parallel(self) -> bool:
        return int(self.mp.n_processes) > 1

    # --- Источники данных ---

    def parallelize(
        self, items: Sequence[T], num_partitions: Optional[int] = None
    ) -> "PartitionedSequence":
        """Разбивает последовательность в памяти на непрерывные партиции."""
        from .sequence import PartitionedSequence

        items = list(items)
        parts = [items[a:b] for a, b in self._make_chunks(len(items), num_partitions)]
        return PartitionedSequence(self, parts, materialized=True)

    def generate(
        self,
        n: int,
        fn: Callable[[int], T],
        num_partitions: Optional[int] = None,
    ) -> "PartitionedSequence":
        """
        Ленивая последовательность ``fn(0) .. fn(n - 1)``.

        fn вызывается при каждом чтении, поэтому недетерминированный
        генератор нужно закэшировать (cache()) до повторного использования.
        """
        from .sequence import PartitionedSequence

        if n < 0:
            raise ValueError("n must be non-negative")
        parts = [range(a, b) for a, b in self._make_chunks(n, num_partitions)]
        return PartitionedSequence(self, parts, stages=(fn,))

    # --- Разбиение ---

    def _make_chunks(
        self, N: int, num_partitions: Optional[int] = None
    ) -> List[Tuple[int, int]]:
        """Границы [start, stop) непрерывных партиций, пустые отбрасываются."""
        if num_partitions is not None:
            if num_partitions <= 0:
                raise ValueError("num_partitions must be positive")
            splits = np.array_split(np.arange(N), num_partitions)
            bounds = [(int(s[0]), int(s[-1]) + 1) for s in splits if s.size > 0]
        elif self.mp.chunk_size is None:
            splits = np.array_split(np.arange(N), self.n_workers)
            bounds = [(int(s[0]), int(s[-1]) + 1) for s in splits if s.size > 0]
        else:
            cs = int(self.mp.chunk_size)
            bounds = [(i, min(i + cs, N)) for i in range(0, N, cs)]
        return bounds

    # --- Исполнение ---

    def share(self, partitions: List[Sequence[Any]]) -> Optional[int]:
        """
        Регистрирует закэшированные партиции для воркеров.

        Возвращает token для SharedPartition или None без пула. Запущенный
        пул закрывается: следующий стартует уже с новыми данными.
        """
        if not self.is_parallel:
            return None
        token = len(self._shared)
        self._shared[token] = partitions
        self.close()
        return token

    def _ensure_pool(self) -> Pool:
        if self._pool is None:
            if self.logger:
                self.logger.debug(
                    f"Starting worker pool ({self.n_workers} processes, "
                    f"{len(self._shared)} shared sequences)"
                )
            self._pool = Pool(
                processes=self.n_workers,
                initializer=_init_worker_partitions,
                initargs=(self._shared,),
            )
        return self._pool

    def run(self, worker: Callable[[T], R], tasks: Sequence[T]) -> List[R]:
        """Выполняет worker по одной задаче на партицию, порядок сохраняется."""
        if not self.is_parallel or not tasks:
            return [worker(t) for t in tasks]
        return self._ensure_pool().map(worker, tasks)

    def close(self) -> None:
        """Закрыть пул (если он был создан)."""
        if self._pool is not None:
            self._pool.close()
            self._pool.join()
        self._pool = None

    def __enter__(self) -> DataflowContext:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
