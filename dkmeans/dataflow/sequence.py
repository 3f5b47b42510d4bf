"""
Партиционированная последовательность с ленивыми преобразованиями.

Минимальный набор примитивов, из которых собирается распределённый k-means:
cache / collapse, sample, map, reduce_by_key, all_gather, sum.

map только дописывает функцию в цепочку стадий; вычисление происходит
в действиях (all_gather, sum, reduce_by_key, sample) и в cache/collapse,
которые фиксируют результат и обрывают цепочку.
"""

from __future__ import annotations

import math
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    Hashable,
    Iterable,
    List,
    Optional,
    Sequence,
    Tuple,
)

import numpy as np

from .context import SharedPartition

if TYPE_CHECKING:
    from .context import DataflowContext

Stage = Callable[[Any], Any]
Partition = Any  # Sequence[Any] | SharedPartition


# --- Задачи для воркеров (уровень модуля, чтобы работал pickle) ---


def _resolve(part: Partition) -> Sequence[Any]:
    return part.resolve() if isinstance(part, SharedPartition) else part


def _apply_stages(items: Partition, stages: Sequence[Stage]) -> List[Any]:
    out = []
    for x in _resolve(items):
        for fn in stages:
            x = fn(x)
        out.append(x)
    return out


def _evaluate_worker(args: Tuple[Partition, Tuple[Stage, ...]]) -> List[Any]:
    items, stages = args
    return _apply_stages(items, stages)


def _local_reduce_worker(
    args: Tuple[Partition, Tuple[Stage, ...], Callable, Callable]
) -> List[Tuple[Hashable, Any]]:
    """Локальная предагрегация партиции: (key, value) на каждый ключ."""
    items, stages, key_fn, combine_fn = args
    acc: Dict[Hashable, Any] = {}
    for x in _apply_stages(items, stages):
        k = key_fn(x)
        acc[k] = combine_fn(acc[k], x) if k in acc else x
    return list(acc.items())


def _exact_partials(values: Iterable[float]) -> List[float]:
    """
    Неперекрывающиеся частичные суммы (алгоритм Шевчука, как в math.fsum).

    Их точная сумма равна точной сумме values, поэтому итог не зависит
    от того, как элементы разложены по партициям.
    """
    partials: List[float] = []
    for x in values:
        x = float(x)
        i = 0
        for y in partials:
            if abs(x) < abs(y):
                x, y = y, x
            hi = x + y
            lo = y - (hi - x)
            if lo:
                partials[i] = lo
                i += 1
            x = hi
        partials[i:] = [x]
    return partials


def _sum_worker(args: Tuple[Partition, Tuple[Stage, ...]]) -> List[float]:
    items, stages = args
    return _exact_partials(_apply_stages(items, stages))


class PartitionedSequence:
    """Неизменяемая последовательность, разбитая на партиции."""

    def __init__(
        self,
        context: "DataflowContext",
        partitions: List[Sequence[Any]],
        stages: Tuple[Stage, ...] = (),
        materialized: bool = False,
        shared: Optional[int] = None,
    ) -> None:
        self.context = context
        self._partitions = partitions
        self._stages = tuple(stages)
        self._materialized = materialized and not self._stages
        self._shared = shared

    # --- Свойства ---

    @property
    def num_partitions(self) -> int:
        return len(self._partitions)

    @property
    def is_materialized(self) -> bool:
        return self._materialized

    @property
    def is_shared(self) -> bool:
        """Партиции уже лежат в памяти воркеров пула."""
        return self._shared is not None

    @property
    def pending_stages(self) -> int:
        """Длина цепочки невычисленных преобразований."""
        return len(self._stages)

    def size(self) -> int:
        # map сохраняет длину, поэтому вычислять цепочку не нужно
        return sum(len(p) for p in self._partitions)

    # --- Преобразования ---

    def map(self, fn: Stage) -> PartitionedSequence:
        """Ленивое поэлементное преобразование."""
        return PartitionedSequence(
            self.context,
            self._partitions,
            stages=self._stages + (fn,),
            shared=self._shared,
        )

    def _task_partitions(self) -> List[Partition]:
        """Что отправить воркерам: сами данные или ссылки на них."""
        if self._shared is None:
            return list(self._partitions)
        return [SharedPartition(self._shared, i) for i in range(len(self._partitions))]

    def _evaluate(self) -> List[List[Any]]:
        if self._materialized:
            return [list(p) for p in self._partitions]
        tasks = [(p, self._stages) for p in self._task_partitions()]
        return self.context.run(_evaluate_worker, tasks)

    def cache(self) -> PartitionedSequence:
        """
        Вычисляет последовательность один раз.

        Все последующие чтения результата видят одни и те же значения,
        даже если источник недетерминирован. В пуле результат к тому же
        раздаётся воркерам, и дальнейшие задачи по нему не пересылают точки.
        """
        if self._materialized:
            if self._shared is not None or not self.context.is_parallel:
                return self
            parts = self._partitions
        else:
            parts = self._evaluate()
            if self.context.logger:
                self.context.logger.debug(
                    f"Materialized {sum(len(p) for p in parts)} items "
                    f"in {len(parts)} partitions"
                )
        token = self.context.share(parts)
        return PartitionedSequence(self.context, parts, materialized=True, shared=token)

    def collapse(self) -> PartitionedSequence:
        """Принудительно сворачивает цепочку стадий в готовое значение."""
        if self._materialized:
            return self
        return PartitionedSequence(self.context, self._evaluate(), materialized=True)

    def reduce_by_key(
        self,
        key_fn: Callable[[Any], Hashable],
        combine_fn: Callable[[Any, Any], Any],
    ) -> PartitionedSequence:
        """
        Группировка по ключу со свёрткой combine_fn.

        combine_fn обязана быть ассоциативной и коммутативной: партиции
        сначала сворачиваются локально, затем частичные результаты
        сливаются между собой. Результат: по одному элементу на ключ,
        в порядке возрастания ключей.
        """
        tasks = [(p, self._stages, key_fn, combine_fn) for p in self._task_partitions()]
        partials = self.context.run(_local_reduce_worker, tasks)

        merged: Dict[Hashable, Any] = {}
        for pairs in partials:
            for k, v in pairs:
                merged[k] = combine_fn(merged[k], v) if k in merged else v

        values = [merged[k] for k in sorted(merged)]
        parts = [values[a:b] for a, b in self.context._make_chunks(len(values))]
        return PartitionedSequence(self.context, parts, materialized=True)

    # --- Действия ---

    def sample(
        self, n: int, seed: Optional[int] = None, replace: bool = False
    ) -> PartitionedSequence:
        """
        Равномерная выборка ``n`` элементов со всей последовательности.

        Выборка делается одна на всю последовательность (а не по партициям),
        её порядок задаётся порядком извлечения.
        """
        if n < 0:
            raise ValueError("sample size must be non-negative")
        parts = self._evaluate()
        total = sum(len(p) for p in parts)
        if not replace and n > total:
            raise ValueError(f"Cannot sample {n} items from {total} without replacement")
        if n > 0 and total == 0:
            raise ValueError("Cannot sample from an empty sequence")

        rng = np.random.default_rng(seed)
        picks = rng.choice(total, size=n, replace=replace) if n > 0 else []

        # глобальный индекс → (партиция, смещение)
        offsets = np.cumsum([0] + [len(p) for p in parts])
        chosen = []
        for g in picks:
            pi = int(np.searchsorted(offsets, g, side="right")) - 1
            chosen.append(parts[pi][int(g - offsets[pi])])

        return PartitionedSequence(self.context, [chosen], materialized=True)

    def all_gather(self) -> List[Any]:
        """Собирает всю последовательность в один список (порядок партиций)."""
        return [x for part in self._evaluate() for x in part]

    def sum(self) -> float:
        """
        Сумма элементов, корректно округлённая (как math.fsum).

        Партиции возвращают точные частичные суммы, поэтому результат
        не зависит от разбиения на партиции.
        """
        if self._materialized:
            partials = [_sum_worker((p, ())) for p in self._partitions]
        else:
            tasks = [(p, self._stages) for p in self._task_partitions()]
            partials = self.context.run(_sum_worker, tasks)
        return math.fsum(x for part in partials for x in part)

    def __repr__(self) -> str:
        return (
            f"PartitionedSequence(size={self.size()}, "
            f"partitions={self.num_partitions}, stages={len(self._stages)})"
        )
