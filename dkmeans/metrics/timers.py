"""
Таймеры для замера шагов итерации k-means.

Timer: контекстный менеджер на time.perf_counter(); StepTimings копит
суммарное время по шагам одного запуска драйвера.
"""
from __future__ import annotations
import time
from dataclasses import dataclass
from typing import Any


class Timer:
    """
    Контекстный менеджер для измерения времени выполнения кода.

    Пример использования:
        with Timer() as t:
            points.cache()
        elapsed_time = t.elapsed
    """

    def __init__(self) -> None:
        self.start: float = 0.0
        self.end: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> Timer:
        self.start = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        self.end = time.perf_counter()
        self.elapsed = self.end - self.start


@dataclass
class StepTimings:
    """Суммарные тайминги за один запуск (секунды)."""

    t_classify_total: float = 0.0
    t_update_total: float = 0.0
    n_iters_actual: int = 0
    t_classify_last: float = 0.0
    t_update_last: float = 0.0

    @property
    def t_iter_total(self) -> float:
        return self.t_classify_total + self.t_update_total

    def add_iteration(self, t_classify: float, t_update: float) -> None:
        self.t_classify_total += t_classify
        self.t_update_total += t_update
        self.n_iters_actual += 1
        self.t_classify_last = t_classify
        self.t_update_last = t_update
