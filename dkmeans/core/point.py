"""
Точка фиксированной размерности с вещественными координатами.

Хранит координаты в read-only массиве NumPy (float64), поэтому экземпляры
можно безопасно разделять между потоками и передавать в процессы пула.
"""

from __future__ import annotations

from typing import Iterable, Iterator

import numpy as np

from .errors import DimensionMismatch


class Point:
    """Неизменяемый D-мерный вектор."""

    __slots__ = ("_coords",)

    def __init__(self, coords: Iterable[float] | np.ndarray) -> None:
        arr = np.array(coords, dtype=np.float64)
        if arr.ndim != 1:
            raise ValueError(f"Point expects a 1-D sequence, got shape {arr.shape}")
        arr.setflags(write=False)
        self._coords = arr

    @classmethod
    def _wrap(cls, arr: np.ndarray) -> Point:
        """Создание без копирования (для результатов арифметики)."""
        p = cls.__new__(cls)
        arr.setflags(write=False)
        p._coords = arr
        return p

    def dimension(self) -> int:
        return int(self._coords.shape[0])

    def _check(self, other: Point) -> None:
        if other.dimension() != self.dimension():
            raise DimensionMismatch(self.dimension(), other.dimension())

    def add(self, other: Point) -> Point:
        """Покомпонентная сумма."""
        self._check(other)
        return Point._wrap(self._coords + other._coords)

    def scale_divide(self, scalar: float) -> Point:
        """Покомпонентное деление на скаляр."""
        return Point._wrap(self._coords / float(scalar))

    def squared_distance(self, other: Point) -> float:
        """Квадрат евклидова расстояния."""
        self._check(other)
        diff = self._coords - other._coords
        return float(np.dot(diff, diff))

    def to_numpy(self) -> np.ndarray:
        return self._coords

    def to_list(self) -> list[float]:
        return [float(x) for x in self._coords]

    # --- протокол последовательности / значения ---

    def __len__(self) -> int:
        return self.dimension()

    def __iter__(self) -> Iterator[float]:
        return iter(self.to_list())

    def __getitem__(self, i: int) -> float:
        return float(self._coords[i])

    def __add__(self, other: Point) -> Point:
        return self.add(other)

    def __truediv__(self, scalar: float) -> Point:
        return self.scale_divide(scalar)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self.dimension() == other.dimension() and bool(
            np.array_equal(self._coords, other._coords)
        )

    def __hash__(self) -> int:
        return hash(tuple(self.to_list()))

    def __repr__(self) -> str:
        return f"Point({self.to_list()})"

    def __getstate__(self) -> list[float]:
        return self.to_list()

    def __setstate__(self, state: list[float]) -> None:
        arr = np.array(state, dtype=np.float64)
        arr.setflags(write=False)
        self._coords = arr
