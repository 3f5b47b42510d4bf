from __future__ import annotations

from typing import Iterable, Iterator, Sequence, Tuple

import numpy as np

from .errors import DimensionMismatch
from .point import Point


class CentroidSet:
    """
    Упорядоченный неизменяемый набор центроидов; индекс = id кластера.

    Каждая итерация порождает новый CentroidSet, старый не модифицируется.
    Поэтому снимок можно передавать в воркеры как есть: читатель никогда
    не увидит частично обновлённый набор.
    """

    __slots__ = ("_points", "_matrix")

    def __init__(self, points: Iterable[Point]) -> None:
        pts = tuple(p if isinstance(p, Point) else Point(p) for p in points)
        if pts:
            dim = pts[0].dimension()
            for p in pts[1:]:
                if p.dimension() != dim:
                    raise DimensionMismatch(dim, p.dimension())
            matrix = np.vstack([p.to_numpy() for p in pts])
        else:
            matrix = np.empty((0, 0), dtype=np.float64)
        matrix.setflags(write=False)
        self._points: Tuple[Point, ...] = pts
        self._matrix = matrix

    @property
    def points(self) -> Tuple[Point, ...]:
        return self._points

    def dimension(self) -> int:
        return self._matrix.shape[1] if self._points else 0

    def to_numpy(self) -> np.ndarray:
        """Матрица (K, D), read-only."""
        return self._matrix

    def nearest(self, point: Point) -> Tuple[int, float]:
        """
        Ближайший центроид: (cluster_id, квадрат расстояния).

        При равных расстояниях побеждает меньший id (строгое ``<``),
        это делает классификацию детерминированной.
        """
        if not self._points:
            raise ValueError("CentroidSet is empty")
        closest_id = 0
        min_dist = point.squared_distance(self._points[0])
        for i in range(1, len(self._points)):
            dist = point.squared_distance(self._points[i])
            if dist < min_dist:
                min_dist = dist
                closest_id = i
        return closest_id, min_dist

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self._points)

    def __getitem__(self, i: int) -> Point:
        return self._points[i]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CentroidSet):
            return NotImplemented
        return self._points == other._points

    def __repr__(self) -> str:
        return f"CentroidSet({list(self._points)!r})"

    def __getstate__(self) -> Sequence[Point]:
        return self._points

    def __setstate__(self, state: Sequence[Point]) -> None:
        self.__init__(state)
