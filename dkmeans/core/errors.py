"""
Исключения ядра k-means.

Пустой кластер ошибкой не считается: его обработка задаётся политикой
EmptyClusterPolicy (см. dkmeans.core.config).
"""

from __future__ import annotations


class KMeansError(Exception):
    """Базовое исключение для всех ошибок кластеризации."""


class InsufficientData(KMeansError):
    """Точек меньше, чем запрошено кластеров."""

    def __init__(self, available: int, required: int) -> None:
        super().__init__(
            f"Not enough points for initial sampling: "
            f"got {available}, need at least {required}"
        )
        self.available = available
        self.required = required

    def __reduce__(self):
        return type(self), (self.available, self.required)


class DimensionMismatch(KMeansError, ValueError):
    """Размерности точек (или точки и модели) не совпадают."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Dimension mismatch: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual

    # исключение из воркера пула возвращается через pickle
    def __reduce__(self):
        return type(self), (self.expected, self.actual)
