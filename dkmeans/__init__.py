"""Распределённый k-means (алгоритм Ллойда) поверх партиционированных последовательностей."""

from dkmeans.core import (
    DimensionMismatch,
    EmptyClusterPolicy,
    InsufficientData,
    KMeansModel,
    Point,
    kmeans,
)
from dkmeans.dataflow import DataflowContext, MultiprocessingConfig

__version__ = "0.1.0"

__all__ = [
    "kmeans",
    "KMeansModel",
    "Point",
    "EmptyClusterPolicy",
    "InsufficientData",
    "DimensionMismatch",
    "DataflowContext",
    "MultiprocessingConfig",
]
