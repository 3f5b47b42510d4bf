from .accumulator import CentroidAccumulator, ClusterAssignment
from .centroids import CentroidSet
from .config import DriverState, EmptyClusterPolicy, KMeansConfig
from .driver import IterationDriver, kmeans
from .errors import DimensionMismatch, InsufficientData, KMeansError
from .model import KMeansModel
from .point import Point
from .steps import assemble_centroids, assignment_mean, classify_assign

__all__ = [
    "Point",
    "CentroidAccumulator",
    "ClusterAssignment",
    "CentroidSet",
    "classify_assign",
    "assignment_mean",
    "assemble_centroids",
    "IterationDriver",
    "kmeans",
    "KMeansModel",
    "KMeansConfig",
    "EmptyClusterPolicy",
    "DriverState",
    "KMeansError",
    "InsufficientData",
    "DimensionMismatch",
]
