from .dataset import PointDataset, validate_dataset
from .generator import UniformPointSource, generate_blobs

__all__ = ["PointDataset", "validate_dataset", "generate_blobs", "UniformPointSource"]
