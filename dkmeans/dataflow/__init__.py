from .context import DataflowContext, MultiprocessingConfig
from .sequence import PartitionedSequence

__all__ = [
    "DataflowContext",
    "MultiprocessingConfig",
    "PartitionedSequence",
]
