"""Directory walk and per-subtree aggregation."""

from dirtally.walk.aggregator import (
    IOFailure,
    TraversalStateError,
    TreeAggregator,
    aggregate_tree,
)
from dirtally.walk.models import (
    DirectoryAccumulator,
    SubtreeContext,
    SummaryRecord,
    WalkFailure,
)

__all__ = [
    "IOFailure",
    "TraversalStateError",
    "TreeAggregator",
    "aggregate_tree",
    "DirectoryAccumulator",
    "SubtreeContext",
    "SummaryRecord",
    "WalkFailure",
]
