"Data loading, splitting, balancing and writing module."

from rebalance.data.balancer import BalancedResult, ClassBalancer
from rebalance.data.loader import DataLoader
from rebalance.data.splitter import ClassSplit, SplitResult, StratifiedSplitter
from rebalance.data.writer import DatasetWriter

__all__ = [
    "BalancedResult",
    "ClassBalancer",
    "ClassSplit",
    "DataLoader",
    "DatasetWriter",
    "SplitResult",
    "StratifiedSplitter",
]
