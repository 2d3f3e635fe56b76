'Class balancing pipeline for skewed binary datasets.'

from rebalance.config import BalancerConfig
from rebalance.data import BalancedResult, ClassBalancer, StratifiedSplitter
from rebalance.pipeline import BalancingPipeline
from rebalance.sampling import NeighborIndex, SyntheticSampler
from rebalance.utils import (
    BalancingError,
    DegenerateSplit,
    InvalidParameter,
    ShapeMismatch,
    UnknownStrategy,
)

__all__ = [
    'BalancerConfig',
    'BalancedResult',
    'BalancingError',
    'BalancingPipeline',
    'ClassBalancer',
    'DegenerateSplit',
    'InvalidParameter',
    'NeighborIndex',
    'ShapeMismatch',
    'StratifiedSplitter',
    'SyntheticSampler',
    'UnknownStrategy',
]
__version__ = '0.1.0'
