'Neighbour search and synthetic minority sampling.'

from rebalance.sampling.neighbors import NeighborIndex
from rebalance.sampling.synthetic import SyntheticSampler, fill_round

__all__ = ['NeighborIndex', 'SyntheticSampler', 'fill_round']
