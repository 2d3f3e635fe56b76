'Balancing configuration using dataclasses.'

from dataclasses import dataclass
from typing import Optional

from rebalance.utils import InvalidParameter, UnknownStrategy

# Accepted names (lowercase, without separators) -> canonical strategy
STRATEGY_ALIASES = {
    'oversample': 'oversample',
    'undersample': 'undersample',
    'smote': 'smote',
    'adaptedsmote': 'smote',
}

NEIGHBOR_STRATEGIES = frozenset({'smote'})


def resolve_strategy(name: str) -> str:
    'Map a strategy name or alias to its canonical name.'
    key = str(name).lower().replace('_', '').replace('-', '')
    if key not in STRATEGY_ALIASES:
        raise UnknownStrategy(name, sorted(STRATEGY_ALIASES))
    return STRATEGY_ALIASES[key]


@dataclass
class BalancerConfig:
    'Configuration for splitting and balancing a binary dataset.'

    # Balancing method and neighbour count for synthetic strategies
    strategy: str = 'oversample'
    k_neighbors: int = 5

    # Per-class split fractions; test takes the remainder
    train_ratio: float = 0.5
    valid_ratio: float = 0.25

    random_seed: Optional[int] = 42

    # Interpolation range when the chosen neighbour is a majority row
    majority_scale: float = 0.5

    # Passed to sklearn NearestNeighbors
    neighbor_n_jobs: Optional[int] = 1

    # Output
    output_dir: Optional[str] = None
    delimiter: str = ','

    def __post_init__(self):
        'Validate and normalize configuration.'
        self.strategy = resolve_strategy(self.strategy)

        # Validate ratios
        if not 0 < self.train_ratio < 1:
            raise InvalidParameter(
                'train_ratio', self.train_ratio, 'must be between 0 and 1'
            )
        if not 0 < self.valid_ratio < 1:
            raise InvalidParameter(
                'valid_ratio', self.valid_ratio, 'must be between 0 and 1'
            )
        if self.train_ratio + self.valid_ratio >= 1:
            raise InvalidParameter(
                'valid_ratio', self.valid_ratio,
                f'train_ratio + valid_ratio must leave room for a test split, '
                f'got {self.train_ratio + self.valid_ratio}'
            )

        if not 0 < self.majority_scale <= 1:
            raise InvalidParameter(
                'majority_scale', self.majority_scale, 'must be in (0, 1]'
            )

        if self.uses_neighbors:
            validate_k(self.k_neighbors)

    @property
    def uses_neighbors(self) -> bool:
        'Whether the configured strategy needs a neighbour search.'
        return self.strategy in NEIGHBOR_STRATEGIES

    @property
    def test_ratio(self) -> float:
        'Nominal test fraction (the split itself absorbs rounding).'
        return 1.0 - self.train_ratio - self.valid_ratio


def validate_k(k: int) -> int:
    'Check that a neighbour count is a positive integer.'
    if isinstance(k, bool) or int(k) != k or k <= 0:
        raise InvalidParameter('k', k, 'neighbour count must be a positive integer')
    return int(k)
