'Class balancer for training and validation splits of a binary dataset.'

from dataclasses import dataclass
from typing import Optional

import numpy as np

from rebalance.config import NEIGHBOR_STRATEGIES, BalancerConfig, resolve_strategy, validate_k
from rebalance.data.splitter import SplitResult, StratifiedSplitter
from rebalance.sampling.synthetic import SyntheticSampler
from rebalance.utils import (
    DegenerateSplit,
    InvalidParameter,
    ShapeMismatch,
    class_counts,
    ensure_rng,
    get_logger,
)

# Splits that get balanced; test keeps its native class ratio
BALANCED_SPLITS = ('train', 'valid')


@dataclass
class BalancedResult:
    '''
    Balanced training/validation sets and the untouched test set.

    Unpacks to the six-tuple
    (train, train_labels, valid, valid_labels, test, test_labels).
    '''

    train: np.ndarray
    train_labels: np.ndarray
    valid: np.ndarray
    valid_labels: np.ndarray
    test: np.ndarray
    test_labels: np.ndarray
    strategy: str = 'oversample'

    def __iter__(self):
        return iter((
            self.train, self.train_labels,
            self.valid, self.valid_labels,
            self.test, self.test_labels,
        ))

    def get_split(self, name: str) -> tuple[np.ndarray, np.ndarray]:
        'Get (features, labels) of a split by name.'
        return getattr(self, name), getattr(self, f'{name}_labels')

    def counts(self) -> dict[str, dict[int, int]]:
        'Row count per class for every split.'
        return {
            name: class_counts(self.get_split(name)[1])
            for name in ('train', 'valid', 'test')
        }

    def __repr__(self) -> str:
        return (
            f'BalancedResult(strategy={self.strategy!r}, train={len(self.train)}, '
            f'valid={len(self.valid)}, test={len(self.test)})'
        )


class ClassBalancer:
    '''
    Split a binary dataset per class and balance training and validation.

    Strategies:
    - oversample: repeat the minority rows cyclically up to the majority size
    - undersample: random subsample (without replacement) of the majority
      down to the minority size
    - smote / adaptedSmote: grow the minority with synthetic rows from
      SyntheticSampler

    Training and validation are balanced independently of each other. The
    test split is never balanced or shuffled: class 0 rows come first, then
    class 1 rows.
    '''

    def __init__(self, config: Optional[BalancerConfig] = None):
        self.config = config or BalancerConfig()
        self.logger = get_logger('data.balancer')
        self.splitter = StratifiedSplitter(self.config)
        self.split_result_: Optional[SplitResult] = None
        self.strategy_: Optional[str] = None
        self.k_: Optional[int] = None

        self._strategies = {
            'oversample': self._oversample,
            'undersample': self._undersample,
            'smote': self._smote,
        }

    def balance(
        self,
        data,
        labels,
        strategy: Optional[str] = None,
        k: Optional[int] = None,
        random_state=None,
    ) -> BalancedResult:
        '''
        Split and balance a dataset.

        Args:
            data: Feature matrix (rows x features)
            labels: Binary label vector, one per row
            strategy: Balancing method name, defaults to the config
            k: Neighbour count for synthetic strategies, defaults to the config
            random_state: Seed or numpy Generator, defaults to config.random_seed

        Returns:
            BalancedResult
        '''
        strategy = resolve_strategy(strategy if strategy is not None else self.config.strategy)
        k = self.config.k_neighbors if k is None else k
        if strategy in NEIGHBOR_STRATEGIES:
            k = validate_k(k)

        rng = ensure_rng(random_state if random_state is not None else self.config.random_seed)
        self.strategy_, self.k_ = strategy, k

        self.logger.info(f'Balancing with strategy "{strategy}"')

        # 1. Per-class shuffle and split
        split_result = self.splitter.split_by_class(data, labels, rng)
        self.split_result_ = split_result
        self._check_splits(split_result, strategy, k)

        # 2. Balance training and validation, each with its own draws
        balanced = {}
        for name in BALANCED_SPLITS:
            rows0, rows1 = split_result.get_split(name)
            balanced[name] = self._balance_split(name, rows0, rows1, strategy, k, rng)

        # 3. Merge classes and shuffle rows and labels together
        merged = {}
        for name in BALANCED_SPLITS:
            features, label_vector = self._merge(*balanced[name])
            permutation = rng.permutation(len(features))
            merged[name] = (features[permutation], label_vector[permutation])

        test, test_labels = self._merge(*split_result.get_split('test'))

        result = BalancedResult(
            train=merged['train'][0],
            train_labels=merged['train'][1],
            valid=merged['valid'][0],
            valid_labels=merged['valid'][1],
            test=test,
            test_labels=test_labels,
            strategy=strategy,
        )
        self._log_counts(result)

        return result

    def _check_splits(self, split_result: SplitResult, strategy: str, k: int) -> None:
        'Fail before balancing if a split cannot be balanced.'
        for name in BALANCED_SPLITS:
            rows0, rows1 = split_result.get_split(name)

            for label, rows in ((0, rows0), (1, rows1)):
                if len(rows) == 0:
                    raise DegenerateSplit(name, label)

            if rows0.shape[1] != rows1.shape[1]:
                raise ShapeMismatch(
                    f'Split "{name}" has {rows0.shape[1]} columns in class 0 '
                    f'but {rows1.shape[1]} in class 1'
                )

            if strategy in NEIGHBOR_STRATEGIES and k + 1 > len(rows0) + len(rows1):
                raise InvalidParameter(
                    'k', k,
                    f'split "{name}" has {len(rows0) + len(rows1)} rows, '
                    f'need at least k + 1 = {k + 1} for the neighbour search'
                )

    def _balance_split(
        self,
        name: str,
        rows0: np.ndarray,
        rows1: np.ndarray,
        strategy: str,
        k: int,
        rng: np.random.Generator,
    ) -> tuple[np.ndarray, np.ndarray]:
        'Balance the two class blocks of one split, returned as (class 0, class 1).'
        if len(rows0) == len(rows1):
            self.logger.warning(f'Split "{name}" is already balanced, leaving it as is')
            return rows0, rows1

        minority_label = 1 if len(rows1) < len(rows0) else 0
        if minority_label == 1:
            minority, majority = rows1, rows0
        else:
            minority, majority = rows0, rows1
            self.logger.warning(
                f'Class 0 is the smaller class in split "{name}", balancing it as minority'
            )

        self.logger.info(
            f'{name.upper()}: minority class {minority_label} has {len(minority):,} rows, '
            f'majority has {len(majority):,}'
        )

        method = self._strategies[strategy]
        minority, majority = method(
            rows0, rows1, minority, majority, minority_label, k, rng
        )

        if minority_label == 1:
            return majority, minority
        return minority, majority

    def _oversample(self, rows0, rows1, minority, majority, minority_label, k, rng):
        'Repeat the minority block cyclically until it matches the majority.'
        # Full copies first, then the head of the block for the remainder
        idx = np.arange(len(majority)) % len(minority)
        return minority[idx], majority

    def _undersample(self, rows0, rows1, minority, majority, minority_label, k, rng):
        'Keep a random subset of majority rows the size of the minority.'
        keep = rng.permutation(len(majority))[:len(minority)]
        return minority, majority[keep]

    def _smote(self, rows0, rows1, minority, majority, minority_label, k, rng):
        'Add synthetic minority rows until the minority matches the majority.'
        partition_rows, partition_labels = self._merge(rows0, rows1)
        sampler = SyntheticSampler(
            k_neighbors=k,
            majority_scale=self.config.majority_scale,
            minority_label=minority_label,
            n_jobs=self.config.neighbor_n_jobs,
            random_state=rng,
        )
        grown = sampler.grow(
            partition_rows, partition_labels, minority, target=len(majority)
        )
        return grown, majority

    @staticmethod
    def _merge(rows0: np.ndarray, rows1: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        'Stack class 0 rows above class 1 rows and build the matching labels.'
        features = np.concatenate([rows0, rows1], axis=0)
        label_vector = np.concatenate([
            np.zeros(len(rows0), dtype=int),
            np.ones(len(rows1), dtype=int),
        ])
        return features, label_vector

    def _log_counts(self, result: BalancedResult) -> None:
        'Log class counts of every output split.'
        for name, counts in result.counts().items():
            self.logger.info(
                f'{name.upper()}: {counts[0] + counts[1]:,} rows '
                f'(class 0: {counts[0]:,}, class 1: {counts[1]:,})'
            )

    def get_params(self) -> dict:
        'Get balancer parameters for serialization.'
        return {
            'strategy': self.strategy_ or self.config.strategy,
            'k_neighbors': self.k_ if self.k_ is not None else self.config.k_neighbors,
            'train_ratio': self.config.train_ratio,
            'valid_ratio': self.config.valid_ratio,
            'random_seed': self.config.random_seed,
            'majority_scale': self.config.majority_scale,
        }
