'Utility functions and exceptions for the balancing pipeline.'

import logging
from typing import Optional, Union

import numpy as np


class BalancingError(Exception):
    'Base class for input validation failures in the balancing pipeline.'


class UnknownStrategy(BalancingError, ValueError):
    '''
    Raised when a balancing method is requested that is not implemented.

    Carries the requested name and the names that are available so the
    caller can report them.
    '''

    def __init__(self, strategy: str, available: list[str]):
        self.strategy = strategy
        self.available = list(available)
        super().__init__(
            f"Unknown strategy '{strategy}'. Available strategies: {self.available}"
        )


class InvalidParameter(BalancingError, ValueError):
    'Raised when a parameter value makes the requested operation impossible.'

    def __init__(self, name: str, value: object, reason: str):
        self.name = name
        self.value = value
        super().__init__(f'Invalid {name}={value!r}: {reason}')


class DegenerateSplit(BalancingError):
    '''
    Raised when a class has zero rows in a split that needs a non-zero base.

    Balancing against an empty class would divide by zero when computing a
    replication ratio, or leave nothing to interpolate from.
    '''

    def __init__(self, split: str, label: int, detail: Optional[str] = None):
        self.split = split
        self.label = label
        message = f'Split "{split}" has no rows of class {label}'
        if detail:
            message = f'{message}: {detail}'
        super().__init__(message)


class ShapeMismatch(BalancingError, ValueError):
    'Raised when feature and label arrays do not line up.'


def setup_logging(
    level: int = logging.INFO,
    format_str: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
) -> logging.Logger:
    'Set up logging configuration and return the package logger.'
    logging.basicConfig(level=level, format=format_str)
    return logging.getLogger('rebalance')


def get_logger(name: str) -> logging.Logger:
    'Get a logger with the given name.'
    return logging.getLogger(f'rebalance.{name}')


def ensure_rng(
    random_state: Union[None, int, np.random.Generator]
) -> np.random.Generator:
    'Return a numpy Generator for a seed, an existing Generator, or None.'
    if isinstance(random_state, np.random.Generator):
        return random_state
    return np.random.default_rng(random_state)


def validate_features_labels(data, labels) -> tuple[np.ndarray, np.ndarray]:
    '''
    Convert features and labels to arrays and check that they line up.

    Features must be 2-D (rows x features). Labels may be a 1-D vector or a
    single column and must contain only 0 and 1.
    '''
    features = np.asarray(data, dtype=float)
    if features.ndim != 2:
        raise ShapeMismatch(
            f'Features must be a 2-D array, got {features.ndim} dimension(s)'
        )

    label_array = np.asarray(labels)
    if label_array.ndim == 2 and label_array.shape[1] == 1:
        label_array = label_array[:, 0]
    if label_array.ndim != 1:
        raise ShapeMismatch(
            f'Labels must be a vector or a single column, got shape {label_array.shape}'
        )

    if len(features) != len(label_array):
        raise ShapeMismatch(
            f'Features have {len(features)} rows but labels have {len(label_array)}'
        )

    unknown = set(np.unique(label_array).tolist()) - {0, 1}
    if unknown:
        raise InvalidParameter(
            'labels', sorted(unknown), 'labels must be binary (0 or 1)'
        )

    return features, label_array.astype(int)


def class_counts(labels: np.ndarray) -> dict[int, int]:
    'Count rows per binary label.'
    labels = np.asarray(labels)
    return {0: int(np.sum(labels == 0)), 1: int(np.sum(labels == 1))}
