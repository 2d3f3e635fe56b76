'SMOTE-style synthetic minority sampler with neighbour-dependent interpolation.'

from typing import Optional

import numpy as np

from rebalance.config import validate_k
from rebalance.sampling.neighbors import NeighborIndex
from rebalance.utils import (
    DegenerateSplit,
    InvalidParameter,
    ShapeMismatch,
    ensure_rng,
    get_logger,
)


def fill_round(
    buffer: np.ndarray, filled: int, rows: np.ndarray
) -> tuple[int, bool]:
    '''
    Copy one round of rows into a pre-sized buffer.

    Rows that do not fit are dropped, so earlier rounds are kept in full.
    Returns the new fill index and whether the buffer is full.
    '''
    target = len(buffer)
    n_take = min(len(rows), target - filled)
    buffer[filled:filled + n_take] = rows[:n_take]
    filled += n_take
    return filled, filled >= target


class SyntheticSampler:
    '''
    Generate synthetic minority rows by interpolating toward nearest neighbours.

    Each minority row is paired with its k nearest neighbours in the whole
    partition (both classes). A synthetic row is placed on the segment from
    the minority row toward the neighbour:

        synthetic = row + alpha * (neighbour - row)

    alpha is uniform in [0, 1) when the neighbour is a minority row and in
    [0, majority_scale) when it belongs to the majority class, which keeps
    synthetic rows near the minority side of the class boundary.
    '''

    def __init__(
        self,
        k_neighbors: int = 5,
        majority_scale: float = 0.5,
        minority_label: int = 1,
        n_jobs: Optional[int] = 1,
        random_state=None,
    ):
        self.k_neighbors = validate_k(k_neighbors)
        self.majority_scale = majority_scale
        self.minority_label = minority_label
        self.n_jobs = n_jobs
        self.rng = ensure_rng(random_state)
        self.logger = get_logger('sampling.synthetic')

    def synthesize(
        self,
        partition_rows: np.ndarray,
        partition_labels: np.ndarray,
        minority_rows: np.ndarray,
        k: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> np.ndarray:
        '''
        Run one synthesis round.

        Returns exactly k * len(minority_rows) new rows. Row i * k + r is
        built from minority row i and its (r + 1)-th nearest neighbour; the
        nearest one is the row itself and is skipped.
        '''
        k = self.k_neighbors if k is None else validate_k(k)
        rng = self.rng if rng is None else rng

        partition_rows = np.asarray(partition_rows, dtype=float)
        partition_labels = np.asarray(partition_labels)
        minority_rows = np.asarray(minority_rows, dtype=float)

        if len(partition_rows) != len(partition_labels):
            raise ShapeMismatch(
                f'Partition has {len(partition_rows)} rows but '
                f'{len(partition_labels)} labels'
            )
        if len(minority_rows) == 0:
            raise DegenerateSplit(
                'synthesis', self.minority_label, 'no minority rows to interpolate from'
            )
        if k + 1 > len(partition_rows):
            raise InvalidParameter(
                'k', k,
                f'need k + 1 = {k + 1} neighbours but the partition has '
                f'{len(partition_rows)} rows'
            )

        index = NeighborIndex(partition_rows, n_jobs=self.n_jobs)
        neighbor_idx = index.kneighbors(minority_rows, k + 1)[:, 1:]

        # Scale of alpha per (row, neighbour) pair
        is_minority = partition_labels[neighbor_idx] == self.minority_label
        scale = np.where(is_minority, 1.0, self.majority_scale)
        alpha = rng.random(neighbor_idx.shape) * scale

        seeds = minority_rows[:, np.newaxis, :]
        neighbors = partition_rows[neighbor_idx]
        synthetic = seeds + alpha[..., np.newaxis] * (neighbors - seeds)

        return synthetic.reshape(-1, minority_rows.shape[1])

    def grow(
        self,
        partition_rows: np.ndarray,
        partition_labels: np.ndarray,
        minority_rows: np.ndarray,
        target: int,
        k: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> np.ndarray:
        '''
        Extend the minority rows with synthetic rows up to target rows.

        The originals come first, then rounds in the order they were
        produced. Every round searches neighbours in the original partition,
        never among rows synthesized in earlier rounds.
        '''
        minority_rows = np.asarray(minority_rows, dtype=float)
        if len(minority_rows) == 0:
            raise DegenerateSplit(
                'synthesis', self.minority_label, 'no minority rows to interpolate from'
            )

        buffer = np.empty((max(target, len(minority_rows)), minority_rows.shape[1]))
        filled, reached = fill_round(buffer, 0, minority_rows)

        n_rounds = 0
        while not reached:
            new_rows = self.synthesize(
                partition_rows, partition_labels, minority_rows, k=k, rng=rng
            )
            filled, reached = fill_round(buffer, filled, new_rows)
            n_rounds += 1

        self.logger.info(
            f'Synthesized {filled - len(minority_rows):,} rows in {n_rounds} round(s), '
            f'minority now has {filled:,} rows'
        )
        return buffer[:filled]
