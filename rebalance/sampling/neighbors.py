'Nearest neighbour search over a reference point set.'

from typing import Optional

import numpy as np
from sklearn.neighbors import NearestNeighbors

from rebalance.utils import InvalidParameter, ShapeMismatch


class NeighborIndex:
    '''
    Euclidean k-nearest-neighbour index over a fixed set of reference rows.

    Results are ordered by increasing distance. A query row that is also a
    reference row finds itself first, at distance zero.
    '''

    def __init__(self, reference: np.ndarray, n_jobs: Optional[int] = 1):
        reference = np.asarray(reference, dtype=float)
        if reference.ndim != 2:
            raise ShapeMismatch(
                f'Reference points must be a 2-D array, got {reference.ndim} dimension(s)'
            )
        if len(reference) == 0:
            raise InvalidParameter('reference', 0, 'cannot index an empty point set')

        self.reference = reference
        self.n_jobs = n_jobs
        self._nn = NearestNeighbors(metric='euclidean', n_jobs=n_jobs)
        self._nn.fit(reference)

    @property
    def n_points(self) -> int:
        return len(self.reference)

    def query(self, points: np.ndarray, k: int) -> tuple[np.ndarray, np.ndarray]:
        'Return (distances, indices) of the k nearest reference rows per point.'
        points = np.asarray(points, dtype=float)
        if points.ndim != 2 or points.shape[1] != self.reference.shape[1]:
            raise ShapeMismatch(
                f'Query points must have shape (n, {self.reference.shape[1]}), '
                f'got {points.shape}'
            )
        if k <= 0:
            raise InvalidParameter('k', k, 'must be positive')
        if k > self.n_points:
            raise InvalidParameter(
                'k', k, f'only {self.n_points} reference points are indexed'
            )

        if len(points) == 0:
            return np.empty((0, k)), np.empty((0, k), dtype=int)

        distances, indices = self._nn.kneighbors(points, n_neighbors=k)
        return distances, indices

    def kneighbors(self, points: np.ndarray, k: int) -> np.ndarray:
        'Return only the indices of the k nearest reference rows per point.'
        return self.query(points, k)[1]
