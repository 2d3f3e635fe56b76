'Pytest fixtures for testing.'

import numpy as np
import pytest

from rebalance.config import BalancerConfig


@pytest.fixture
def random_seed():
    'Fixed random seed for reproducibility.'
    return 42


@pytest.fixture
def sample_config(random_seed):
    'Sample balancer configuration.'
    return BalancerConfig(
        strategy='oversample',
        k_neighbors=5,
        train_ratio=0.5,
        valid_ratio=0.25,
        random_seed=random_seed,
    )


@pytest.fixture
def imbalanced_data(random_seed):
    '''
    Generate an imbalanced dataset: 200 class 0 rows, 24 class 1 rows.

    Column 0 is a tag holding the original row index, so tests can trace
    rows through shuffling. The remaining columns are features.
    '''
    rng = np.random.default_rng(random_seed)
    n0, n1 = 200, 24

    features0 = rng.normal(0.0, 1.0, size=(n0, 3))
    features1 = rng.normal(3.0, 1.0, size=(n1, 3))

    labels = np.array([0] * n0 + [1] * n1)
    order = rng.permutation(n0 + n1)
    features = np.vstack([features0, features1])[order]
    labels = labels[order]

    tags = np.arange(n0 + n1, dtype=float).reshape(-1, 1)
    return np.hstack([tags, features]), labels


@pytest.fixture
def scenario_data(random_seed):
    '''
    Small dataset: 8 class 0 rows and 4 class 1 rows.

    Gives 4/2/2 and 2/1/1 rows per class in train/valid/test.
    '''
    rng = np.random.default_rng(random_seed)
    features = np.vstack([
        rng.uniform(0.0, 1.0, size=(8, 2)),
        rng.uniform(2.0, 3.0, size=(4, 2)),
    ])
    labels = np.array([0] * 8 + [1] * 4)
    return features, labels


@pytest.fixture
def dataset_csv(tmp_path, imbalanced_data):
    'Imbalanced dataset written as a headerless CSV file.'
    features, labels = imbalanced_data
    path = tmp_path / 'mammography.csv'
    rows = [
        ','.join([repr(float(v)) for v in row] + [str(int(label))])
        for row, label in zip(features, labels)
    ]
    path.write_text('\n'.join(rows) + '\n')
    return path
