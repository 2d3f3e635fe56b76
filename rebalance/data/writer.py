'Writing and reading the balanced training/validation/test files.'

import json
from pathlib import Path
from typing import Any, Optional, Union

import numpy as np
import pandas as pd

from rebalance.data.balancer import BalancedResult
from rebalance.utils import get_logger

# Output file tag -> BalancedResult split name
OUTPUT_SPLITS = {
    'training': 'train',
    'validation': 'valid',
    'test': 'test',
}


class DatasetWriter:
    '''
    Save balanced splits as headerless delimited files.

    Files, for an input stem and strategy:
    - <stem>-training-<strategy>.csv: balanced training set
    - <stem>-validation-<strategy>.csv: balanced validation set
    - <stem>-test-<strategy>.csv: test set with its native class ratio
    - <stem>-summary-<strategy>.json: row counts and balancing parameters

    Every row is the feature values followed by the label.
    '''

    def __init__(
        self,
        output_dir: Union[str, Path] = '.',
        stem: str = 'dataset',
        delimiter: str = ','
    ):
        self.output_dir = Path(output_dir)
        self.stem = stem
        self.delimiter = delimiter
        self.logger = get_logger('data.writer')

    def get_path(self, tag: str, strategy: str, suffix: str = '.csv') -> Path:
        'Path of one output file.'
        return self.output_dir / f'{self.stem}-{tag}-{strategy}{suffix}'

    def save_all(
        self,
        result: BalancedResult,
        params: Optional[dict] = None
    ) -> dict[str, Path]:
        'Save the three splits and the summary, returning the written paths.'
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.logger.info(f'Saving balanced splits to {self.output_dir}')

        paths = {}
        for tag, split_name in OUTPUT_SPLITS.items():
            features, labels = result.get_split(split_name)
            path = self.get_path(tag, result.strategy)
            self._save_csv(features, labels, path)
            paths[tag] = path

        summary = {
            'strategy': result.strategy,
            'counts': {
                tag: {str(label): n for label, n in result.counts()[split_name].items()}
                for tag, split_name in OUTPUT_SPLITS.items()
            },
            'params': params or {},
        }
        summary_path = self.get_path('summary', result.strategy, suffix='.json')
        self._save_json(summary, summary_path)
        paths['summary'] = summary_path

        self.logger.info('All splits saved successfully')
        return paths

    def load_all(self, strategy: str) -> dict[str, tuple[np.ndarray, np.ndarray]]:
        'Load the three splits back as (features, labels) pairs.'
        if not self.output_dir.exists():
            raise FileNotFoundError(
                f'Output directory not found: {self.output_dir}'
            )

        splits = {}
        for tag in OUTPUT_SPLITS:
            path = self.get_path(tag, strategy)
            if not path.exists():
                raise FileNotFoundError(f'Split file not found: {path}')
            df = pd.read_csv(path, header=None, sep=self.delimiter)
            splits[tag] = (df.iloc[:, :-1].values, df.iloc[:, -1].values.astype(int))
            self.logger.info(f'Loaded {tag} split from {path}: {len(df):,} rows')

        return splits

    def load_summary(self, strategy: str) -> dict[str, Any]:
        'Load the JSON summary written by save_all.'
        path = self.get_path('summary', strategy, suffix='.json')
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def _save_csv(self, features: np.ndarray, labels: np.ndarray, path: Path) -> None:
        'Write features with the label appended as the last column.'
        df = pd.DataFrame(features)
        df[df.shape[1]] = np.asarray(labels, dtype=int)
        df.to_csv(path, header=False, index=False, sep=self.delimiter)
        self.logger.info(f'Saved {len(df):,} rows to {path}')

    def _save_json(self, data: dict, path: Path) -> None:
        'Save data as JSON.'
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        self.logger.info(f'Saved {path.name}')
