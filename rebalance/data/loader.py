"Data loader for headerless CSV (and parquet) datasets with a trailing label column."

from pathlib import Path
from typing import Union

import numpy as np
import pandas as pd
import pyarrow.parquet as pq

from rebalance.utils import ShapeMismatch, class_counts, get_logger, validate_features_labels


class DataLoader:
    "Load a binary dataset: numeric features followed by one 0/1 label column."

    def __init__(self, delimiter: str = ",", verbose: bool = True):
        self.delimiter = delimiter
        self.verbose = verbose
        self.logger = get_logger("data.loader")

    def load(self, path: Union[str, Path]) -> tuple[np.ndarray, np.ndarray]:
        "Load a dataset file into (features, labels)."
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Path does not exist: {path}")

        if self.verbose:
            self.logger.info(f"Loading dataset from: {path}")

        if path.suffix == ".parquet" or path.is_dir():
            df = self._load_parquet(path)
        else:
            df = self._load_csv(path)

        features, labels = self.split_frame(df)

        if self.verbose:
            counts = class_counts(labels)
            self.logger.info(
                f"Loaded {len(features):,} rows and {features.shape[1]} features "
                f"(class 0: {counts[0]:,}, class 1: {counts[1]:,})"
            )

        return features, labels

    def _load_csv(self, path: Path) -> pd.DataFrame:
        "Load a headerless delimited text file."
        return pd.read_csv(path, header=None, sep=self.delimiter)

    def _load_parquet(self, path: Path) -> pd.DataFrame:
        "Load a parquet file or partitioned directory; column order is kept."
        table = pq.ParquetDataset(path).read() if path.is_dir() else pq.read_table(path)
        return table.to_pandas()

    def split_frame(self, df: pd.DataFrame) -> tuple[np.ndarray, np.ndarray]:
        "Separate the trailing label column from the feature columns."
        if df.shape[1] < 2:
            raise ShapeMismatch(
                f"Expected at least one feature column and a label column, "
                f"got {df.shape[1]} column(s)"
            )

        non_numeric = [
            col for col in df.columns if not pd.api.types.is_numeric_dtype(df[col])
        ]
        if non_numeric:
            raise ShapeMismatch(f"Non-numeric columns in dataset: {non_numeric}")

        return validate_features_labels(df.iloc[:, :-1].values, df.iloc[:, -1].values)

    def get_row_count(self, path: Union[str, Path]) -> int:
        "Get total row count."
        path = Path(path)

        if path.is_dir():
            dataset = pq.ParquetDataset(path)
            return sum(pq.read_metadata(f).num_rows for f in dataset.files)
        if path.suffix == ".parquet":
            return pq.read_metadata(path).num_rows

        with open(path) as handle:
            return sum(1 for line in handle if line.strip())
