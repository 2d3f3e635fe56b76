"Stratified train/validation/test splitter for binary datasets."

from dataclasses import dataclass
from typing import Optional

import numpy as np

from rebalance.config import BalancerConfig
from rebalance.utils import ShapeMismatch, ensure_rng, get_logger, validate_features_labels

SPLIT_NAMES = ("train", "valid", "test")


@dataclass
class ClassSplit:
    "Training, validation and test rows of a single class."

    label: int
    train: np.ndarray
    valid: np.ndarray
    test: np.ndarray

    # Permutation applied to the class rows before splitting
    permutation: np.ndarray

    def get_split(self, name: str) -> np.ndarray:
        "Get split by name."
        return getattr(self, name)

    @property
    def n_rows(self) -> int:
        return len(self.train) + len(self.valid) + len(self.test)

    def __repr__(self) -> str:
        return (
            f"ClassSplit(label={self.label}, train={len(self.train)}, "
            f"valid={len(self.valid)}, test={len(self.test)})"
        )


@dataclass
class SplitResult:
    "Container for the per-class splits of a dataset."

    class0: ClassSplit
    class1: ClassSplit

    def get_class(self, label: int) -> ClassSplit:
        "Get the split of one class by label."
        return self.class1 if label == 1 else self.class0

    def get_split(self, name: str) -> tuple[np.ndarray, np.ndarray]:
        "Get the (class 0, class 1) rows of a split by name."
        return self.class0.get_split(name), self.class1.get_split(name)

    def __repr__(self) -> str:
        return f"SplitResult(class0={self.class0!r}, class1={self.class1!r})"


class StratifiedSplitter:
    "Per-class splitter keeping class proportions in every split."

    def __init__(self, config: Optional[BalancerConfig] = None):
        self.config = config or BalancerConfig()
        self.logger = get_logger("data.splitter")

    def split(
        self,
        class_rows: np.ndarray,
        train_ratio: Optional[float] = None,
        valid_ratio: Optional[float] = None,
    ) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Split the (already shuffled) rows of one class into train/valid/test.

        Sizes are truncated, not rounded: train gets int(train_ratio * n),
        valid gets int(valid_ratio * n) and test takes whatever is left, so
        the three always add up to n. Small classes may produce empty
        partitions; those keep the column count of the input.
        """
        if train_ratio is None:
            train_ratio = self.config.train_ratio
        if valid_ratio is None:
            valid_ratio = self.config.valid_ratio

        class_rows = np.asarray(class_rows)
        if class_rows.ndim != 2:
            raise ShapeMismatch(
                f"Class rows must be a 2-D array, got {class_rows.ndim} dimension(s)"
            )

        n_rows = len(class_rows)
        n_train = int(train_ratio * n_rows)
        n_valid = int(valid_ratio * n_rows)
        start_test = n_train + n_valid

        train = class_rows[:n_train]
        valid = class_rows[n_train:start_test]
        test = class_rows[start_test:]

        return train, valid, test

    def split_by_class(
        self,
        data,
        labels,
        random_state=None,
    ) -> SplitResult:
        """
        Shuffle each class with its own permutation and split it.

        Algorithm:
        1. Separate rows by label (0 and 1)
        2. Draw a random permutation per class, class 0 first
        3. Split each shuffled class with split()

        The classes are not combined or balanced here.
        """
        features, label_vector = validate_features_labels(data, labels)
        rng = ensure_rng(random_state if random_state is not None else self.config.random_seed)

        self.logger.info(f"Splitting {len(features):,} rows by class...")

        splits = {}
        for label in (0, 1):
            class_rows = features[label_vector == label]
            permutation = rng.permutation(len(class_rows))
            train, valid, test = self.split(class_rows[permutation])
            splits[label] = ClassSplit(
                label=label,
                train=train,
                valid=valid,
                test=test,
                permutation=permutation,
            )

        result = SplitResult(class0=splits[0], class1=splits[1])
        self._log_split_info(result)
        self._validate_sizes(result)

        return result

    def _log_split_info(self, result: SplitResult) -> None:
        "Log information about the splits."
        for label in (0, 1):
            class_split = result.get_class(label)
            n_rows = class_split.n_rows
            if n_rows < 4:
                self.logger.warning(
                    f"Class {label} has only {n_rows} rows, some splits will be empty"
                )
            self.logger.info(
                f"CLASS {label}: train={len(class_split.train):,}, "
                f"valid={len(class_split.valid):,}, test={len(class_split.test):,}"
            )

    def _validate_sizes(self, result: SplitResult) -> None:
        "Validate that every class split covers the class exactly."
        for label in (0, 1):
            class_split = result.get_class(label)
            if class_split.n_rows != len(class_split.permutation):
                raise ShapeMismatch(
                    f"Class {label} split sizes sum to {class_split.n_rows}, "
                    f"expected {len(class_split.permutation)}"
                )
