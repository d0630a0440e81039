"""
Stratified Partitioner
======================

Splits labeled rows into a training and a held-out testing subset so that
every outcome class is represented in both at (approximately) the same
proportion.

"""

import numpy as np
import pandas as pd
from dataclasses import dataclass
from typing import Dict, Tuple, Union
from loguru import logger

from ..errors import ConfigurationError, DataError


@dataclass(frozen=True)
class Partition:
    """Positional row indices of the two subsets."""
    train_index: np.ndarray
    test_index: np.ndarray
    p: float
    seed: int

    @property
    def n_rows(self) -> int:
        return len(self.train_index) + len(self.test_index)

    def apply(self, frame: pd.DataFrame) -> Tuple[pd.DataFrame, pd.DataFrame]:
        """Return (training, testing) row subsets of ``frame``."""
        if len(frame) != self.n_rows:
            raise DataError(f"Partition covers {self.n_rows} rows, frame has {len(frame)}")
        return frame.iloc[self.train_index], frame.iloc[self.test_index]


class StratifiedPartitioner:
    """
    Per-class random sampling with a fixed seed.

    For each class (visited in sorted label order) the class's row positions
    are shuffled and the first ``round_half_up(n_class * p)`` go to training.
    """

    def __init__(self, p: float = 0.7, seed: int = 42):
        if not 0.0 < p < 1.0:
            raise ConfigurationError(f"Training proportion must be in (0, 1), got {p}")
        self.p = p
        self.seed = seed

    def split(self, y: Union[pd.Series, np.ndarray]) -> Partition:
        """
        Partition rows by outcome label.

        Args:
            y: Outcome labels, one per row, in input order

        Returns:
            Partition with sorted, disjoint, covering index arrays
        """
        labels = pd.Series(np.asarray(y, dtype=object))
        if labels.isna().any():
            raise DataError(f"Outcome has {int(labels.isna().sum())} missing labels")
        if labels.empty:
            raise DataError("Cannot partition an empty label vector")

        rng = np.random.RandomState(self.seed)
        positions = np.arange(len(labels))

        train_parts = []
        for label in sorted(labels.unique(), key=str):
            members = positions[(labels == label).to_numpy()]
            n_take = self._n_train(len(members))
            shuffled = rng.permutation(members)
            train_parts.append(shuffled[:n_take])

        train_index = np.sort(np.concatenate(train_parts))
        test_index = np.setdiff1d(positions, train_index)

        partition = Partition(train_index=train_index, test_index=test_index, p=self.p, seed=self.seed)
        self._log_partition(labels, partition)
        return partition

    def _n_train(self, n_class: int) -> int:
        return int(np.floor(n_class * self.p + 0.5))

    @staticmethod
    def class_fractions(y: Union[pd.Series, np.ndarray], partition: Partition) -> Dict[str, float]:
        """Fraction of each class's rows that landed in the training subset."""
        labels = pd.Series(np.asarray(y, dtype=object))
        in_train = labels.iloc[partition.train_index].value_counts()
        totals = labels.value_counts()
        return {str(k): float(in_train.get(k, 0) / n) for k, n in totals.items()}

    def _log_partition(self, labels: pd.Series, partition: Partition) -> None:
        n = partition.n_rows
        logger.info(f"Data partition (p={self.p}, seed={self.seed}):")
        logger.info(f"  Train: {len(partition.train_index)} samples ({len(partition.train_index)/n*100:.1f}%)")
        logger.info(f"  Test: {len(partition.test_index)} samples ({len(partition.test_index)/n*100:.1f}%)")

        for split_name, index in [('Train', partition.train_index), ('Test', partition.test_index)]:
            unique, counts = np.unique(labels.iloc[index].astype(str), return_counts=True)
            logger.info(f"  {split_name} classes: {dict(zip(unique, counts))}")
