"""
Column Filter
=============

Selects predictor columns from the training partition.

A column is dropped when it is the outcome, when its name marks it as
non-predictive bookkeeping (row index, subject, timestamps, windows), or
when at least ``missing_threshold`` of its values are missing.

"""

import re
import pandas as pd
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Any
from loguru import logger


DEFAULT_EXCLUDE_PATTERNS = (
    r'^X$',
    r'^Unnamed: 0$',
    r'^$',
    r'user_name',
    r'timestamp',
    r'window',
)


@dataclass(frozen=True)
class ColumnDescriptor:
    """Missing-value summary of one column."""
    name: str
    missing_count: int
    missing_fraction: float


@dataclass
class ColumnSelectionResult:
    """Container for column filter results."""
    predictors: List[str]
    descriptors: List[ColumnDescriptor]
    excluded_by_name: List[str] = field(default_factory=list)
    excluded_by_missing: List[str] = field(default_factory=list)
    n_columns_before: int = 0

    @property
    def n_columns_after(self) -> int:
        return len(self.predictors)


class ColumnFilter:
    """Drops the outcome, non-predictive columns and mostly-missing columns."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Args:
            config: Dictionary with optional 'missing_threshold' (default 0.95)
                    and 'exclude_patterns' (regular expressions)
        """
        config = config or {}
        self.missing_threshold = float(config.get('missing_threshold', 0.95))
        patterns = config.get('exclude_patterns') or DEFAULT_EXCLUDE_PATTERNS
        self.exclude_patterns = [re.compile(p) for p in patterns]

    def is_non_predictive(self, name: str) -> bool:
        return any(p.search(str(name)) for p in self.exclude_patterns)

    def describe(self, frame: pd.DataFrame, columns: Optional[Sequence[str]] = None) -> List[ColumnDescriptor]:
        """
        Missing-value descriptors ordered by (missing count, column name).
        """
        columns = list(frame.columns) if columns is None else list(columns)
        n_rows = len(frame)
        counts = frame[columns].isna().sum()

        descriptors = [
            ColumnDescriptor(
                name=str(c),
                missing_count=int(counts[c]),
                missing_fraction=float(counts[c] / n_rows) if n_rows else 1.0,
            )
            for c in columns
        ]
        return sorted(descriptors, key=lambda d: (d.missing_count, d.name))

    def select(self, frame: pd.DataFrame, outcome: str) -> ColumnSelectionResult:
        """
        Select predictor columns.

        Args:
            frame: Training partition
            outcome: Name of the outcome column

        Returns:
            ColumnSelectionResult with the ordered predictor names
        """
        # Outcome goes first, by name, so its own missing values never matter
        candidates = [c for c in frame.columns if c != outcome]

        excluded_by_name = [c for c in candidates if self.is_non_predictive(c)]
        candidates = [c for c in candidates if c not in excluded_by_name]

        descriptors = self.describe(frame, candidates)
        limit = self.missing_threshold * len(frame)

        predictors = [d.name for d in descriptors if d.missing_count < limit]
        excluded_by_missing = [d.name for d in descriptors if d.missing_count >= limit]

        result = ColumnSelectionResult(
            predictors=predictors,
            descriptors=descriptors,
            excluded_by_name=[str(c) for c in excluded_by_name],
            excluded_by_missing=excluded_by_missing,
            n_columns_before=frame.shape[1],
        )

        logger.info(f"Column filter: {result.n_columns_before} → {result.n_columns_after} columns")
        logger.info(f"  Non-predictive: {len(excluded_by_name)}, "
                    f">= {self.missing_threshold:.0%} missing: {len(excluded_by_missing)}")
        return result
