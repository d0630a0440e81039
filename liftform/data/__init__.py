"""Data handling module."""

from .loader import DataLoader, DEFAULT_NA_VALUES
from .partitioner import StratifiedPartitioner, Partition
from .column_filter import ColumnFilter, ColumnDescriptor, ColumnSelectionResult
from .formula import Formula, build_formula

__all__ = [
    "DataLoader",
    "DEFAULT_NA_VALUES",
    "StratifiedPartitioner",
    "Partition",
    "ColumnFilter",
    "ColumnDescriptor",
    "ColumnSelectionResult",
    "Formula",
    "build_formula"
]
