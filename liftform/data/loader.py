"""Data loading utilities for the sensor recordings."""

import pandas as pd
from pathlib import Path
from typing import Tuple, Dict, Any, Optional, Sequence
from loguru import logger

from ..errors import DataError, SchemaError


DEFAULT_NA_VALUES = ('', 'NA', '#DIV/0!')


class DataLoader:
    """Handles data loading from CSV and delimited TXT files."""

    def __init__(self, na_values: Sequence[str] = DEFAULT_NA_VALUES):
        """
        Args:
            na_values: Tokens normalized to missing at load time. The list is
                       exclusive: pandas' own defaults ("null", "N/A", ...) are not added,
                       and empty cells are missing only while '' is listed.
        """
        self.na_values = list(na_values)

    def load_from_config(self, config: Dict[str, Any], project_root: Path = Path('.')) -> Tuple[pd.DataFrame, Optional[pd.DataFrame]]:
        """
        Load the labeled training table and the optional unlabeled validation table.

        Config format:
            {training_file: 'data/pml-training.csv',
             validation_file: 'data/pml-testing.csv',
             label_column: 'classe',
             na_values: ['', 'NA', '#DIV/0!']}

        Args:
            config: 'data' section of the configuration
            project_root: Root directory for relative paths

        Returns:
            training: Labeled frame
            validation: Unlabeled frame (None if not configured)
        """
        if config.get('na_values'):
            self.na_values = list(config['na_values'])

        training_file = config.get('training_file')
        if not training_file:
            raise DataError("No 'training_file' entry found in data config")

        label_column = config.get('label_column')
        training = self.load(project_root / training_file, label_column=label_column)

        validation = None
        if config.get('validation_file'):
            validation = self.load(project_root / config['validation_file'])

        return training, validation

    def load(self, file_path: Path, label_column: Optional[str] = None) -> pd.DataFrame:
        """Load one table and optionally check that its label column exists."""
        file_path = Path(file_path)
        df = self._read_data(file_path)

        if df.empty:
            raise DataError(f"No rows found in {file_path}")
        if label_column is not None and label_column not in df.columns:
            raise SchemaError([label_column], where=str(file_path))

        n_missing = int(df.isna().sum().sum())
        logger.info(f"Loaded {file_path.name}: {df.shape[0]} samples, {df.shape[1]} columns, {n_missing} missing values")
        return df

    def _read_data(self, file_path: Path) -> pd.DataFrame:
        """Read data from file."""
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        if file_path.suffix == '.csv':
            return pd.read_csv(file_path, na_values=self.na_values, keep_default_na=False)

        # TXT - auto-detect delimiter
        with open(file_path, 'r') as f:
            first_line = f.readline().strip()

        for delimiter in [',', '\t', '|', ';', ' ']:
            if delimiter in first_line:
                break
        else:
            delimiter = ','

        return pd.read_csv(file_path, sep=delimiter, na_values=self.na_values, keep_default_na=False)
