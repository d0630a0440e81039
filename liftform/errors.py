"""Exception types raised by the analysis pipeline."""

from typing import Iterable, List


class LiftformError(Exception):
    """Base class for all pipeline errors."""


class DataError(LiftformError, ValueError):
    """Input data is unusable (empty, unlabeled, malformed)."""


class SchemaError(DataError):
    """One or more expected columns are absent from a data frame."""

    def __init__(self, missing: Iterable[str], where: str = 'data'):
        self.missing: List[str] = list(missing)
        self.where = where
        super().__init__(f"Missing required columns in {where}: {self.missing}")


class ConfigurationError(LiftformError, ValueError):
    """Pipeline settings cannot produce a valid model."""
