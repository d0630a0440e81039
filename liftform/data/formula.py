"""Model formula: the outcome predicted from an additive set of predictors."""

import pandas as pd
from dataclasses import dataclass
from typing import Sequence, Tuple

from ..errors import ConfigurationError, SchemaError


@dataclass(frozen=True)
class Formula:
    """``outcome ~ p1 + p2 + ...`` with no interactions or transforms."""
    outcome: str
    predictors: Tuple[str, ...]

    def __str__(self) -> str:
        return f"{self.outcome} ~ {' + '.join(self.predictors)}"

    def check_columns(self, frame: pd.DataFrame, require_outcome: bool = True, where: str = 'data') -> None:
        """Raise SchemaError if a referenced column is absent from ``frame``."""
        required = list(self.predictors) + ([self.outcome] if require_outcome else [])
        missing = [c for c in required if c not in frame.columns]
        if missing:
            raise SchemaError(missing, where=where)


def build_formula(predictors: Sequence[str], outcome: str) -> Formula:
    """
    Build the additive formula for ``outcome`` from ``predictors``.

    Args:
        predictors: Ordered predictor column names
        outcome: Outcome column name

    Returns:
        Formula

    Raises:
        ConfigurationError: If the predictor set is empty or contains the outcome
    """
    predictors = tuple(str(p) for p in predictors)
    if not predictors:
        raise ConfigurationError("Cannot build a formula from an empty predictor set")
    if outcome in predictors:
        raise ConfigurationError(f"Outcome '{outcome}' cannot also be a predictor")
    return Formula(outcome=outcome, predictors=predictors)
