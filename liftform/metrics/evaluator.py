"""Held-out evaluation of a fitted model on the testing partition."""

import numpy as np
import pandas as pd
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from sklearn.metrics import confusion_matrix
from loguru import logger

from .metrics_wrapper import MetricsWrapper
from ..errors import DataError


@dataclass
class EvaluationResult:
    """Predictions and scores on the testing partition."""
    predictions: pd.Series
    actual: pd.Series
    error_rate: float
    accuracy: float
    kappa: float
    labels: List[str]
    confusion_matrix: np.ndarray
    scores: Dict[str, float] = field(default_factory=dict)

    @property
    def n_rows(self) -> int:
        return len(self.predictions)

    def confusion_frame(self) -> pd.DataFrame:
        """Confusion matrix with actual labels as rows, predicted as columns."""
        frame = pd.DataFrame(self.confusion_matrix, index=self.labels, columns=self.labels)
        frame.index.name = 'actual'
        frame.columns.name = 'predicted'
        return frame


class Evaluator:
    """Scores a fitted model against the labels of a held-out frame."""

    def __init__(self, outcome: str, metrics: Optional[List[str]] = None):
        self.outcome = outcome
        self.metrics = metrics or ['accuracy', 'error_rate', 'kappa', 'balanced_accuracy', 'f1_macro']

    def evaluate(self, model, frame: pd.DataFrame) -> EvaluationResult:
        """
        Predict every row of ``frame`` and compare with its outcome.

        Args:
            model: Fitted model exposing ``predict(frame)``
            frame: Testing partition, outcome column included

        Returns:
            EvaluationResult
        """
        if frame.empty:
            raise DataError("Testing partition is empty")
        if self.outcome not in frame.columns:
            raise DataError(f"Testing partition has no '{self.outcome}' column")

        actual = frame[self.outcome].astype(str)
        predictions = pd.Series(model.predict(frame), index=frame.index, name='prediction').astype(str)

        scores = MetricsWrapper.get_eval_metrics(self.metrics, y_true=actual, y_pred=predictions)
        error_rate = MetricsWrapper.get_eval_metrics('error_rate', y_true=actual, y_pred=predictions)
        accuracy = 1.0 - error_rate
        kappa = MetricsWrapper.get_eval_metrics('kappa', y_true=actual, y_pred=predictions)

        labels = sorted(set(actual) | set(predictions))
        cm = confusion_matrix(actual, predictions, labels=labels)

        logger.info(f"Held-out evaluation on {len(frame)} samples: "
                    f"accuracy {accuracy:.4f}, error rate {error_rate:.4f}, kappa {kappa:.4f}")

        return EvaluationResult(
            predictions=predictions,
            actual=actual,
            error_rate=error_rate,
            accuracy=accuracy,
            kappa=kappa,
            labels=labels,
            confusion_matrix=cm,
            scores=scores,
        )
