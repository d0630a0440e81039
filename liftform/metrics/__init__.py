"""Evaluation metrics."""

from .metrics_wrapper import MetricsWrapper, misclassification_rate
from .evaluator import Evaluator, EvaluationResult

__all__ = ['MetricsWrapper', 'misclassification_rate', 'Evaluator', 'EvaluationResult']
