import numpy as np
from typing import Union, List, Dict, Optional
from sklearn.metrics import (
    accuracy_score, precision_score, recall_score, f1_score,
    balanced_accuracy_score, cohen_kappa_score
)


def misclassification_rate(y_true, y_pred) -> float:
    y_true = np.asarray(y_true, dtype=object)
    y_pred = np.asarray(y_pred, dtype=object)
    return float(np.mean(y_true != y_pred))


class MetricsWrapper:
    """
    A metrics wrapper for multi-class label predictions.

    Provides unified interface for computing classification metrics on
    predicted labels.
    """

    METRICS = {
        'accuracy': accuracy_score,
        'error_rate': misclassification_rate,
        'kappa': cohen_kappa_score,
        'balanced_accuracy': balanced_accuracy_score,
        'f1_macro': lambda y_t, y_p: f1_score(y_t, y_p, average='macro', zero_division=0),
        'precision_macro': lambda y_t, y_p: precision_score(y_t, y_p, average='macro', zero_division=0),
        'recall_macro': lambda y_t, y_p: recall_score(y_t, y_p, average='macro', zero_division=0),
    }

    @staticmethod
    def get_eval_metrics(metrics_names: Optional[Union[str, List[str]]] = None,
                         y_true=None, y_pred=None) -> Union[Dict[str, float], float, None]:
        """
        Compute scores.

        Args:
            metrics_names: Metric name(s) to compute. If None, computes all metrics.
            y_true: True labels. If None, returns None.
            y_pred: Predicted labels. Required if y_true provided.

        Returns:
            Dict of computed scores, or a single float for a single metric name.

        Examples:
            >>> scores = MetricsWrapper.get_eval_metrics(y_true=y_true, y_pred=y_pred)
            >>> kappa = MetricsWrapper.get_eval_metrics('kappa', y_true, y_pred)
        """
        if y_true is None:
            return None

        is_single_metric = isinstance(metrics_names, str)

        if metrics_names is None:
            selected = MetricsWrapper.METRICS
        else:
            names = [metrics_names] if is_single_metric else metrics_names
            selected = {}
            for name in names:
                if name not in MetricsWrapper.METRICS:
                    raise ValueError(f"Metric '{name}' not found. Available metrics: {list(MetricsWrapper.METRICS.keys())}")
                selected[name] = MetricsWrapper.METRICS[name]

        # Labels are compared as strings so mixed numeric/text codes line up
        y_t = np.asarray(y_true).astype(str)
        y_p = np.asarray(y_pred).astype(str)

        results = {name: float(func(y_t, y_p)) for name, func in selected.items()}

        if is_single_metric:
            return list(results.values())[0]

        return results
