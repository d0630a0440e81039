"""
Model Analysis Utilities
========================

Summarizes the size and settings of a fitted forest for the report.

"""

import numpy as np
from typing import Any, Dict


class ModelAnalyzer:
    """Analyze model complexity and parameters."""

    @staticmethod
    def _unwrap(model: Any) -> Any:
        """Return the underlying sklearn estimator of a wrapped model."""
        if hasattr(model, 'named_steps') and 'forest' in model.named_steps:
            return model.named_steps['forest']
        if hasattr(model, 'model') and model.model is not None:
            return ModelAnalyzer._unwrap(model.model)
        return model

    @staticmethod
    def count_parameters(model: Any) -> int:
        """
        Count decision nodes across all trees.

        Args:
            model: Fitted forest, pipeline or wrapped model

        Returns:
            Total node count (0 for estimators without trees)
        """
        estimator = ModelAnalyzer._unwrap(model)

        if hasattr(estimator, 'estimators_'):
            return int(sum(tree.tree_.node_count for tree in estimator.estimators_))
        if hasattr(estimator, 'tree_'):
            return int(estimator.tree_.node_count)
        return 0

    @staticmethod
    def get_model_info(model: Any) -> Dict[str, Any]:
        """
        Get model information for reporting.

        Args:
            model: The model to analyze

        Returns:
            Dictionary with model information
        """
        estimator = ModelAnalyzer._unwrap(model)
        info = {
            'type': type(estimator).__name__,
            'total_nodes': ModelAnalyzer.count_parameters(estimator),
        }

        if hasattr(estimator, 'estimators_'):
            depths = [tree.get_depth() for tree in estimator.estimators_]
            info['n_trees'] = len(estimator.estimators_)
            info['mean_depth'] = float(np.mean(depths))
            info['max_depth'] = int(np.max(depths))
        if hasattr(estimator, 'n_features_in_'):
            info['n_features'] = int(estimator.n_features_in_)
        if hasattr(estimator, 'max_features'):
            info['mtry'] = estimator.max_features

        return info
