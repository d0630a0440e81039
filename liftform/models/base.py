"""Base model interface and factory classes.

This module provides the foundation for the classifiers used by the analysis.
It includes the abstract base class, the factory used to create models by
name, and a utility function for safe integer conversion of configuration values.

Key Components:
    - BaseModel: Abstract base class for all models
    - ModelFactory: Factory for model creation and registration
"""

from abc import ABC, abstractmethod
import numpy as np
import pandas as pd
from typing import Any, Dict, Optional
from loguru import logger
from pathlib import Path
import joblib


def safe_int(value: Any, default: int) -> int:
    """
    Safely convert value to integer.

    Handles strings with scientific notation, floats, and None values.
    Returns default if conversion fails.

    Args:
        value: Value to convert
        default: Default value if conversion fails

    Returns:
        Converted integer value or default
    """
    if value is None:
        return default
    try:
        return int(float(str(value)))
    except (TypeError, ValueError):
        return default


class BaseModel(ABC):
    """
    Abstract base class for all classifiers in the analysis.

    Provides a consistent interface for model training, prediction, and persistence.

    Attributes:
        config: Configuration dictionary for the model
        model: The underlying fitted estimator
        fitted: Whether the model has been trained
        model_name: Name of the model class
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize base model.

        Args:
            config: Model configuration dictionary containing hyperparameters
        """
        self.config = config or {}
        self.model = None
        self.fitted = False
        self.model_name = self.__class__.__name__

    @abstractmethod
    def train(self, X: pd.DataFrame, y: pd.Series) -> None:
        """
        Train the model on the provided data.

        Args:
            X: Predictor columns of shape (n_samples, n_predictors)
            y: Outcome labels of shape (n_samples,)
        """
        pass

    @abstractmethod
    def predict(self, X: pd.DataFrame) -> np.ndarray:
        """
        Generate class predictions, one per row of ``X`` in row order.

        Args:
            X: Frame holding at least the predictor columns

        Returns:
            Predicted labels of shape (n_samples,)
        """
        pass

    def predict_proba(self, X: pd.DataFrame) -> Optional[np.ndarray]:
        """
        Predict class probabilities if supported by the estimator.

        Returns:
            Class probabilities of shape (n_samples, n_classes) or None
        """
        if hasattr(self.model, 'predict_proba'):
            return self.model.predict_proba(X)
        return None

    def get_state(self) -> Dict[str, Any]:
        """Extra attributes persisted alongside the estimator."""
        return {}

    def set_state(self, state: Dict[str, Any]) -> None:
        """Restore attributes written by ``get_state``."""
        pass

    def save(self, filepath: str) -> Path:
        """
        Save model to disk.

        Args:
            filepath: Path where the model should be saved

        Returns:
            Path actually written (always with a .joblib suffix)

        Raises:
            ValueError: If attempting to save an unfitted model
        """
        if not self.fitted:
            raise ValueError("Cannot save unfitted model")

        filepath = Path(filepath).with_suffix('.joblib')
        filepath.parent.mkdir(parents=True, exist_ok=True)
        metadata = {
            'model_name': self.model_name,
            'config': self.config,
            'fitted': self.fitted,
            'model': self.model,
            'state': self.get_state(),
        }
        joblib.dump(metadata, filepath)
        logger.info(f"Saved {self.model_name}: {filepath}")
        return filepath

    def load(self, filepath: str) -> None:
        """
        Load model from disk.

        Args:
            filepath: Path to the saved model file
        """
        filepath = Path(filepath).with_suffix('.joblib')
        metadata = joblib.load(filepath)

        if not metadata.get('fitted', False) or metadata.get('model') is None:
            raise ValueError(f"Cannot load unfitted model from {filepath}")

        self.config = metadata.get('config', {})
        self.model_name = metadata.get('model_name', self.__class__.__name__)
        self.model = metadata['model']
        self.set_state(metadata.get('state', {}))
        self.fitted = True

        logger.info(f"Loaded {self.model_name}: {filepath}")


# ============================================================================
# FACTORY
# ============================================================================

class ModelFactory:
    """
    Factory class for creating model instances by name.

    Models must be registered before they can be created.
    """

    _models = {}

    @classmethod
    def register_model(cls, name: str, model_class: type) -> None:
        """
        Register a model class with the factory.

        Args:
            name: Name to register the model under
            model_class: Model class that inherits from BaseModel
        """
        cls._models[name] = model_class

    @classmethod
    def create_model(cls, name: str, config: Optional[Dict[str, Any]] = None, **kwargs) -> BaseModel:
        """
        Create a model instance by name.

        Args:
            name: Registered name of the model
            config: Configuration dictionary for the model
            **kwargs: Additional keyword arguments merged into config

        Returns:
            Instantiated model object

        Raises:
            ValueError: If the model name is not registered
        """
        if name not in cls._models:
            raise ValueError(f"Unknown model: {name}. Available: {cls.list_models()}")

        full_config = {**(config or {}), **kwargs}
        return cls._models[name](config=full_config)

    @classmethod
    def list_models(cls) -> list:
        """Get list of all registered model names."""
        return list(cls._models.keys())
