"""Persisted-model cache: load a saved forest instead of retraining."""

import pandas as pd
from pathlib import Path
from typing import Any, Dict, Optional, Union
from loguru import logger

from .base import BaseModel, ModelFactory
from ..data.formula import Formula


class ModelCache:
    """
    A single joblib artifact at a known path.

    Existence of the file is the only check made before trusting it.
    """

    def __init__(self, path: Union[str, Path], model_type: str = 'random_forest'):
        self.path = Path(path).with_suffix('.joblib')
        self.model_type = model_type

    def exists(self) -> bool:
        return self.path.exists()

    def load(self, config: Optional[Dict[str, Any]] = None) -> BaseModel:
        model = ModelFactory.create_model(self.model_type, config=config)
        model.load(str(self.path))
        return model

    def save(self, model: BaseModel) -> Path:
        return model.save(str(self.path))

    def fit_or_load(self, frame: pd.DataFrame, formula: Formula,
                    config: Optional[Dict[str, Any]] = None,
                    retrain: bool = False) -> BaseModel:
        """
        Return the cached model, or fit one on ``frame`` and cache it.

        Args:
            frame: Training partition
            formula: Formula to fit
            config: Model configuration
            retrain: Ignore an existing artifact and overwrite it

        Returns:
            Fitted model
        """
        if self.exists() and not retrain:
            model = self.load(config)
            if str(getattr(model, 'formula', formula)) != str(formula):
                logger.warning(f"Cached model at {self.path} was fit on a different formula; using it anyway")
            logger.info(f"Using cached model: {self.path}")
            return model

        model = ModelFactory.create_model(self.model_type, config=config)
        model.fit(frame, formula)
        self.save(model)
        return model
