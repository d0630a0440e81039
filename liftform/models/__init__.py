"""Models module.

Provides the random forest classifier used by the analysis, the model
factory, the persisted-model cache and case scoring helpers.
"""

from .base import (
    BaseModel,
    ModelFactory,
    safe_int
)

from .forest import (
    RandomForestModel,
    mtry_grid,
    scale_importance
)

from .cache import ModelCache
from .predictor import predict_cases, write_answer_files

__version__ = '1.0.0'

__all__ = [
    'BaseModel',
    'ModelFactory',
    'safe_int',
    'RandomForestModel',
    'mtry_grid',
    'scale_importance',
    'ModelCache',
    'predict_cases',
    'write_answer_files',
]
