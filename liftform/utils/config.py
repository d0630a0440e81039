"""Configuration management for the analysis."""

import yaml
import copy
from typing import Dict, Optional, Any, Union
from pathlib import Path

from ..errors import ConfigurationError


DEFAULTS: Dict[str, Any] = {
    'data': {
        'training_file': 'data/pml-training.csv',
        'validation_file': 'data/pml-testing.csv',
        'label_column': 'classe',
        'id_column': 'problem_id',
        'na_values': ['', 'NA', '#DIV/0!'],
    },
    'column_filter': {
        'missing_threshold': 0.95,
        'exclude_patterns': [r'^X$', r'^Unnamed: 0$', r'^$', 'user_name', 'timestamp', 'window'],
    },
    'partition': {
        'p': 0.7,
        'random_state': 42,
    },
    'model': {
        'type': 'random_forest',
        'n_estimators': 500,
        'cv_folds': 5,
        'tune_length': 3,
        'n_jobs': -1,
        'use_cache': True,
        'cache_path': 'artifacts/model_fit.joblib',
    },
    'output': {
        'output_dir': 'results',
        'write_answers': True,
    },
    'report': {
        'title': 'Recognizing Dumbbell Lifting Technique from Accelerometer Data',
        'top_n': 20,
        'plot_format': 'png',
        'dpi': 150,
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class Config:
    """
    YAML configuration loader.

    Values from the file override the built-in defaults section by section;
    keys the file leaves out keep their default.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None, overrides: Optional[Dict[str, Any]] = None):
        """Load configuration from YAML file (or defaults only when no path is given)."""
        self.config_path = Path(config_path) if config_path else None
        loaded = {}
        if self.config_path is not None:
            with open(self.config_path, 'r') as f:
                loaded = yaml.safe_load(f) or {}
            if not isinstance(loaded, dict):
                raise ConfigurationError(f"Configuration root must be a mapping: {self.config_path}")

        self.config = _merge(_merge(DEFAULTS, loaded), overrides or {})
        self._validate()

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'Config':
        """Build a configuration from an in-memory mapping."""
        return cls(overrides=values)

    def _validate(self) -> None:
        p = self.config['partition'].get('p')
        if not isinstance(p, (int, float)) or not 0 < p < 1:
            raise ConfigurationError(f"partition.p must be in (0, 1), got {p!r}")

        threshold = self.config['column_filter'].get('missing_threshold')
        if not isinstance(threshold, (int, float)) or not 0 < threshold <= 1:
            raise ConfigurationError(f"column_filter.missing_threshold must be in (0, 1], got {threshold!r}")

        if not self.config['data'].get('label_column'):
            raise ConfigurationError("data.label_column is required")

    # Simple getters for each section
    def get_data_config(self) -> Dict[str, Any]:
        """Get data configuration."""
        return self.config['data']

    def get_filter_config(self) -> Dict[str, Any]:
        """Get column filter configuration."""
        return self.config['column_filter']

    def get_partition_config(self) -> Dict[str, Any]:
        """Get partition configuration."""
        return self.config['partition']

    def get_model_config(self) -> Dict[str, Any]:
        """
        Get model configuration.

        The partition seed is passed on as the model's random_state unless
        the model section sets its own.
        """
        config = copy.deepcopy(self.config['model'])
        config.setdefault('random_state', self.config['partition'].get('random_state', 42))
        return config

    def get_output_config(self) -> Dict[str, Any]:
        """Get output configuration."""
        return self.config['output']

    def get_report_config(self) -> Dict[str, Any]:
        """Get report configuration."""
        return self.config['report']

    @property
    def outcome(self) -> str:
        return self.config['data']['label_column']

    def __getitem__(self, key: str) -> Any:
        """Allow dict-like access to config."""
        return self.config[key]

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value with default."""
        return self.config.get(key, default)
