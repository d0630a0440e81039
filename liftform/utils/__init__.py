"""Utility modules."""

from .model_analysis import ModelAnalyzer
from .config import Config, DEFAULTS

__all__ = ['ModelAnalyzer', 'Config', 'DEFAULTS']
