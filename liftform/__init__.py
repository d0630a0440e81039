"""Dumbbell lifting technique recognition from accelerometer data."""

from .data import DataLoader, StratifiedPartitioner, ColumnFilter, build_formula
from .models import ModelFactory, RandomForestModel, ModelCache, predict_cases
from .metrics import MetricsWrapper, Evaluator
from .utils import Config, ModelAnalyzer
from .visualization import ReportGenerator, Plotter
from .runner import AnalysisRunner


__all__ = [
    'DataLoader',
    'StratifiedPartitioner',
    'ColumnFilter',
    'build_formula',
    'ModelFactory',
    'RandomForestModel',
    'ModelCache',
    'predict_cases',
    'MetricsWrapper',
    'Evaluator',
    'Config',
    'ModelAnalyzer',
    'ReportGenerator',
    'Plotter',
    'AnalysisRunner'
]
