"""Visualization and reporting modules."""

from .report_generator import ReportGenerator, CLASS_LEGEND
from .plotter import Plotter

__all__ = ['ReportGenerator', 'CLASS_LEGEND', 'Plotter']
