"""
Report Generator
================

Renders the analysis into a Markdown document with tables and charts.

"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional
import pandas as pd

from .plotter import Plotter
from ..utils.model_analysis import ModelAnalyzer

logger = logging.getLogger(__name__)


CLASS_LEGEND = {
    'A': 'Exactly according to the specification',
    'B': 'Throwing the elbows to the front',
    'C': 'Lifting the dumbbell only halfway',
    'D': 'Lowering the dumbbell only halfway',
    'E': 'Throwing the hips to the front',
}


class ReportGenerator:
    """Generate the analysis report and its charts."""

    def __init__(self, config: Dict[str, Any]):
        """Initialize report generator with the 'report' configuration section."""
        self.config = config or {}
        self.title = self.config.get('title', 'Dumbbell Lifting Technique Report')
        self.top_n = int(self.config.get('top_n', 20))
        self.plot_format = self.config.get('plot_format', 'png')
        self.plotter = Plotter(dpi=int(self.config.get('dpi', 150)))

    def render(self,
               output_dir: Path,
               selection,
               model,
               evaluation,
               predictions: Optional[pd.DataFrame] = None,
               n_train: Optional[int] = None,
               n_test: Optional[int] = None,
               from_cache: bool = False) -> Path:
        """
        Write ``report.md`` and its plots under ``output_dir``.

        Args:
            output_dir: Run output directory
            selection: ColumnSelectionResult of the column filter
            model: Fitted RandomForestModel
            evaluation: EvaluationResult on the testing partition
            predictions: Frame of case ids and predicted labels for the validation set
            n_train, n_test: Partition sizes
            from_cache: Whether the model was restored rather than trained

        Returns:
            Path of the written report
        """
        output_dir = Path(output_dir)
        plots_dir = output_dir / 'plots'
        plots_dir.mkdir(parents=True, exist_ok=True)

        importance = model.variable_importance()

        importance_plot = plots_dir / f'variable_importance.{self.plot_format}'
        self.plotter.plot_variable_importance(importance, top_n=self.top_n, save_path=importance_plot)
        cv_plot = plots_dir / f'cv_accuracy.{self.plot_format}'
        self.plotter.plot_cv_accuracy(model.cv_results, save_path=cv_plot)
        cm_plot = plots_dir / f'confusion_matrix.{self.plot_format}'
        self.plotter.plot_confusion_matrix(evaluation.confusion_matrix, labels=evaluation.labels,
                                           title='Confusion Matrix (Testing Partition)', save_path=cm_plot)
        logger.info("  ✓ Generated 3 plots")

        sections = [
            f"# {self.title}",
            f"_Generated {datetime.now().strftime('%Y-%m-%d %H:%M')}_",
            self._overview_section(),
            self._data_section(selection, n_train, n_test),
            self._model_section(model, from_cache, cv_plot.relative_to(output_dir)),
            self._importance_section(importance, importance_plot.relative_to(output_dir)),
            self._evaluation_section(model, evaluation, cm_plot.relative_to(output_dir)),
        ]
        if predictions is not None:
            sections.append(self._predictions_section(predictions))

        report_path = output_dir / 'report.md'
        report_path.write_text("\n\n".join(sections) + "\n", encoding='utf-8')
        logger.info(f"  ✓ Report written: {report_path}")
        return report_path

    def _overview_section(self) -> str:
        legend = pd.DataFrame(
            [{'Class': k, 'Execution': v} for k, v in CLASS_LEGEND.items()]
        )
        return "\n\n".join([
            "## Overview",
            "Six participants performed one set of ten repetitions of the unilateral "
            "dumbbell biceps curl in five different fashions while accelerometers on the "
            "belt, forearm, arm and dumbbell recorded the movement. The goal is to predict "
            "the fashion (`classe`) of each repetition from the sensor readings.",
            legend.to_markdown(index=False),
        ])

    def _data_section(self, selection, n_train: Optional[int], n_test: Optional[int]) -> str:
        lines = [
            "## Data Preparation",
            "Missing-value tokens (`NA`, `#DIV/0!`) were normalized on load. The labeled rows "
            "were split into a training and a testing partition stratified by class.",
        ]
        if n_train is not None and n_test is not None:
            lines.append(f"- Training partition: {n_train} rows\n- Testing partition: {n_test} rows")
        lines.append(
            f"Of {selection.n_columns_before} columns, {len(selection.excluded_by_name)} bookkeeping "
            f"columns (row index, subject, timestamps, windows) and {len(selection.excluded_by_missing)} "
            f"mostly-missing columns were removed, leaving {selection.n_columns_after} predictors."
        )
        return "\n\n".join(lines)

    def _model_section(self, model, from_cache: bool, cv_plot: Path) -> str:
        info = ModelAnalyzer.get_model_info(model)
        cv_table = model.cv_results.rename(columns={
            'accuracy': 'Accuracy', 'accuracy_sd': 'AccuracySD'
        })
        origin = "restored from the model cache" if from_cache else "trained for this run"
        return "\n\n".join([
            "## Model",
            f"A random forest ({info.get('n_trees', 'n/a')} trees, {info.get('total_nodes', 0):,} nodes) "
            f"was {origin}. The number of predictors sampled at each split (`mtry`) was chosen by "
            f"{model.cv_folds}-fold cross-validation:",
            cv_table.to_markdown(index=False, floatfmt='.4f'),
            f"Selected `mtry` = {model.best_mtry}. Out-of-bag accuracy {model.oob_accuracy:.4f} "
            f"(estimated out-of-sample error {model.oob_error:.2%}).",
            f"![Cross-validated accuracy]({cv_plot.as_posix()})",
        ])

    def _importance_section(self, importance: pd.DataFrame, plot_path: Path) -> str:
        table = importance.head(self.top_n).reset_index().rename(columns={
            'predictor': 'Predictor', 'raw': 'Importance', 'scaled': 'Scaled (0-100)'
        })
        return "\n\n".join([
            "## Variable Importance",
            table.to_markdown(index=False, floatfmt='.2f'),
            f"![Variable importance]({plot_path.as_posix()})",
        ])

    def _evaluation_section(self, model, evaluation, plot_path: Path) -> str:
        return "\n\n".join([
            "## Held-out Evaluation",
            f"On the {evaluation.n_rows} rows of the testing partition the model reached an accuracy "
            f"of {evaluation.accuracy:.4f} (kappa {evaluation.kappa:.4f}), a misclassification rate of "
            f"{evaluation.error_rate:.2%} against an out-of-bag estimate of {model.oob_error:.2%}.",
            evaluation.confusion_frame().to_markdown(),
            f"![Confusion matrix]({plot_path.as_posix()})",
        ])

    def _predictions_section(self, predictions: pd.DataFrame) -> str:
        return "\n\n".join([
            "## Final Predictions",
            f"Predicted class for each of the {len(predictions)} validation cases:",
            predictions.to_markdown(index=False),
        ])
