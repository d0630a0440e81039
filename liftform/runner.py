"""
Analysis Runner
===============

Runs the whole analysis from a YAML configuration: load, partition, filter
columns, fit (or restore) the forest, evaluate, predict the validation
cases and render the report.

Run:
    python scripts/run_analysis.py configs/default.yaml [--debug] [--retrain]
"""

import argparse
import json
import logging
import shutil
import sys
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd
from loguru import logger as log

from .data import DataLoader, StratifiedPartitioner, Partition, ColumnFilter, ColumnSelectionResult, Formula, build_formula
from .errors import LiftformError
from .metrics import Evaluator, EvaluationResult
from .models import ModelCache, ModelFactory, BaseModel, predict_cases, write_answer_files
from .utils import Config
from .visualization import ReportGenerator

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Artifacts produced by one run."""
    partition: Partition
    selection: ColumnSelectionResult
    formula: Formula
    model: BaseModel
    evaluation: EvaluationResult
    predictions: Optional[pd.DataFrame]
    output_dir: Path
    report_path: Path
    from_cache: bool


class AnalysisRunner:
    """Linear orchestration of the analysis, configured from YAML."""

    def __init__(self, config: Union[str, Path, Config], project_root: Optional[Path] = None,
                 retrain: bool = False):
        """
        Args:
            config: Path to a YAML configuration, or a Config
            project_root: Root for relative paths (default: current directory)
            retrain: Ignore any cached model
        """
        self.config = config if isinstance(config, Config) else Config(config)
        self.project_root = Path(project_root) if project_root else Path('.')
        self.retrain = retrain

        self.experiment_name = self._create_experiment_name()
        self.output_dir = self.project_root / self.config.get_output_config().get('output_dir', 'results') / self.experiment_name

        log.info(f"Initialized runner - Experiment: {self.experiment_name}")

    def _create_experiment_name(self) -> str:
        """Create unique experiment identifier."""
        config_name = self.config.config_path.stem if self.config.config_path else 'analysis'
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        return f"{config_name}_{timestamp}"

    def run(self) -> AnalysisResult:
        """Execute the complete pipeline."""
        outcome = self.config.outcome
        start_time = time.time()

        logger.info("=" * 80)
        logger.info("DUMBBELL LIFTING TECHNIQUE ANALYSIS")
        logger.info("=" * 80)

        created_output = not self.output_dir.exists()
        try:
            training, validation = self._load_data()
            partition, train_frame, test_frame = self._partition(training, outcome)
            selection = ColumnFilter(self.config.get_filter_config()).select(train_frame, outcome)
            formula = build_formula(selection.predictors, outcome)
            logger.info(f"Formula: {outcome} ~ {len(formula.predictors)} predictors")

            model, from_cache = self._fit_model(train_frame, formula)
            evaluation = Evaluator(outcome).evaluate(model, test_frame)
            predictions = self._predict_validation(model, validation)

            self.output_dir.mkdir(parents=True, exist_ok=True)
            self._save_results(model, evaluation, predictions, partition, selection, from_cache)

            report_path = ReportGenerator(self.config.get_report_config()).render(
                output_dir=self.output_dir,
                selection=selection,
                model=model,
                evaluation=evaluation,
                predictions=predictions,
                n_train=len(partition.train_index),
                n_test=len(partition.test_index),
                from_cache=from_cache,
            )
        except Exception as e:
            logger.error(f"Pipeline failed: {str(e)}", exc_info=True)
            if created_output:
                self._discard_output()
            raise

        result = AnalysisResult(
            partition=partition,
            selection=selection,
            formula=formula,
            model=model,
            evaluation=evaluation,
            predictions=predictions,
            output_dir=self.output_dir,
            report_path=report_path,
            from_cache=from_cache,
        )
        self._print_summary(result, time.time() - start_time)
        return result

    def _discard_output(self) -> None:
        """Remove this run's output directory so a failed run leaves nothing behind."""
        if self.output_dir.exists():
            shutil.rmtree(self.output_dir)
            logger.warning(f"Removed partial output: {self.output_dir}")

    def _load_data(self):
        logger.info("\n" + "=" * 60)
        logger.info("DATA LOADING")
        logger.info("=" * 60)
        loader = DataLoader()
        return loader.load_from_config(self.config.get_data_config(), self.project_root)

    def _partition(self, training: pd.DataFrame, outcome: str):
        partition_config = self.config.get_partition_config()
        partitioner = StratifiedPartitioner(
            p=partition_config.get('p', 0.7),
            seed=partition_config.get('random_state', 42),
        )
        partition = partitioner.split(training[outcome])
        train_frame, test_frame = partition.apply(training)
        return partition, train_frame, test_frame

    def _fit_model(self, train_frame: pd.DataFrame, formula: Formula):
        logger.info("\n" + "=" * 60)
        logger.info("MODEL TRAINING")
        logger.info("=" * 60)

        model_config = self.config.get_model_config()
        model_type = model_config.get('type', 'random_forest')

        if not model_config.get('use_cache', True):
            model = ModelFactory.create_model(model_type, config=model_config)
            model.fit(train_frame, formula)
            return model, False

        cache = ModelCache(self.project_root / model_config['cache_path'], model_type=model_type)
        from_cache = cache.exists() and not self.retrain
        model = cache.fit_or_load(train_frame, formula, config=model_config, retrain=self.retrain)
        return model, from_cache

    def _predict_validation(self, model: BaseModel, validation: Optional[pd.DataFrame]) -> Optional[pd.DataFrame]:
        if validation is None:
            logger.info("No validation file configured; skipping final predictions")
            return None

        id_column = self.config.get_data_config().get('id_column')
        predicted = predict_cases(model, validation, name='prediction')

        if id_column and id_column in validation.columns:
            ids = validation[id_column].tolist()
        else:
            ids = list(range(1, len(validation) + 1))
            id_column = 'case'

        return pd.DataFrame({id_column: ids, 'prediction': predicted.to_numpy()})

    def _save_results(self, model: BaseModel, evaluation: EvaluationResult,
                      predictions: Optional[pd.DataFrame], partition: Partition,
                      selection: ColumnSelectionResult, from_cache: bool) -> None:
        """Save metrics, predictions and answer files."""
        logger.info("\n" + "=" * 60)
        logger.info("SAVING RESULTS")
        logger.info("=" * 60)

        metrics: Dict[str, Any] = {
            'n_train': int(len(partition.train_index)),
            'n_test': int(len(partition.test_index)),
            'n_predictors': len(selection.predictors),
            'predictors': selection.predictors,
            'mtry': model.best_mtry,
            'oob_accuracy': model.oob_accuracy,
            'oob_error': model.oob_error,
            'test_error_rate': evaluation.error_rate,
            'test_scores': evaluation.scores,
            'confusion_matrix': evaluation.confusion_matrix.tolist(),
            'labels': evaluation.labels,
            'from_cache': from_cache,
        }
        (self.output_dir / 'metrics.json').write_text(json.dumps(metrics, indent=2, default=str))
        model.cv_results.to_csv(self.output_dir / 'cv_results.csv', index=False)
        model.variable_importance().to_csv(self.output_dir / 'variable_importance.csv')

        if predictions is not None:
            predictions.to_csv(self.output_dir / 'predictions.csv', index=False)
            if self.config.get_output_config().get('write_answers', True):
                write_answer_files(predictions['prediction'], self.output_dir / 'answers',
                                   ids=predictions.iloc[:, 0].tolist())

        logger.info(f"  ✓ Results saved to {self.output_dir}")

    def _print_summary(self, result: AnalysisResult, elapsed: float) -> None:
        logger.info("\n" + "=" * 80)
        logger.info("ANALYSIS SUMMARY")
        logger.info("=" * 80)
        logger.info(f"Predictors: {len(result.formula.predictors)}")
        logger.info(f"Selected mtry: {result.model.best_mtry}")
        logger.info(f"OOB error: {result.model.oob_error:.4f}")
        logger.info(f"Held-out error rate: {result.evaluation.error_rate:.4f}")
        if result.predictions is not None:
            logger.info(f"Final predictions: {' '.join(result.predictions['prediction'].astype(str))}")
        logger.info(f"Report: {result.report_path}")
        logger.info(f"Elapsed: {elapsed:.1f}s")
        logger.info("=" * 80)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Dumbbell lifting technique analysis"
    )

    parser.add_argument(
        'config',
        type=str,
        help='Path to configuration file (YAML)'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )

    parser.add_argument(
        '--retrain',
        action='store_true',
        help='Ignore the cached model and fit a new one'
    )

    args = parser.parse_args(argv)

    # Validate config file
    config_path = Path(args.config)
    if not config_path.exists():
        logging.error(f"Configuration file not found: {args.config}")
        return 1

    try:
        config = Config(config_path)
    except (LiftformError, OSError) as e:
        logging.error(f"Invalid configuration: {e}")
        return 1

    # Setup log file using config's output directory
    output_dir = config.get_output_config().get('output_dir', 'results')
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    log_dir = Path(output_dir) / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{config_path.stem}_{timestamp}.log"

    level = logging.DEBUG if args.debug else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(), logging.FileHandler(log_file)],
        force=True
    )
    logging.getLogger('matplotlib').setLevel(logging.WARNING)
    sink_id = log.add(log_file, level='DEBUG' if args.debug else 'INFO')

    print(f"Log file: {log_file}")
    print("=" * 80)

    try:
        AnalysisRunner(config, retrain=args.retrain).run()
        return 0
    except (LiftformError, FileNotFoundError) as e:
        logging.error(f"Analysis failed: {e}")
        return 1
    except Exception as e:
        logging.error(f"Analysis failed: {e}", exc_info=True)
        return 1
    finally:
        log.remove(sink_id)


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    sys.exit(main())
