import pandas as pd
import pytest

from conftest import make_sensor_frame
from liftform.data import ColumnFilter
from liftform.metrics import Evaluator
from liftform.visualization import CLASS_LEGEND, ReportGenerator


@pytest.fixture
def report_inputs(fitted_model, training_frame):
    selection = ColumnFilter().select(training_frame, 'classe')
    evaluation = Evaluator('classe').evaluate(fitted_model, make_sensor_frame(n_per_class=6, seed=21))
    predictions = pd.DataFrame({'problem_id': [1, 2, 3], 'prediction': ['A', 'C', 'E']})
    return selection, evaluation, predictions


def test_render_writes_report_and_plots(tmp_path, fitted_model, report_inputs):
    selection, evaluation, predictions = report_inputs

    report_path = ReportGenerator({'title': 'Lifting Report', 'top_n': 3, 'dpi': 50}).render(
        output_dir=tmp_path, selection=selection, model=fitted_model, evaluation=evaluation,
        predictions=predictions, n_train=150, n_test=30,
    )

    text = report_path.read_text(encoding='utf-8')
    assert report_path == tmp_path / 'report.md'
    assert text.startswith('# Lifting Report')
    for heading in ['## Overview', '## Data Preparation', '## Model', '## Variable Importance',
                    '## Held-out Evaluation', '## Final Predictions']:
        assert heading in text
    for description in CLASS_LEGEND.values():
        assert description in text
    assert CLASS_LEGEND['A'] == 'Exactly according to the specification'
    assert f"Selected `mtry` = {fitted_model.best_mtry}" in text
    assert 'trained for this run' in text
    for name in ['variable_importance.png', 'cv_accuracy.png', 'confusion_matrix.png']:
        assert (tmp_path / 'plots' / name).stat().st_size > 0


def test_render_without_predictions(tmp_path, fitted_model, report_inputs):
    selection, evaluation, _ = report_inputs

    report_path = ReportGenerator({}).render(
        output_dir=tmp_path, selection=selection, model=fitted_model, evaluation=evaluation,
        from_cache=True,
    )

    text = report_path.read_text(encoding='utf-8')
    assert '## Final Predictions' not in text
    assert 'restored from the model cache' in text
