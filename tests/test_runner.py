import json

import pytest
import yaml

from conftest import make_sensor_frame
from liftform.runner import AnalysisRunner, main
from liftform.utils import Config


@pytest.fixture
def project(tmp_path, monkeypatch):
    data_dir = tmp_path / 'data'
    data_dir.mkdir()
    make_sensor_frame(n_per_class=20, seed=2).to_csv(data_dir / 'pml-training.csv', index=False, na_rep='NA')
    cases = make_sensor_frame(n_per_class=1, seed=3, with_outcome=False)
    cases['problem_id'] = range(1, len(cases) + 1)
    cases.to_csv(data_dir / 'pml-testing.csv', index=False, na_rep='NA')

    config_path = tmp_path / 'small.yaml'
    config_path.write_text(yaml.safe_dump({
        'partition': {'p': 0.7, 'random_state': 5},
        'model': {'n_estimators': 20, 'cv_folds': 3, 'n_jobs': 1},
        'report': {'dpi': 50},
    }))
    monkeypatch.chdir(tmp_path)
    return tmp_path, config_path


def test_full_run(project):
    root, config_path = project

    result = AnalysisRunner(Config(config_path), project_root=root).run()

    assert not result.from_cache
    assert (root / 'artifacts' / 'model_fit.joblib').exists()
    assert len(result.partition.train_index) + len(result.partition.test_index) == 100
    assert 'classe' not in result.formula.predictors
    assert 'user_name' not in result.formula.predictors
    assert 0.0 <= result.evaluation.error_rate <= 1.0
    assert list(result.predictions.columns) == ['problem_id', 'prediction']
    assert len(result.predictions) == 5

    out = result.output_dir
    assert out.parent == root / 'results'
    metrics = json.loads((out / 'metrics.json').read_text())
    assert metrics['n_train'] == 70 and metrics['n_test'] == 30
    assert metrics['mtry'] == result.model.best_mtry
    assert (out / 'report.md').exists()
    assert (out / 'variable_importance.csv').exists()
    assert sorted(p.name for p in (out / 'answers').iterdir())[0] == 'problem_id_1.txt'


def test_second_run_uses_cache(project):
    root, config_path = project

    first = AnalysisRunner(Config(config_path), project_root=root).run()
    second = AnalysisRunner(Config(config_path), project_root=root).run()
    retrained = AnalysisRunner(Config(config_path), project_root=root, retrain=True).run()

    assert second.from_cache
    assert not retrained.from_cache
    assert second.model.best_mtry == first.model.best_mtry
    assert list(second.predictions['prediction']) == list(first.predictions['prediction'])


def test_run_without_cache(project):
    root, config_path = project
    config = Config(config_path, overrides={'model': {'use_cache': False}, 'data': {'validation_file': None}})

    result = AnalysisRunner(config, project_root=root).run()

    assert result.predictions is None
    assert not (root / 'artifacts').exists()


def test_main(project):
    root, config_path = project

    assert main([str(config_path)]) == 0
    assert list((root / 'results' / 'logs').glob('small_*.log'))


def test_main_missing_config(project):
    assert main(['does_not_exist.yaml']) == 1


def test_main_missing_training_file(project):
    root, config_path = project
    (root / 'data' / 'pml-training.csv').unlink()

    assert main([str(config_path)]) == 1


def test_failed_report_leaves_no_run_directory(project):
    root, config_path = project
    config = Config(config_path, overrides={'report': {'plot_format': 'notaformat'}})
    runner = AnalysisRunner(config, project_root=root)

    with pytest.raises(ValueError):
        runner.run()

    assert not runner.output_dir.exists()
    assert not list((root / 'results').glob('small_*'))


def test_failed_run_keeps_existing_directory(project):
    root, config_path = project
    config = Config(config_path, overrides={'report': {'plot_format': 'notaformat'}})
    runner = AnalysisRunner(config, project_root=root)
    runner.output_dir.mkdir(parents=True)
    (runner.output_dir / 'notes.txt').write_text('kept')

    with pytest.raises(ValueError):
        runner.run()

    assert (runner.output_dir / 'notes.txt').read_text() == 'kept'
