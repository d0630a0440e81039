import pytest
import yaml

from liftform.errors import ConfigurationError
from liftform.utils import Config, DEFAULTS


def write_config(path, values):
    path.write_text(yaml.safe_dump(values))
    return path


def test_defaults_without_file():
    config = Config()

    assert config.outcome == 'classe'
    assert config.get_partition_config()['p'] == 0.7
    assert config.get_filter_config()['missing_threshold'] == 0.95
    assert config['model']['n_estimators'] == DEFAULTS['model']['n_estimators']


def test_file_overrides_merge_with_defaults(tmp_path):
    path = write_config(tmp_path / 'run.yaml', {'partition': {'random_state': 32343}, 'model': {'n_estimators': 50}})

    config = Config(path)

    assert config.get_partition_config() == {'p': 0.7, 'random_state': 32343}
    assert config.get_model_config()['n_estimators'] == 50
    assert config.get_model_config()['cv_folds'] == 5
    assert config.config_path == path


def test_model_inherits_partition_seed():
    config = Config.from_dict({'partition': {'random_state': 11}})

    assert config.get_model_config()['random_state'] == 11
    assert Config.from_dict({'partition': {'random_state': 11}, 'model': {'random_state': 3}}) \
        .get_model_config()['random_state'] == 3


def test_defaults_are_not_mutated():
    Config.from_dict({'column_filter': {'exclude_patterns': ['^only$']}})

    assert 'user_name' in DEFAULTS['column_filter']['exclude_patterns']


@pytest.mark.parametrize('values', [
    {'partition': {'p': 1.0}},
    {'partition': {'p': 0}},
    {'partition': {'p': 'half'}},
    {'column_filter': {'missing_threshold': 0}},
    {'column_filter': {'missing_threshold': 1.5}},
    {'data': {'label_column': ''}},
])
def test_invalid_values(values):
    with pytest.raises(ConfigurationError):
        Config.from_dict(values)


def test_non_mapping_file(tmp_path):
    path = tmp_path / 'bad.yaml'
    path.write_text('- just\n- a list\n')

    with pytest.raises(ConfigurationError):
        Config(path)


def test_default_yaml_loads():
    from pathlib import Path

    config = Config(Path(__file__).resolve().parents[1] / 'configs' / 'default.yaml')

    assert config.get_partition_config()['random_state'] == 32343
    assert config.get_data_config()['na_values'] == ['', 'NA', '#DIV/0!']
