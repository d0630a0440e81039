import numpy as np
import pandas as pd
import pytest

from liftform.data import build_formula, ColumnFilter
from liftform.models import RandomForestModel


CLASSES = ['A', 'B', 'C', 'D', 'E']


def make_sensor_frame(n_per_class: int = 30, seed: int = 0, with_outcome: bool = True) -> pd.DataFrame:
    """Small stand-in for the accelerometer table, bookkeeping columns included."""
    rng = np.random.RandomState(seed)
    labels = np.repeat(CLASSES, n_per_class)
    rng.shuffle(labels)
    n = len(labels)
    code = np.array([CLASSES.index(c) for c in labels], dtype=float)

    frame = pd.DataFrame({
        'Unnamed: 0': np.arange(1, n + 1),
        'user_name': rng.choice(['adelmo', 'carlitos', 'charles', 'eurico', 'jeremy', 'pedro'], n),
        'raw_timestamp_part_1': rng.randint(1322489605, 1323095081, n),
        'cvtd_timestamp': '05/12/2011 11:23',
        'new_window': rng.choice(['no', 'yes'], n, p=[0.98, 0.02]),
        'num_window': rng.randint(1, 864, n),
        'roll_belt': code * 10 + rng.normal(0, 1, n),
        'pitch_forearm': -code * 5 + rng.normal(0, 1, n),
        'yaw_dumbbell': rng.normal(0, 1, n),
        'magnet_arm_x': code * 3 + rng.normal(0, 2, n),
        'grip': np.where(code >= 2, 'wide', 'narrow'),
        'max_roll_belt': np.nan,
        'kurtosis_yaw_arm': np.nan,
    })

    # Sparse summary columns: present only on window boundaries
    frame.loc[frame.index[:2], 'max_roll_belt'] = 1.5
    # Some holes in a kept predictor
    frame.loc[frame.index[::10], 'yaw_dumbbell'] = np.nan

    if with_outcome:
        frame['classe'] = labels
    return frame


@pytest.fixture
def sensor_frame():
    return make_sensor_frame()


@pytest.fixture(scope='session')
def training_frame():
    return make_sensor_frame(n_per_class=30, seed=1)


@pytest.fixture(scope='session')
def model_config():
    return {'n_estimators': 30, 'cv_folds': 5, 'tune_length': 3, 'n_jobs': 1, 'random_state': 7}


@pytest.fixture(scope='session')
def formula(training_frame):
    selection = ColumnFilter().select(training_frame, 'classe')
    return build_formula(selection.predictors, 'classe')


@pytest.fixture(scope='session')
def fitted_model(training_frame, formula, model_config):
    return RandomForestModel(model_config).fit(training_frame, formula)
