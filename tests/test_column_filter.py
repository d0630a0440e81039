import numpy as np
import pandas as pd
import pytest

from liftform.data import ColumnFilter


def frame_with_missing(counts, n_rows=100):
    data = {}
    for name, n_missing in counts.items():
        column = np.arange(n_rows, dtype=float)
        column[:n_missing] = np.nan
        data[name] = column
    data['classe'] = ['A'] * n_rows
    return pd.DataFrame(data)


def test_threshold_boundaries():
    frame = frame_with_missing({'missing_96': 96, 'missing_95': 95, 'missing_94': 94, 'complete': 0})

    result = ColumnFilter().select(frame, 'classe')

    assert 'missing_96' not in result.predictors
    assert 'missing_95' not in result.predictors
    assert 'missing_94' in result.predictors
    assert 'complete' in result.predictors
    assert result.excluded_by_missing == ['missing_95', 'missing_96']


def test_order_is_missing_count_then_name():
    frame = frame_with_missing({'zeta': 0, 'alpha': 10, 'beta': 0, 'gamma': 10, 'delta': 3})

    result = ColumnFilter().select(frame, 'classe')

    assert result.predictors == ['beta', 'zeta', 'delta', 'alpha', 'gamma']


def test_non_predictive_columns_removed(sensor_frame):
    result = ColumnFilter().select(sensor_frame, 'classe')

    for name in ['Unnamed: 0', 'user_name', 'raw_timestamp_part_1', 'cvtd_timestamp',
                 'new_window', 'num_window']:
        assert name not in result.predictors
        assert name in result.excluded_by_name
    assert 'max_roll_belt' in result.excluded_by_missing
    assert 'kurtosis_yaw_arm' in result.excluded_by_missing
    assert set(result.predictors) == {'roll_belt', 'pitch_forearm', 'yaw_dumbbell', 'magnet_arm_x', 'grip'}
    assert result.n_columns_before == sensor_frame.shape[1]


def test_outcome_never_selected_even_when_mostly_missing():
    frame = frame_with_missing({'x': 0})
    frame['classe'] = [None] * 99 + ['A']

    result = ColumnFilter().select(frame, 'classe')

    assert result.predictors == ['x']
    assert 'classe' not in result.excluded_by_missing


def test_outcome_and_bookkeeping_never_selected_random_frames():
    rng = np.random.RandomState(3)
    column_filter = ColumnFilter()
    bookkeeping = ['X', 'user_name', 'raw_timestamp_part_2', 'num_window', 'new_window']

    for _ in range(20):
        n_rows = rng.randint(5, 60)
        names = list(rng.choice(['roll', 'pitch', 'yaw', 'gyros', 'accel', 'magnet'], 4, replace=False))
        frame = pd.DataFrame(rng.normal(size=(n_rows, len(names) + len(bookkeeping))),
                             columns=names + bookkeeping)
        frame = frame.mask(rng.uniform(size=frame.shape) < rng.uniform())
        frame['classe'] = rng.choice(['A', 'B'], n_rows)

        predictors = column_filter.select(frame, 'classe').predictors

        assert 'classe' not in predictors
        assert not set(bookkeeping) & set(predictors)


def test_custom_config():
    frame = frame_with_missing({'keep': 50, 'drop_me': 0})

    result = ColumnFilter({'missing_threshold': 0.6, 'exclude_patterns': ['^drop_']}).select(frame, 'classe')

    assert result.predictors == ['keep']


def test_describe_reports_fractions():
    frame = frame_with_missing({'half': 50, 'none': 0})

    descriptors = {d.name: d for d in ColumnFilter().describe(frame)}

    assert descriptors['half'].missing_count == 50
    assert descriptors['half'].missing_fraction == pytest.approx(0.5)
    assert descriptors['none'].missing_fraction == 0.0
