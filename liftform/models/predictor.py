"""Scoring of external, unlabeled cases with a fitted model."""

import pandas as pd
from pathlib import Path
from typing import List, Optional, Sequence, Union
from loguru import logger

from .base import BaseModel


def predict_cases(model: BaseModel, frame: pd.DataFrame, name: str = 'prediction') -> pd.Series:
    """
    Predict one label per row of ``frame``.

    The outcome column is not required. Extra columns are ignored.

    Args:
        model: Fitted model
        frame: Cases to score
        name: Name of the returned series

    Returns:
        Labels aligned to ``frame.index`` in input row order

    Raises:
        SchemaError: If a predictor column is absent from ``frame``
    """
    labels = model.predict(frame)
    predictions = pd.Series(labels, index=frame.index, name=name)
    logger.info(f"Predicted {len(predictions)} cases: {predictions.value_counts().sort_index().to_dict()}")
    return predictions


def write_answer_files(predictions: pd.Series, output_dir: Union[str, Path],
                       ids: Optional[Sequence] = None) -> List[Path]:
    """
    Write one ``problem_id_<id>.txt`` file per case holding its label.

    Args:
        predictions: Predicted labels in case order
        output_dir: Directory for the answer files
        ids: Case identifiers (default: 1..n)

    Returns:
        Paths written, in case order
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    ids = list(ids) if ids is not None else list(range(1, len(predictions) + 1))
    if len(ids) != len(predictions):
        raise ValueError(f"Got {len(ids)} case ids for {len(predictions)} predictions")

    paths = []
    for case_id, label in zip(ids, predictions):
        path = output_dir / f"problem_id_{case_id}.txt"
        path.write_text(str(label))
        paths.append(path)

    logger.info(f"Wrote {len(paths)} answer files to {output_dir}")
    return paths
