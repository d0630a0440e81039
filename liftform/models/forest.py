"""Random forest classifier with cross-validated ``mtry`` selection."""

import numpy as np
import pandas as pd
from typing import Dict, Any, List, Optional
from sklearn.compose import ColumnTransformer
from sklearn.ensemble import RandomForestClassifier
from sklearn.impute import SimpleImputer
from sklearn.model_selection import GridSearchCV, StratifiedKFold
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import OrdinalEncoder
from loguru import logger

from .base import BaseModel, ModelFactory, safe_int
from ..data.formula import Formula
from ..errors import ConfigurationError


def mtry_grid(n_predictors: int, tune_length: int = 3) -> List[int]:
    """
    Candidate numbers of predictors sampled at each split.

    Evenly spaced from 2 to ``n_predictors`` (geometric above 500 predictors),
    floored, de-duplicated and clipped to [1, n_predictors].
    """
    p = n_predictors
    if p < 1:
        raise ConfigurationError("mtry grid needs at least one predictor")

    if tune_length <= 1:
        values = [np.floor(np.sqrt(p))]
    elif p <= tune_length:
        values = np.floor(np.linspace(2, p, p))
    elif p < 500:
        values = np.floor(np.linspace(2, p, tune_length))
    else:
        values = np.floor(2 ** np.linspace(1, np.log2(p), tune_length))

    return sorted({int(min(max(v, 1), p)) for v in values})


def scale_importance(raw: pd.Series) -> pd.Series:
    """Min-max scale importances to 0-100; all-equal scores map to 100."""
    spread = raw.max() - raw.min()
    if spread == 0:
        return pd.Series(100.0, index=raw.index)
    return (raw - raw.min()) / spread * 100.0


class RandomForestModel(BaseModel):
    """
    Random forest over the formula's predictors.

    The per-split feature-sample count is chosen by stratified k-fold
    cross-validation over ``mtry_grid``; the winner is refit on the whole
    training partition with out-of-bag scoring enabled.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.n_estimators = safe_int(self.config.get('n_estimators'), 100)
        self.cv_folds = safe_int(self.config.get('cv_folds'), 5)
        self.tune_length = safe_int(self.config.get('tune_length'), 3)
        self.random_state = safe_int(self.config.get('random_state'), 42)
        self.n_jobs = self.config.get('n_jobs', -1)
        self.mtry_values = self._mtry_override(self.config.get('mtry'))

        self.formula: Optional[Formula] = None
        self.classes_: List[str] = []
        self.best_mtry: Optional[int] = None
        self.cv_results = pd.DataFrame(columns=['mtry', 'accuracy', 'accuracy_sd'])

    @staticmethod
    def _mtry_override(value: Any) -> Optional[List[int]]:
        """Fixed mtry candidates from config: a single value or a list."""
        if value is None:
            return None
        values = value if isinstance(value, (list, tuple)) else [value]
        candidates = sorted({safe_int(v, 1) for v in values})
        if not candidates:
            raise ConfigurationError("model.mtry is empty")
        return candidates

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    def fit(self, frame: pd.DataFrame, formula: Formula) -> 'RandomForestModel':
        """Fit ``formula`` on the training partition ``frame``."""
        formula.check_columns(frame, where='training partition')
        self.formula = formula
        self.train(frame[list(formula.predictors)], frame[formula.outcome])
        return self

    def train(self, X: pd.DataFrame, y: pd.Series) -> None:
        if len(X) < self.cv_folds:
            raise ConfigurationError(
                f"Training partition has {len(X)} rows, fewer than {self.cv_folds} cross-validation folds"
            )
        if self.formula is None:
            self.formula = Formula(outcome=str(y.name or 'outcome'), predictors=tuple(str(c) for c in X.columns))

        if self.mtry_values:
            candidates = sorted({min(max(v, 1), X.shape[1]) for v in self.mtry_values})
        else:
            candidates = mtry_grid(X.shape[1], self.tune_length)
        logger.info(f"Tuning mtry over {candidates} with {self.cv_folds}-fold CV "
                    f"({len(X)} samples, {X.shape[1]} predictors, {self.n_estimators} trees)")

        search = GridSearchCV(
            estimator=self._build_pipeline(X),
            param_grid={'forest__max_features': list(candidates)},
            cv=StratifiedKFold(n_splits=self.cv_folds, shuffle=True, random_state=self.random_state),
            scoring='accuracy',
            refit=True,
            error_score='raise',
        )
        search.fit(X, np.asarray(y))

        self.model = search.best_estimator_
        self.best_mtry = int(search.best_params_['forest__max_features'])
        self.classes_ = [str(c) for c in self.model.classes_]
        self.cv_results = pd.DataFrame({
            'mtry': [int(v) for v in search.cv_results_['param_forest__max_features']],
            'accuracy': search.cv_results_['mean_test_score'],
            'accuracy_sd': search.cv_results_['std_test_score'],
        })
        self.fitted = True

        for _, row in self.cv_results.iterrows():
            logger.info(f"  mtry={int(row['mtry'])}: accuracy {row['accuracy']:.4f}±{row['accuracy_sd']:.4f}")
        logger.info(f"{self.model_name} trained - mtry={self.best_mtry}, OOB accuracy {self.oob_accuracy:.4f}")

    def _build_pipeline(self, X: pd.DataFrame) -> Pipeline:
        numeric = [c for c in X.columns if pd.api.types.is_numeric_dtype(X[c])]
        categorical = [c for c in X.columns if c not in numeric]

        transformers = []
        if numeric:
            transformers.append(('numeric', SimpleImputer(strategy='median', keep_empty_features=True), numeric))
        if categorical:
            transformers.append(('categorical', Pipeline([
                ('impute', SimpleImputer(strategy='constant', fill_value='missing')),
                ('encode', OrdinalEncoder(handle_unknown='use_encoded_value', unknown_value=-1)),
            ]), categorical))

        return Pipeline([
            ('preprocess', ColumnTransformer(transformers, verbose_feature_names_out=False)),
            ('forest', RandomForestClassifier(
                n_estimators=self.n_estimators,
                oob_score=True,
                n_jobs=self.n_jobs,
                random_state=self.random_state,
            )),
        ])

    # ------------------------------------------------------------------
    # Prediction
    # ------------------------------------------------------------------

    def _predictor_frame(self, X: pd.DataFrame) -> pd.DataFrame:
        if not self.fitted:
            raise ValueError("Model not trained")
        self.formula.check_columns(X, require_outcome=False)
        return X[list(self.formula.predictors)]

    def predict(self, X: pd.DataFrame) -> np.ndarray:
        frame = self._predictor_frame(X)
        return self.model.predict(frame)

    def predict_proba(self, X: pd.DataFrame) -> np.ndarray:
        frame = self._predictor_frame(X)
        return self.model.predict_proba(frame)

    # ------------------------------------------------------------------
    # Fitted statistics
    # ------------------------------------------------------------------

    @property
    def forest(self) -> RandomForestClassifier:
        if not self.fitted:
            raise ValueError("Model not trained")
        return self.model.named_steps['forest']

    @property
    def oob_accuracy(self) -> float:
        return float(self.forest.oob_score_)

    @property
    def oob_error(self) -> float:
        return 1.0 - self.oob_accuracy

    def variable_importance(self) -> pd.DataFrame:
        """
        Mean decrease in impurity per predictor.

        Returns:
            DataFrame indexed by predictor with 'raw' and 'scaled' (0-100)
            columns, sorted by importance (descending) then name
        """
        names = self.model.named_steps['preprocess'].get_feature_names_out()
        raw = pd.Series(self.forest.feature_importances_, index=[str(n) for n in names], name='raw')
        table = pd.DataFrame({'raw': raw, 'scaled': scale_importance(raw)})
        table.index.name = 'predictor'
        table = table.reset_index().sort_values(['raw', 'predictor'], ascending=[False, True])
        return table.set_index('predictor')

    def get_state(self) -> Dict[str, Any]:
        return {
            'formula': self.formula,
            'classes': self.classes_,
            'best_mtry': self.best_mtry,
            'cv_results': self.cv_results,
        }

    def set_state(self, state: Dict[str, Any]) -> None:
        self.formula = state.get('formula')
        self.classes_ = state.get('classes', [])
        self.best_mtry = state.get('best_mtry')
        self.cv_results = state.get('cv_results', self.cv_results)
        if self.formula is None:
            raise ValueError("Saved model has no formula")


ModelFactory.register_model('random_forest', RandomForestModel)
