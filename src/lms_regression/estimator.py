"""Least Median of Squares regression: build orchestration and estimator"""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from .algorithms.linear_solver import LinearModel, LinearSolver, OrdinaryLeastSquares, make_solver
from .algorithms.sampling import SubsetSampler, plan_sample_count
from .algorithms.search import TrialRunner, search_best_model
from .config import LMSConfig
from .data.preprocessing import Preprocessor
from .exceptions import ConfigError, FitError, NotBuiltError
from .models.dataset import Dataset
from .outliers.refit import FinalRefitter
from .outliers.weighting import OutlierWeighter


logger = logging.getLogger(__name__)


class BuildState(str, Enum):
    """Lifecycle of a single LMS build"""
    NOT_BUILT = "not_built"
    PLANNING = "planning"
    SEARCHING = "searching"
    BEST_FOUND = "best_found"
    WEIGHTING = "weighting"
    REFITTING = "refitting"
    BUILT = "built"
    FAILED = "failed"


@dataclass(frozen=True, eq=False)
class LMSModel:
    """Final result of an LMS build"""
    model: LinearModel
    best_model: LinearModel
    best_median: float
    best_trial: int
    scale: float
    weights: np.ndarray
    standardized_residuals: np.ndarray
    num_trials: int
    failed_trials: int
    used_fallback: bool
    feature_names: List[str] = field(default_factory=list)
    target_name: str = 'target'

    def __post_init__(self):
        for name in ('weights', 'standardized_residuals'):
            values = np.array(getattr(self, name), dtype=float, copy=True)
            values.setflags(write=False)
            object.__setattr__(self, name, values)

    @property
    def coefficients(self) -> np.ndarray:
        return self.model.coefficients

    @property
    def intercept(self) -> float:
        return self.model.intercept

    @property
    def num_inliers(self) -> int:
        return int(self.weights.sum())

    @property
    def num_outliers(self) -> int:
        return len(self.weights) - self.num_inliers

    def predict(self, row: Sequence[float]) -> float:
        return self.model.predict(row)

    def predict_many(self, features: np.ndarray) -> np.ndarray:
        return self.model.predict_many(features)

    def describe(self) -> str:
        """Coefficients, search summary and inlier/outlier counts"""
        title = "Least Median of Squares regression"
        lines = [
            title,
            "=" * len(title),
            "",
            self.model.describe(self.feature_names, self.target_name),
            "",
            f"Trials: {self.num_trials} ({self.failed_trials} failed), best trial {self.best_trial}",
            f"Best median squared residual: {self.best_median:.6g}",
            f"Scale estimate: {self.scale:.6g}",
            f"Inliers: {self.num_inliers}  Outliers: {self.num_outliers}",
        ]
        if self.used_fallback:
            lines.append("Final model: best trial model (no inliers left for the refit)")
        return "\n".join(lines)


class LMSBuild:
    """
    One LMS build over an immutable dataset

    Runs planning, trial search, weighting and the inlier refit, moving
    ``state`` through BuildState. Each build owns its own random generator
    and best-model accumulator.
    """

    def __init__(self,
                 dataset: Dataset,
                 config: Optional[LMSConfig] = None,
                 solver: Optional[LinearSolver] = None,
                 cancel_event: Optional[threading.Event] = None):
        """
        Initialize build

        Args:
            dataset: Preprocessed numeric training data
            config: Build configuration (defaults to LMSConfig())
            solver: Linear solver for trials and refit (default from config)
            cancel_event: Checked between trials; when set the build stops
        """
        self.dataset = dataset
        self.config = (config or LMSConfig()).validate()
        self.solver = solver or make_solver(self.config.solver, self.config.ridge)
        self.cancel_event = cancel_event
        self.state = BuildState.NOT_BUILT
        self.result: Optional[LMSModel] = None

    def _transition(self, state: BuildState):
        logger.debug(f"LMS build: {self.state.value} -> {state.value}")
        self.state = state

    def _check_dataset(self):
        dataset = self.dataset
        if dataset.num_rows == 0:
            raise ConfigError("No rows in training data")
        if not dataset.is_numeric_target():
            raise ConfigError("Target has to be numeric for regression")
        if np.isnan(dataset.features).any() or np.isnan(dataset.target).any():
            raise ConfigError("Training data has missing values; impute them before building")

    def run(self) -> LMSModel:
        """Execute the build and return the final model"""
        if self.state != BuildState.NOT_BUILT:
            raise RuntimeError(f"Build already run (state: {self.state.value})")

        try:
            self.result = self._run()
        except Exception:
            self.state = BuildState.FAILED
            raise

        self._transition(BuildState.BUILT)
        return self.result

    def _run(self) -> LMSModel:
        config = self.config
        trace_level = logging.INFO if config.debug_trace else logging.DEBUG

        self._check_dataset()

        self._transition(BuildState.PLANNING)
        num_trials = plan_sample_count(config.subsample_size, self.dataset.num_rows)
        seed = None if config.random_sampling else config.random_seed
        sampler = SubsetSampler(
            num_rows=self.dataset.num_rows,
            subsample_size=config.subsample_size,
            seed=seed,
            exclude_first_row=config.exclude_first_row
        )
        logger.log(
            trace_level,
            f"Subsample size {config.subsample_size}, {num_trials} trials, "
            f"seed {'entropy' if seed is None else seed}"
        )

        self._transition(BuildState.SEARCHING)
        runner = TrialRunner(
            dataset=self.dataset,
            solver=self.solver,
            n_jobs=config.n_jobs,
            abort_on_failure=config.failed_trial_policy == 'abort',
            cancel_event=self.cancel_event
        )
        tracker = search_best_model(
            runner.run(sampler.draw_many(num_trials)),
            num_trials,
            trace=config.debug_trace
        )
        if tracker.best is None:
            raise FitError(f"All {num_trials} trials failed to produce a model")
        if tracker.failed_trials:
            logger.info(f"Skipped {tracker.failed_trials}/{num_trials} singular trials")

        self._transition(BuildState.BEST_FOUND)
        best = tracker.best

        self._transition(BuildState.WEIGHTING)
        weighting = OutlierWeighter(
            cutoff=config.residual_cutoff,
            integer_correction=config.scale_correction == 'integer'
        ).weigh(
            self.dataset, best.model, best.median, best.squared_residuals
        )

        self._transition(BuildState.REFITTING)
        refit = FinalRefitter(self.solver).refit(self.dataset, weighting.weights, best.model)

        logger.info(
            f"LMS build complete: {weighting.num_inliers} inliers, "
            f"{weighting.num_outliers} outliers, best median {best.median:.6g}"
        )

        return LMSModel(
            model=refit.model,
            best_model=best.model,
            best_median=best.median,
            best_trial=best.trial_index,
            scale=weighting.scale,
            weights=weighting.weights,
            standardized_residuals=weighting.standardized_residuals,
            num_trials=num_trials,
            failed_trials=tracker.failed_trials,
            used_fallback=refit.used_fallback,
            feature_names=list(self.dataset.feature_names),
            target_name=self.dataset.target_name
        )


def build_model(dataset: Dataset,
                config: Optional[LMSConfig] = None,
                solver: Optional[LinearSolver] = None,
                cancel_event: Optional[threading.Event] = None) -> LMSModel:
    """
    Fit an LMS regression model to a preprocessed dataset

    Args:
        dataset: Numeric training data without missing values
        config: Build configuration
        solver: Linear solver used for trials and the final refit
        cancel_event: Optional cancellation flag checked between trials

    Returns:
        LMSModel holding the final and best trial models
    """
    return LMSBuild(dataset, config, solver, cancel_event).run()


class LeastMedianSquaresRegression:
    """
    DataFrame-facing LMS estimator

    Wraps preprocessing (imputation, nominal encoding, dropping rows with a
    missing target) around build_model and applies the same preprocessing
    to rows passed to predict.
    """

    def __init__(self,
                 config: Optional[LMSConfig] = None,
                 solver: Optional[LinearSolver] = None):
        self.config = config or LMSConfig()
        self.solver = solver
        self.preprocessor: Optional[Preprocessor] = None
        self.dataset: Optional[Dataset] = None
        self.results: Optional[LMSModel] = None
        self._build: Optional[LMSBuild] = None

    @property
    def state(self) -> BuildState:
        return self._build.state if self._build is not None else BuildState.NOT_BUILT

    @property
    def is_built(self) -> bool:
        return self.state == BuildState.BUILT

    def fit(self,
            df: pd.DataFrame,
            target: str,
            weights: Optional[Sequence[float]] = None,
            cancel_event: Optional[threading.Event] = None) -> LMSModel:
        """
        Fit the estimator

        Args:
            df: Training frame with feature columns and the target column
            target: Name of the numeric target column
            weights: Optional per-row weights aligned with ``df``
            cancel_event: Optional cancellation flag checked between trials

        Returns:
            LMSModel from the build
        """
        self.results = None
        self.preprocessor = Preprocessor()
        prepared = self.preprocessor.fit_transform(df, target)

        if weights is not None:
            weights = np.asarray(weights, dtype=float)
            if len(weights) != len(df):
                raise ConfigError(f"Expected {len(df)} row weights, got {len(weights)}")
            weights = weights[self.preprocessor.kept_rows_]

        self.dataset = Dataset.from_frame(prepared, target, weights=weights)
        self._build = LMSBuild(self.dataset, self.config, self.solver, cancel_event)
        self.results = self._build.run()
        return self.results

    def _require_built(self) -> LMSModel:
        if not self.is_built or self.results is None:
            raise NotBuiltError(f"Model has not been built (state: {self.state.value})")
        return self.results

    def predict(self, X: Union[pd.DataFrame, pd.Series, Sequence[float]]) -> Union[float, np.ndarray]:
        """
        Predict targets

        A DataFrame is preprocessed like the training data and yields an
        array; a Series is treated as one raw row; any other sequence is
        taken as already-encoded feature values and yields a float.
        """
        results = self._require_built()

        if isinstance(X, pd.DataFrame):
            features = self.preprocessor.transform(X)
            return results.predict_many(features.to_numpy(dtype=float))

        if isinstance(X, pd.Series):
            features = self.preprocessor.transform(X.to_frame().T)
            return float(results.predict_many(features.to_numpy(dtype=float))[0])

        return results.predict(X)

    def describe(self) -> str:
        return self._require_built().describe()

    def get_weights(self) -> np.ndarray:
        """Inlier (1) / outlier (0) weight per training row kept after preprocessing"""
        return np.array(self._require_built().weights)

    def get_influence_statistics(self) -> pd.DataFrame:
        """
        Per-row residual statistics for the training data

        Returns:
            DataFrame with final-model residuals, best-trial standardized
            residuals and inlier weights
        """
        results = self._require_built()
        residuals = self.dataset.target - results.predict_many(self.dataset.features)

        return pd.DataFrame({
            'observation': self.preprocessor.kept_index_,
            'residual': residuals,
            'squared_residual': residuals ** 2,
            'standardized_residual': results.standardized_residuals,
            'weight': results.weights,
            'outlier': results.weights == 0
        })

    def compare_with_ols(self) -> pd.DataFrame:
        """
        Compare robust coefficients with plain least squares on all rows

        Returns:
            DataFrame with one row per term (features, then intercept)
        """
        results = self._require_built()
        ols = OrdinaryLeastSquares().fit(self.dataset)

        terms = list(self.dataset.feature_names) + ['(intercept)']
        robust = np.append(results.coefficients, results.intercept)
        plain = np.append(ols.coefficients, ols.intercept)

        return pd.DataFrame({
            'term': terms,
            'robust_coefficient': robust,
            'ols_coefficient': plain,
            'difference': robust - plain
        })

    def __str__(self) -> str:
        if not self.is_built:
            return "model has not been built"
        return self.results.describe()
