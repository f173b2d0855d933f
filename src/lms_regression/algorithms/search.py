"""Randomized LMS trial search"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence

import numpy as np

from .linear_solver import LinearModel, LinearSolver
from .selection import median_squared_residual
from ..exceptions import BuildCancelledError, FitError
from ..models.dataset import Dataset


logger = logging.getLogger(__name__)


@dataclass
class TrialResult:
    """Outcome of fitting and scoring one subsample"""
    trial_index: int
    indices: np.ndarray
    model: Optional[LinearModel] = None
    median: float = np.inf
    squared_residuals: Optional[np.ndarray] = None
    ssr: float = np.nan  # Sum of squared residuals, diagnostic only
    error: Optional[FitError] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class Candidate:
    """Best model seen so far with its score"""
    model: LinearModel
    median: float
    trial_index: int
    squared_residuals: np.ndarray


class BestModelTracker:
    """
    Accumulator for the lowest median squared residual

    A candidate replaces the current best only when its median is strictly
    lower, so among equal medians the earliest trial is kept.
    """

    def __init__(self):
        self.best: Optional[Candidate] = None
        self.trials_seen = 0
        self.failed_trials = 0

    @property
    def best_median(self) -> float:
        return self.best.median if self.best is not None else np.inf

    @property
    def best_model(self) -> Optional[LinearModel]:
        return self.best.model if self.best is not None else None

    def offer(self, result: TrialResult) -> bool:
        """Fold one trial into the accumulator; True if it became the best"""
        self.trials_seen += 1
        if result.failed:
            self.failed_trials += 1
            return False

        if result.median < self.best_median:
            self.best = Candidate(
                model=result.model,
                median=result.median,
                trial_index=result.trial_index,
                squared_residuals=result.squared_residuals
            )
            return True
        return False


def evaluate_trial(dataset: Dataset,
                   solver: LinearSolver,
                   trial_index: int,
                   indices: np.ndarray,
                   abort_on_failure: bool = True) -> TrialResult:
    """
    Fit a model on the rows at ``indices`` and score it on every row

    With ``abort_on_failure`` a singular subset raises FitError; otherwise
    the error is recorded on the result.
    """
    subset = dataset.select_by_indices(indices)
    try:
        model = solver.fit(subset)
    except FitError as e:
        if abort_on_failure:
            raise FitError(f"Trial {trial_index} failed on rows {indices.tolist()}: {e}") from e
        return TrialResult(trial_index=trial_index, indices=indices, error=e)

    squared_residuals = model.squared_residuals(dataset)
    return TrialResult(
        trial_index=trial_index,
        indices=indices,
        model=model,
        median=median_squared_residual(squared_residuals),
        squared_residuals=squared_residuals,
        ssr=float(squared_residuals.sum())
    )


class TrialRunner:
    """
    Evaluate trials sequentially or on a thread pool

    Results are always yielded in trial order, so folding them into a
    BestModelTracker gives the same winner regardless of ``n_jobs``.
    """

    def __init__(self,
                 dataset: Dataset,
                 solver: LinearSolver,
                 n_jobs: int = 1,
                 abort_on_failure: bool = True,
                 cancel_event: Optional[threading.Event] = None):
        self.dataset = dataset
        self.solver = solver
        self.n_jobs = n_jobs
        self.abort_on_failure = abort_on_failure
        self.cancel_event = cancel_event

    def _check_cancelled(self, trial_index: int):
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise BuildCancelledError(f"Build cancelled before trial {trial_index}")

    def _evaluate(self, trial_index: int, indices: np.ndarray) -> TrialResult:
        return evaluate_trial(
            self.dataset, self.solver, trial_index, indices, self.abort_on_failure
        )

    def run(self, index_sets: Sequence[np.ndarray]) -> Iterator[TrialResult]:
        if self.n_jobs <= 1:
            for trial_index, indices in enumerate(index_sets):
                self._check_cancelled(trial_index)
                yield self._evaluate(trial_index, indices)
            return

        chunk_size = self.n_jobs * 8
        with ThreadPoolExecutor(max_workers=self.n_jobs) as executor:
            for start in range(0, len(index_sets), chunk_size):
                self._check_cancelled(start)
                chunk = index_sets[start:start + chunk_size]
                yield from executor.map(
                    self._evaluate, range(start, start + len(chunk)), chunk
                )


def search_best_model(results: Iterable[TrialResult],
                      num_trials: int,
                      trace: bool = False) -> BestModelTracker:
    """
    Reduce trial results, in order, into a BestModelTracker

    Args:
        results: Trial results in trial order
        num_trials: Planned trial count, used for progress logging
        trace: Log progress and replacements at INFO instead of DEBUG
    """
    level = logging.INFO if trace else logging.DEBUG
    progress_step = max(num_trials // 10, 1)
    tracker = BestModelTracker()

    for result in results:
        if tracker.offer(result):
            logger.log(
                level,
                f"Trial {result.trial_index}: new best median squared residual "
                f"{result.median:.6g}"
            )
        if (result.trial_index + 1) % progress_step == 0:
            logger.log(level, f"Completed {result.trial_index + 1}/{num_trials} trials")

    return tracker

