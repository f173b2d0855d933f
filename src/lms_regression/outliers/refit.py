"""Least-squares refit on LMS inliers"""

import logging
import warnings
from dataclasses import dataclass

import numpy as np

from ..algorithms.linear_solver import LinearModel, LinearSolver
from ..exceptions import EmptyInlierSetWarning
from ..models.dataset import Dataset


logger = logging.getLogger(__name__)


@dataclass
class RefitResult:
    model: LinearModel
    used_fallback: bool
    num_inliers: int


class FinalRefitter:
    """
    Refit on rows with weight 1, dropping the rest

    When no row survives, an EmptyInlierSetWarning is issued and a copy of
    the best trial model becomes the final model.
    """

    def __init__(self, solver: LinearSolver):
        self.solver = solver

    def refit(self,
              dataset: Dataset,
              weights: np.ndarray,
              best_model: LinearModel) -> RefitResult:
        inliers = np.asarray(weights) == 1

        if not inliers.any():
            message = "No inliers left for the final refit; using the best trial model"
            logger.warning(message)
            warnings.warn(message, EmptyInlierSetWarning, stacklevel=2)
            return RefitResult(model=best_model.copy(), used_fallback=True, num_inliers=0)

        model = self.solver.fit(dataset.select_mask(inliers))
        return RefitResult(model=model, used_fallback=False, num_inliers=int(inliers.sum()))
