"""Binary inlier weights from the best LMS fit"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..algorithms.linear_solver import LinearModel
from ..exceptions import DivisionEdgeCase
from ..models.dataset import Dataset


logger = logging.getLogger(__name__)


# Consistency factor making the scale estimate unbiased for normal errors
CONSISTENCY_FACTOR = 1.4826
SMALL_SAMPLE_CORRECTION = 5.0
DEFAULT_CUTOFF = 2.5


@dataclass
class WeightingResult:
    """Robust scale and per-row inlier weights"""
    scale: float
    weights: np.ndarray
    squared_residuals: np.ndarray
    standardized_residuals: np.ndarray

    @property
    def num_inliers(self) -> int:
        return int(self.weights.sum())

    @property
    def num_outliers(self) -> int:
        return len(self.weights) - self.num_inliers


def robust_scale(best_median: float,
                 num_rows: int,
                 num_attributes: int,
                 integer_correction: bool = False) -> float:
    """
    LMS scale estimate

    scale = 1.4826 * (1 + 5 / (n - p)) * sqrt(best_median)

    The division is real by default. With ``integer_correction`` it is
    truncated toward zero, so the correction term is 0 once n - p > 5.

    Raises:
        DivisionEdgeCase: when n == p
    """
    dof = num_rows - num_attributes
    if dof == 0:
        raise DivisionEdgeCase(
            f"Row count equals attribute count ({num_rows}); scale estimate undefined"
        )
    correction = SMALL_SAMPLE_CORRECTION / dof
    if integer_correction:
        correction = float(int(correction))
    return CONSISTENCY_FACTOR * (1 + correction) * np.sqrt(best_median)


def standardize(squared_residuals: np.ndarray, scale: float) -> np.ndarray:
    """
    sqrt(residual) / scale for every row

    With a zero scale the ratio is 0 for rows fitted exactly and +inf for
    every other row, so no NaN reaches the cutoff comparison.
    """
    roots = np.sqrt(squared_residuals)
    if scale == 0:
        return np.where(roots == 0, 0.0, np.inf)
    return roots / scale


class OutlierWeighter:
    """Assign weight 1 to rows with standardized residual below the cutoff"""

    def __init__(self, cutoff: float = DEFAULT_CUTOFF, integer_correction: bool = False):
        self.cutoff = cutoff
        self.integer_correction = integer_correction

    def weigh(self,
              dataset: Dataset,
              best_model: LinearModel,
              best_median: float,
              squared_residuals: Optional[np.ndarray] = None) -> WeightingResult:
        """
        Compute weights for every row of ``dataset``

        Args:
            dataset: Full training data
            best_model: Winning trial model
            best_median: Its median squared residual
            squared_residuals: The winning trial's residuals if already known

        Returns:
            WeightingResult with the scale and 0/1 weights
        """
        if squared_residuals is None:
            squared_residuals = best_model.squared_residuals(dataset)

        scale = robust_scale(
            best_median, dataset.num_rows, dataset.num_attributes, self.integer_correction
        )
        standardized = standardize(squared_residuals, scale)
        weights = (standardized < self.cutoff).astype(float)

        logger.debug(
            f"Scale {scale:.6g}: {int(weights.sum())} inliers, "
            f"{int(len(weights) - weights.sum())} outliers"
        )

        return WeightingResult(
            scale=float(scale),
            weights=weights,
            squared_residuals=squared_residuals,
            standardized_residuals=standardized
        )
