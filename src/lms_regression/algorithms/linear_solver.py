"""Least-squares line fitting used by the LMS search and refit"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
from scipy import linalg

from ..exceptions import FitError
from ..models.dataset import Dataset


@dataclass(frozen=True, eq=False)
class LinearModel:
    """Fitted linear model: coefficient per feature plus an intercept"""
    coefficients: np.ndarray
    intercept: float

    def __post_init__(self):
        coefficients = np.array(self.coefficients, dtype=float, copy=True).ravel()
        coefficients.setflags(write=False)
        object.__setattr__(self, 'coefficients', coefficients)
        object.__setattr__(self, 'intercept', float(self.intercept))

    def predict(self, row: Sequence[float]) -> float:
        """Predict the target for one row of feature values"""
        values = np.asarray(row, dtype=float).ravel()
        if values.shape != self.coefficients.shape:
            raise ValueError(
                f"Expected {len(self.coefficients)} feature values, got {values.size}"
            )
        return float(values @ self.coefficients + self.intercept)

    def predict_many(self, features: np.ndarray) -> np.ndarray:
        """Predict every row of a (n, m) feature matrix"""
        features = np.asarray(features, dtype=float)
        if features.ndim == 1:
            features = features.reshape(-1, 1)
        return features @ self.coefficients + self.intercept

    def squared_residuals(self, dataset: Dataset) -> np.ndarray:
        """(prediction - target)^2 for every row of ``dataset``"""
        errors = self.predict_many(dataset.features) - dataset.target
        return errors * errors

    def copy(self) -> 'LinearModel':
        return LinearModel(self.coefficients, self.intercept)

    def describe(self,
                 feature_names: Optional[List[str]] = None,
                 target_name: str = 'target') -> str:
        """Render the model as an equation, one term per line"""
        names = feature_names or [f"x{i}" for i in range(len(self.coefficients))]
        lines = [f"{target_name} ="]
        for name, coef in zip(names, self.coefficients):
            lines.append(f"  {coef:14.6f} * {name} +")
        lines.append(f"  {self.intercept:14.6f}")
        return "\n".join(lines)


class LinearSolver(ABC):
    """Capability to fit a linear model to a dataset"""

    @abstractmethod
    def fit(self, dataset: Dataset) -> LinearModel:
        """Fit a model, raising FitError when the data admits no unique fit"""

    @staticmethod
    def _weighted_design(dataset: Dataset):
        """Design matrix with intercept column, scaled by sqrt(row weight)"""
        X = np.column_stack([dataset.features, np.ones(dataset.num_rows)])
        sqrt_w = np.sqrt(dataset.weights)
        return X * sqrt_w[:, None], dataset.target * sqrt_w


class OrdinaryLeastSquares(LinearSolver):
    """Weighted ordinary least squares via scipy.linalg.lstsq"""

    def fit(self, dataset: Dataset) -> LinearModel:
        if dataset.num_rows == 0:
            raise FitError("Cannot fit a model to zero rows")

        X, y = self._weighted_design(dataset)

        try:
            beta, _, rank, _ = linalg.lstsq(X, y)
        except (linalg.LinAlgError, ValueError) as e:
            raise FitError(f"Least-squares fit failed: {e}") from e

        if rank < X.shape[1]:
            raise FitError(
                f"Singular design: rank {rank} < {X.shape[1]} "
                f"({dataset.num_rows} rows, {dataset.num_features} features)"
            )

        return LinearModel(coefficients=beta[:-1], intercept=beta[-1])


class RidgeRegression(LinearSolver):
    """
    Weighted ridge regression

    The intercept is not penalized. Any positive ``ridge`` makes every
    subset solvable, so trials never fail with this solver unless the
    intercept column itself is degenerate (zero total weight).
    """

    def __init__(self, ridge: float = 1e-8):
        self.ridge = ridge

    def fit(self, dataset: Dataset) -> LinearModel:
        if dataset.num_rows == 0:
            raise FitError("Cannot fit a model to zero rows")

        X, y = self._weighted_design(dataset)
        penalty = np.eye(X.shape[1]) * self.ridge
        penalty[-1, -1] = 0.0

        try:
            beta = linalg.solve(X.T @ X + penalty, X.T @ y, assume_a='sym')
        except linalg.LinAlgError as e:
            raise FitError(f"Ridge fit failed: {e}") from e

        return LinearModel(coefficients=beta[:-1], intercept=beta[-1])


def make_solver(name: str, ridge: float = 1e-8) -> LinearSolver:
    """Solver instance for a configured solver name"""
    if name == 'ols':
        return OrdinaryLeastSquares()
    if name == 'ridge':
        return RidgeRegression(ridge=ridge)
    raise ValueError(f"Unknown solver: {name}")
