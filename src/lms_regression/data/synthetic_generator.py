"""Generate contaminated linear regression data for testing"""

import numpy as np
import pandas as pd
from typing import Optional, Sequence


class ContaminatedDataGenerator:
    """Generate linear data where a fraction of targets are gross outliers"""

    def __init__(self, seed: int = 42):
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    def generate(self,
                 n_rows: int,
                 n_features: int = 1,
                 coefficients: Optional[Sequence[float]] = None,
                 intercept: float = 0.0,
                 noise_std: float = 0.0,
                 outlier_fraction: float = 0.0,
                 outlier_shift: float = 1000.0,
                 feature_range: tuple = (0.0, 10.0)) -> pd.DataFrame:
        """
        Generate a dataset

        Args:
            n_rows: Number of rows
            n_features: Number of numeric features
            coefficients: True slope per feature (random in [-5, 5] if None)
            intercept: True intercept
            noise_std: Std of Gaussian noise added to every clean target
            outlier_fraction: Share of rows whose target is shifted
            outlier_shift: Magnitude of the shift applied to outliers
            feature_range: Uniform range of feature values

        Returns:
            DataFrame with columns x0..x{n_features-1}, y, is_outlier
        """
        if not 0.0 <= outlier_fraction < 1.0:
            raise ValueError(f"outlier_fraction must be in [0, 1), got {outlier_fraction}")

        if coefficients is None:
            coefficients = self.rng.uniform(-5, 5, size=n_features)
        coefficients = np.asarray(coefficients, dtype=float)
        if coefficients.shape != (n_features,):
            raise ValueError(f"Expected {n_features} coefficients, got {coefficients.size}")

        X = self.rng.uniform(*feature_range, size=(n_rows, n_features))
        y = X @ coefficients + intercept
        if noise_std > 0:
            y = y + self.rng.normal(0.0, noise_std, size=n_rows)

        n_outliers = int(round(outlier_fraction * n_rows))
        is_outlier = np.zeros(n_rows, dtype=bool)
        if n_outliers:
            outlier_rows = self.rng.choice(n_rows, size=n_outliers, replace=False)
            is_outlier[outlier_rows] = True
            signs = self.rng.choice([-1.0, 1.0], size=n_outliers)
            y[outlier_rows] += signs * outlier_shift * self.rng.uniform(0.5, 1.5, size=n_outliers)

        df = pd.DataFrame(X, columns=[f"x{i}" for i in range(n_features)])
        df['y'] = y
        df['is_outlier'] = is_outlier
        return df
