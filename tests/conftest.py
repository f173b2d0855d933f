"""Pytest configuration and fixtures"""

import pytest
import pandas as pd
import numpy as np
import tempfile
from pathlib import Path

from lms_regression import Dataset, LMSConfig
from lms_regression.data import ContaminatedDataGenerator


OUTLIER_ROWS = [5, 12]


@pytest.fixture
def line_with_outliers_df():
    """20 rows on y = 2x + 1 with two targets replaced by 1000"""
    x = np.arange(20, dtype=float)
    y = 2 * x + 1
    y[OUTLIER_ROWS] = 1000.0
    return pd.DataFrame({'x': x, 'y': y})


@pytest.fixture
def line_with_outliers(line_with_outliers_df):
    """Dataset form of line_with_outliers_df"""
    return Dataset.from_frame(line_with_outliers_df, target='y')


@pytest.fixture
def outlier_rows():
    return list(OUTLIER_ROWS)


@pytest.fixture
def clean_plane():
    """Noise-free data on y = 3*x0 - 2*x1 + 0.5"""
    rng = np.random.default_rng(7)
    X = rng.uniform(0, 10, size=(40, 2))
    y = X @ np.array([3.0, -2.0]) + 0.5
    return Dataset(features=X, target=y, feature_names=['x0', 'x1'], target_name='y')


@pytest.fixture
def contaminated_df():
    """200 noisy rows on y = 1.5*x0 - 0.5*x1 + 4 with 30% gross outliers"""
    generator = ContaminatedDataGenerator(seed=3)
    return generator.generate(
        n_rows=200,
        n_features=2,
        coefficients=[1.5, -0.5],
        intercept=4.0,
        noise_std=0.05,
        outlier_fraction=0.3,
        outlier_shift=500.0
    )


@pytest.fixture
def small_config():
    """Subsample size 2 with a fixed seed"""
    return LMSConfig(subsample_size=2, random_seed=1)


@pytest.fixture
def temp_data_dir():
    """Create temporary directory for test data"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
