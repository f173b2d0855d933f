"""Unit tests for outlier weighting and the inlier refit"""

import warnings

import pytest
import numpy as np

from lms_regression import Dataset, DivisionEdgeCase, EmptyInlierSetWarning
from lms_regression.algorithms.linear_solver import LinearModel, OrdinaryLeastSquares
from lms_regression.outliers import FinalRefitter, OutlierWeighter, robust_scale, standardize


@pytest.fixture
def exact_line_model():
    return LinearModel(coefficients=[2.0], intercept=1.0)


class TestRobustScale:
    """Test the LMS scale estimate"""

    def test_formula(self):
        expected = 1.4826 * (1 + 5 / 18) * 2.0
        assert robust_scale(4.0, 20, 2) == pytest.approx(expected)

    def test_zero_median_gives_zero_scale(self):
        assert robust_scale(0.0, 20, 2) == 0.0

    def test_rows_equal_attributes_raises(self):
        with pytest.raises(DivisionEdgeCase):
            robust_scale(1.0, 3, 3)

    def test_division_edge_case_is_zero_division(self):
        with pytest.raises(ZeroDivisionError):
            robust_scale(1.0, 5, 5)

    def test_fewer_rows_than_attributes_follows_formula(self):
        assert robust_scale(1.0, 3, 4) == pytest.approx(1.4826 * (1 - 5))

    def test_integer_correction_vanishes_for_large_samples(self):
        assert robust_scale(4.0, 20, 2, integer_correction=True) == pytest.approx(1.4826 * 2.0)

    def test_integer_correction_truncates_toward_zero(self):
        # 5 / 2 truncates to 2, 5 / -2 to -2
        assert robust_scale(1.0, 4, 2, integer_correction=True) == pytest.approx(1.4826 * 3)
        assert robust_scale(1.0, 2, 4, integer_correction=True) == pytest.approx(1.4826 * -1)

    def test_weighter_uses_integer_correction(self, line_with_outliers, exact_line_model):
        result = OutlierWeighter(integer_correction=True).weigh(line_with_outliers, exact_line_model, 4.0)
        assert result.scale == pytest.approx(1.4826 * 2.0)


class TestStandardize:
    """Test scaled residuals"""

    def test_positive_scale(self):
        np.testing.assert_allclose(standardize(np.array([4.0, 9.0]), 2.0), [1.0, 1.5])

    def test_zero_scale_is_defined(self):
        """sqrt(0)/0 is 0 (inlier); positive/0 is +inf (outlier)"""
        with warnings.catch_warnings():
            warnings.simplefilter('error')
            ratios = standardize(np.array([0.0, 4.0, 0.0]), 0.0)

        assert ratios[0] == 0.0
        assert ratios[1] == np.inf
        assert not np.isnan(ratios).any()


class TestOutlierWeighter:
    """Test binary weights"""

    def test_flags_gross_outliers(self, line_with_outliers, exact_line_model, outlier_rows):
        result = OutlierWeighter().weigh(line_with_outliers, exact_line_model, 0.0)

        assert result.scale == 0.0
        assert result.weights[outlier_rows].sum() == 0
        assert result.num_inliers == 18
        assert result.num_outliers == 2

    def test_cached_residuals_match_recomputed(self, line_with_outliers):
        model = LinearModel(coefficients=[1.9], intercept=1.5)
        residuals = model.squared_residuals(line_with_outliers)
        median = float(np.sort(residuals)[10])

        cached = OutlierWeighter().weigh(line_with_outliers, model, median, residuals)
        fresh = OutlierWeighter().weigh(line_with_outliers, model, median)

        np.testing.assert_array_equal(cached.weights, fresh.weights)
        assert cached.scale == fresh.scale

    def test_weights_are_binary(self, line_with_outliers):
        model = LinearModel(coefficients=[1.9], intercept=1.5)
        residuals = model.squared_residuals(line_with_outliers)
        result = OutlierWeighter().weigh(line_with_outliers, model, float(np.sort(residuals)[10]))

        assert set(np.unique(result.weights)) <= {0.0, 1.0}
        assert result.weights[[5, 12]].sum() == 0

    def test_zero_cutoff_rejects_everything(self, line_with_outliers, exact_line_model):
        result = OutlierWeighter(cutoff=0.0).weigh(line_with_outliers, exact_line_model, 0.0)
        assert result.num_inliers == 0

    def test_rows_equal_attributes_raises(self):
        dataset = Dataset(features=[[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]], target=[1.0, 2.0, 3.0])
        model = LinearModel(coefficients=[1.0, 2.0], intercept=0.0)

        with pytest.raises(DivisionEdgeCase):
            OutlierWeighter().weigh(dataset, model, 0.0)


class TestFinalRefitter:
    """Test inlier refit and fallback"""

    def test_refit_on_inliers(self, line_with_outliers, outlier_rows):
        weights = np.ones(20)
        weights[outlier_rows] = 0.0
        best = LinearModel(coefficients=[1.9], intercept=1.5)

        result = FinalRefitter(OrdinaryLeastSquares()).refit(line_with_outliers, weights, best)

        assert not result.used_fallback
        assert result.num_inliers == 18
        assert result.model.coefficients[0] == pytest.approx(2.0)
        assert result.model.intercept == pytest.approx(1.0)

    def test_empty_inlier_set_falls_back(self, line_with_outliers):
        best = LinearModel(coefficients=[1.9], intercept=1.5)

        with pytest.warns(EmptyInlierSetWarning):
            result = FinalRefitter(OrdinaryLeastSquares()).refit(line_with_outliers, np.zeros(20), best)

        assert result.used_fallback
        assert result.num_inliers == 0
        assert result.model is not best
        np.testing.assert_array_equal(result.model.coefficients, best.coefficients)
        assert result.model.intercept == best.intercept
