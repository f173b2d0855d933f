"""Unit tests for the dataset model and validators"""

import pytest
import pandas as pd
import numpy as np

from lms_regression import Dataset, ConfigError
from lms_regression.models.validators import DatasetValidator


class TestDataset:
    """Test Dataset construction and accessors"""

    def test_from_frame(self, line_with_outliers_df):
        dataset = Dataset.from_frame(line_with_outliers_df, target='y')

        assert dataset.num_rows == 20
        assert dataset.num_features == 1
        assert dataset.num_attributes == 2
        assert dataset.feature_names == ['x']
        assert dataset.target_name == 'y'
        assert dataset.value(3, 0) == 3.0
        assert dataset.target_value(3) == 7.0
        assert dataset.is_numeric_target()

    def test_default_weights(self):
        dataset = Dataset(features=[[1.0], [2.0]], target=[1.0, 2.0])
        np.testing.assert_array_equal(dataset.weights, [1.0, 1.0])

    def test_one_dimensional_features_become_column(self):
        dataset = Dataset(features=[1.0, 2.0, 3.0], target=[1.0, 2.0, 3.0])
        assert dataset.features.shape == (3, 1)
        assert dataset.feature_names == ['x0']

    def test_arrays_are_read_only_copies(self):
        features = np.array([[1.0], [2.0]])
        dataset = Dataset(features=features, target=[1.0, 2.0])
        features[0, 0] = 50.0

        assert dataset.value(0, 0) == 1.0
        with pytest.raises(ValueError):
            dataset.target[0] = 3.0

    def test_has_missing(self):
        dataset = Dataset(features=[[1.0], [np.nan]], target=[1.0, 2.0])
        assert not dataset.has_missing(0)
        assert dataset.has_missing(1)

    def test_select_by_indices(self, line_with_outliers):
        subset = line_with_outliers.select_by_indices([4, 2, 4])

        np.testing.assert_array_equal(subset.features[:, 0], [4.0, 2.0, 4.0])
        np.testing.assert_array_equal(subset.target, [9.0, 5.0, 9.0])
        assert subset.feature_names == ['x']

    def test_select_by_indices_out_of_range(self, line_with_outliers):
        with pytest.raises(IndexError):
            line_with_outliers.select_by_indices([20])

    def test_select_mask(self, line_with_outliers):
        mask = np.zeros(20, dtype=bool)
        mask[[1, 3]] = True
        subset = line_with_outliers.select_mask(mask)

        assert subset.num_rows == 2
        np.testing.assert_array_equal(subset.target, [3.0, 7.0])

    def test_mismatched_lengths(self):
        with pytest.raises(ConfigError):
            Dataset(features=[[1.0], [2.0]], target=[1.0])

    def test_negative_weights(self):
        with pytest.raises(ConfigError):
            Dataset(features=[[1.0], [2.0]], target=[1.0, 2.0], weights=[1.0, -1.0])

    def test_round_trip_frame(self, line_with_outliers_df):
        dataset = Dataset.from_frame(line_with_outliers_df, target='y')
        pd.testing.assert_frame_equal(dataset.to_frame(), line_with_outliers_df)


class TestDatasetValidator:
    """Test ConfigError checks on raw frames"""

    def test_missing_target_column(self):
        with pytest.raises(ConfigError, match='not found'):
            DatasetValidator.check_frame(pd.DataFrame({'x': [1.0]}), 'y')

    def test_empty_frame(self):
        with pytest.raises(ConfigError, match='No rows'):
            DatasetValidator.check_frame(pd.DataFrame({'x': [], 'y': []}), 'y')

    def test_non_numeric_target(self):
        df = pd.DataFrame({'x': [1.0, 2.0], 'y': ['a', 'b']})
        with pytest.raises(ConfigError, match='numeric'):
            DatasetValidator.check_frame(df, 'y')

    def test_boolean_target_rejected(self):
        df = pd.DataFrame({'x': [1.0, 2.0], 'y': [True, False]})
        with pytest.raises(ConfigError):
            DatasetValidator.check_frame(df, 'y')

    def test_string_feature_rejected(self):
        df = pd.DataFrame({'x': ['a', 'b'], 'y': [1.0, 2.0]})
        with pytest.raises(ConfigError, match='non-numeric'):
            DatasetValidator.check_frame(df, 'y')

    def test_unsupported_columns(self):
        df = pd.DataFrame({
            'when': pd.to_datetime(['2020-01-01', '2020-01-02']),
            'label': ['a', 'b'],
            'x': [1.0, 2.0]
        })
        assert DatasetValidator.unsupported_columns(df) == ['when']

    def test_validation_report(self):
        df = pd.DataFrame({
            'x': [1.0, 2.0, 3.0],
            'when': pd.to_datetime(['2020-01-01', '2020-01-02', '2020-01-03']),
            'y': [1.0, np.nan, 3.0]
        })
        is_valid, errors = DatasetValidator.validation_report(df, 'y')

        assert not is_valid
        assert any('Unsupported' in e for e in errors)
        assert any('missing target' in e for e in errors)

    def test_validation_report_clean(self, line_with_outliers_df):
        is_valid, errors = DatasetValidator.validation_report(line_with_outliers_df, 'y')
        assert is_valid
        assert errors == []
