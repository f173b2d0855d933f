"""Data validation functions"""

import pandas as pd
import numpy as np
from typing import List, Tuple

from ..exceptions import ConfigError


class DatasetValidator:
    """Centralized checks applied before a frame becomes a training Dataset"""

    @classmethod
    def check_frame(cls, df: pd.DataFrame, target: str) -> None:
        """
        Validate a frame for regression, raising ConfigError on failure

        The frame must be non-empty, contain the target column, have a
        numeric target and numeric feature columns only.
        """
        if target not in df.columns:
            raise ConfigError(f"Target column '{target}' not found")

        if len(df) == 0:
            raise ConfigError("No rows in training data")

        if not cls.is_numeric_column(df[target]):
            raise ConfigError(f"Target column '{target}' has to be numeric for regression")

        non_numeric = [
            col for col in df.columns
            if col != target and not cls.is_numeric_column(df[col])
        ]
        if non_numeric:
            raise ConfigError(f"Cannot handle non-numeric attributes: {non_numeric}")

    @staticmethod
    def is_numeric_column(series: pd.Series) -> bool:
        """Numeric, excluding booleans and time types"""
        return (
            pd.api.types.is_numeric_dtype(series)
            and not pd.api.types.is_bool_dtype(series)
            and not pd.api.types.is_timedelta64_dtype(series)
        )

    @staticmethod
    def is_nominal_column(series: pd.Series) -> bool:
        """Columns the preprocessor one-hot encodes"""
        return (
            pd.api.types.is_object_dtype(series)
            or isinstance(series.dtype, pd.CategoricalDtype)
            or pd.api.types.is_bool_dtype(series)
            or pd.api.types.is_string_dtype(series)
        )

    @classmethod
    def unsupported_columns(cls, df: pd.DataFrame) -> List[str]:
        """Columns that are neither numeric nor nominal (dates, durations, ...)"""
        return [
            col for col in df.columns
            if not cls.is_numeric_column(df[col]) and not cls.is_nominal_column(df[col])
        ]

    @classmethod
    def validation_report(cls, df: pd.DataFrame, target: str) -> Tuple[bool, List[str]]:
        """Collect every problem with a frame instead of stopping at the first"""
        errors = []

        if target not in df.columns:
            return False, [f"Target column '{target}' not found"]

        if len(df) == 0:
            errors.append("No rows in training data")

        if not cls.is_numeric_column(df[target]):
            errors.append(f"Target column '{target}' is not numeric")

        unsupported = cls.unsupported_columns(df.drop(columns=[target]))
        if unsupported:
            errors.append(f"Unsupported attribute types: {unsupported}")

        missing_target = int(df[target].isna().sum())
        if missing_target:
            errors.append(f"{missing_target} rows with missing target")

        numeric = df.select_dtypes(include=[np.number])
        if not numeric.empty and not np.isfinite(numeric.to_numpy(dtype=float, na_value=0.0)).all():
            errors.append("Infinite values found")

        return len(errors) == 0, errors
