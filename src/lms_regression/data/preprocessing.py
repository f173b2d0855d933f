"""Preprocessing applied upstream of the LMS core"""

import logging
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from ..exceptions import ConfigError, NotBuiltError
from ..models.validators import DatasetValidator


logger = logging.getLogger(__name__)


class Preprocessor:
    """
    Turn a raw frame into all-numeric training data

    Steps, in order:
    1. Fit imputation values on every row, including rows whose target is
       missing (numeric: column mean, nominal: column mode)
    2. Drop rows whose target is missing and impute the remaining features
    3. One-hot encode nominal columns; the first level of each column is
       the baseline and gets no column, keeping the intercept identifiable

    The fitted means, modes and dummy layout are reused by ``transform`` so
    new rows get the same encoding as the training rows.
    """

    def __init__(self):
        self.target: Optional[str] = None
        self.numeric_columns_: List[str] = []
        self.nominal_columns_: List[str] = []
        self.fill_values_: Dict[str, object] = {}
        self.encoded_columns_: List[str] = []
        self.kept_rows_: Optional[np.ndarray] = None
        self.kept_index_: Optional[pd.Index] = None

    def fit_transform(self, df: pd.DataFrame, target: str) -> pd.DataFrame:
        """
        Fit on a training frame and return the encoded frame with the target

        Raises:
            ConfigError: missing/non-numeric target, no rows, or columns of
                unsupported type (dates, durations)
        """
        if target not in df.columns:
            raise ConfigError(f"Target column '{target}' not found")
        if len(df) == 0:
            raise ConfigError("No rows in training data")
        if not DatasetValidator.is_numeric_column(df[target]):
            raise ConfigError(f"Target column '{target}' has to be numeric for regression")

        features = df.drop(columns=[target])
        unsupported = DatasetValidator.unsupported_columns(features)
        if unsupported:
            raise ConfigError(f"Cannot handle attribute types of columns: {unsupported}")

        self.target = target
        self.numeric_columns_ = [
            col for col in features.columns if DatasetValidator.is_numeric_column(features[col])
        ]
        self.nominal_columns_ = [
            col for col in features.columns if col not in self.numeric_columns_
        ]

        self.fill_values_ = {}
        for col in self.numeric_columns_:
            mean = features[col].mean()
            self.fill_values_[col] = 0.0 if pd.isna(mean) else float(mean)
        for col in self.nominal_columns_:
            modes = features[col].dropna().mode()
            self.fill_values_[col] = modes.iloc[0] if len(modes) else 'missing'

        self.kept_rows_ = df[target].notna().to_numpy()
        dropped = int((~self.kept_rows_).sum())
        if dropped:
            logger.info(f"Dropped {dropped} rows with missing target")

        kept = df[self.kept_rows_]
        if len(kept) == 0:
            raise ConfigError("No rows with a target value")
        self.kept_index_ = kept.index

        features = kept.drop(columns=[target])
        encoded = self._encode(self._impute(features))
        baselines = [f"{col}={min(levels)}" for col, levels in self._levels(features).items()]
        encoded = encoded.drop(columns=baselines)
        self.encoded_columns_ = list(encoded.columns)

        encoded[target] = kept[target].astype(float).to_numpy()
        return encoded

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        """Encode new rows with the fitted layout (target column ignored)"""
        if self.target is None:
            raise NotBuiltError("Preprocessor has not been fitted")

        features = df.drop(columns=[self.target], errors='ignore')
        expected = self.numeric_columns_ + self.nominal_columns_
        missing = [col for col in expected if col not in features.columns]
        if missing:
            raise ConfigError(f"Missing feature columns: {missing}")

        encoded = self._encode(self._impute(features[expected]))
        return encoded.reindex(columns=self.encoded_columns_, fill_value=0.0)

    def _impute(self, features: pd.DataFrame) -> pd.DataFrame:
        df = features.copy()
        for col, value in self.fill_values_.items():
            if col in df.columns and df[col].isna().any():
                df[col] = df[col].fillna(value)
        return df

    def _encode(self, features: pd.DataFrame) -> pd.DataFrame:
        if not self.nominal_columns_:
            return features.astype(float)

        nominal = features[self.nominal_columns_].astype(str)
        dummies = pd.get_dummies(nominal, prefix_sep='=', dtype=float)
        numeric = features[self.numeric_columns_].astype(float)
        return pd.concat([numeric, dummies], axis=1)

    def _levels(self, features: pd.DataFrame) -> Dict[str, List[str]]:
        """Observed levels of each nominal column after imputation"""
        imputed = self._impute(features)
        return {
            col: imputed[col].astype(str).unique().tolist()
            for col in self.nominal_columns_
        }
