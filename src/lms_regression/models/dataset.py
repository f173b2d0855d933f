"""Training dataset model"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence
import numpy as np
import pandas as pd

from .validators import DatasetValidator
from ..exceptions import ConfigError


def _frozen(values, dtype=float) -> np.ndarray:
    array = np.array(values, dtype=dtype, copy=True)
    array.setflags(write=False)
    return array


@dataclass(frozen=True, eq=False)
class Dataset:
    """
    Immutable numeric training data

    Rows of ``features`` line up with ``target`` and ``weights``. The
    dataset counts its target column as an attribute, so
    ``num_attributes`` is the number of feature columns plus one.
    """
    features: np.ndarray
    target: np.ndarray
    weights: Optional[np.ndarray] = None
    feature_names: List[str] = field(default_factory=list)
    target_name: str = 'target'

    def __post_init__(self):
        features = np.asarray(self.features, dtype=float)
        if features.ndim == 1:
            features = features.reshape(-1, 1)
        if features.ndim != 2:
            raise ConfigError(f"Features must be two-dimensional, got shape {features.shape}")

        target = np.asarray(self.target, dtype=float).ravel()
        if len(target) != features.shape[0]:
            raise ConfigError(
                f"Feature rows ({features.shape[0]}) and target values ({len(target)}) differ"
            )

        if self.weights is None:
            weights = np.ones(len(target))
        else:
            weights = np.asarray(self.weights, dtype=float).ravel()
            if len(weights) != len(target):
                raise ConfigError(f"Expected {len(target)} row weights, got {len(weights)}")
            if (weights < 0).any():
                raise ConfigError("Row weights must be non-negative")

        names = list(self.feature_names) or [f"x{i}" for i in range(features.shape[1])]
        if len(names) != features.shape[1]:
            raise ConfigError(f"Expected {features.shape[1]} feature names, got {len(names)}")

        object.__setattr__(self, 'features', _frozen(features))
        object.__setattr__(self, 'target', _frozen(target))
        object.__setattr__(self, 'weights', _frozen(weights))
        object.__setattr__(self, 'feature_names', names)

    @classmethod
    def from_frame(cls,
                   df: pd.DataFrame,
                   target: str,
                   weights: Optional[Sequence[float]] = None) -> 'Dataset':
        """
        Build a dataset from an all-numeric DataFrame

        Args:
            df: Frame holding feature columns and the target column
            target: Name of the target column
            weights: Optional per-row weights (default 1.0)

        Returns:
            Dataset with features in column order
        """
        DatasetValidator.check_frame(df, target)
        feature_df = df.drop(columns=[target])
        return cls(
            features=feature_df.to_numpy(dtype=float),
            target=df[target].to_numpy(dtype=float),
            weights=weights,
            feature_names=[str(c) for c in feature_df.columns],
            target_name=str(target)
        )

    @property
    def num_rows(self) -> int:
        return self.features.shape[0]

    @property
    def num_features(self) -> int:
        return self.features.shape[1]

    @property
    def num_attributes(self) -> int:
        """Feature columns plus the target column"""
        return self.num_features + 1

    def value(self, row: int, attr: int) -> float:
        return float(self.features[row, attr])

    def target_value(self, row: int) -> float:
        return float(self.target[row])

    def is_numeric_target(self) -> bool:
        return np.issubdtype(self.target.dtype, np.number)

    def has_missing(self, row: int) -> bool:
        return bool(np.isnan(self.features[row]).any() or np.isnan(self.target[row]))

    def select_by_indices(self, indices: Sequence[int]) -> 'Dataset':
        """Rows at ``indices`` in the given order (repeats allowed)"""
        idx = np.asarray(indices, dtype=int)
        if idx.size and (idx.min() < 0 or idx.max() >= self.num_rows):
            raise IndexError(f"Row indices out of range for {self.num_rows} rows")
        return Dataset(
            features=self.features[idx],
            target=self.target[idx],
            weights=self.weights[idx],
            feature_names=self.feature_names,
            target_name=self.target_name
        )

    def select_mask(self, mask: np.ndarray) -> 'Dataset':
        """Rows where ``mask`` is true"""
        mask = np.asarray(mask, dtype=bool)
        if mask.shape != (self.num_rows,):
            raise ValueError(f"Mask shape {mask.shape} does not match {self.num_rows} rows")
        return self.select_by_indices(np.flatnonzero(mask))

    def to_frame(self) -> pd.DataFrame:
        df = pd.DataFrame(self.features, columns=self.feature_names)
        df[self.target_name] = self.target
        return df
