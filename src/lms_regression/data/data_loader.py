"""Data loading utilities"""

import pandas as pd
from typing import Optional, Union
from pathlib import Path

from ..exceptions import ConfigError


class DataLoader:
    """Load training and prediction data from CSV files"""

    def __init__(self, data_dir: Union[str, Path] = '.'):
        self.data_dir = Path(data_dir)

    def _resolve(self, filename: Union[str, Path]) -> Path:
        path = Path(filename)
        return path if path.is_absolute() else self.data_dir / path

    def load_frame(self, filename: Union[str, Path]) -> pd.DataFrame:
        """Load a CSV file into a DataFrame"""
        filepath = self._resolve(filename)
        if not filepath.exists():
            raise FileNotFoundError(f"Data file not found: {filepath}")
        return pd.read_csv(filepath)

    def load_training_data(self,
                           filename: Union[str, Path],
                           target: Optional[str] = None,
                           drop_columns: Optional[list] = None) -> pd.DataFrame:
        """
        Load a training CSV

        Args:
            filename: CSV path, relative to the data directory
            target: Target column; defaults to the last column
            drop_columns: Columns to discard (ids, labels)

        Returns:
            DataFrame with the target moved to the last column
        """
        df = self.load_frame(filename)
        if drop_columns:
            df = df.drop(columns=[c for c in drop_columns if c in df.columns])

        if len(df.columns) == 0:
            raise ConfigError(f"No columns in {filename}")

        target = target or df.columns[-1]
        if target not in df.columns:
            raise ConfigError(f"Target column '{target}' not found in {filename}")

        columns = [c for c in df.columns if c != target] + [target]
        return df[columns]

    def save_frame(self, df: pd.DataFrame, filename: Union[str, Path]) -> Path:
        filepath = self._resolve(filename)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(filepath, index=False)
        return filepath
