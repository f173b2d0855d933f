"""Data models for LMS regression"""

from .dataset import Dataset
from .validators import DatasetValidator

__all__ = [
    'Dataset',
    'DatasetValidator'
]
