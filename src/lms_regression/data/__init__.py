"""Data loading, preprocessing and generation modules"""

from .preprocessing import Preprocessor
from .data_loader import DataLoader
from .synthetic_generator import ContaminatedDataGenerator

__all__ = [
    'Preprocessor',
    'DataLoader',
    'ContaminatedDataGenerator'
]
