"""Least Median of Squares robust linear regression"""

from .config import LMSConfig, load_config
from .estimator import BuildState, LMSBuild, LMSModel, LeastMedianSquaresRegression, build_model
from .exceptions import (
    LMSError, ConfigError, FitError, DivisionEdgeCase, NotBuiltError,
    BuildCancelledError, EmptyInlierSetWarning
)
from .models import Dataset

__version__ = "0.1.0"

__all__ = [
    'LMSConfig',
    'load_config',
    'BuildState',
    'LMSBuild',
    'LMSModel',
    'LeastMedianSquaresRegression',
    'build_model',
    'Dataset',
    'LMSError',
    'ConfigError',
    'FitError',
    'DivisionEdgeCase',
    'NotBuiltError',
    'BuildCancelledError',
    'EmptyInlierSetWarning'
]
