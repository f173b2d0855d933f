"""Outlier weighting and inlier refit"""

from .weighting import OutlierWeighter, WeightingResult, robust_scale, standardize
from .refit import FinalRefitter, RefitResult

__all__ = [
    'OutlierWeighter',
    'WeightingResult',
    'robust_scale',
    'standardize',
    'FinalRefitter',
    'RefitResult'
]
