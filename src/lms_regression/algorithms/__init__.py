"""Core algorithms for LMS regression"""

from .linear_solver import LinearModel, LinearSolver, OrdinaryLeastSquares, RidgeRegression, make_solver
from .selection import select, median_squared_residual
from .sampling import combinations, plan_sample_count, SubsetSampler
from .search import BestModelTracker, TrialResult, TrialRunner, evaluate_trial, search_best_model

__all__ = [
    'LinearModel',
    'LinearSolver',
    'OrdinaryLeastSquares',
    'RidgeRegression',
    'make_solver',
    'select',
    'median_squared_residual',
    'combinations',
    'plan_sample_count',
    'SubsetSampler',
    'BestModelTracker',
    'TrialResult',
    'TrialRunner',
    'evaluate_trial',
    'search_best_model'
]
