"""Trial planning and random subsample selection"""

import logging
from typing import List, Optional

import numpy as np

from ..exceptions import ConfigError


logger = logging.getLogger(__name__)


# Row-count thresholds below which the trial count is C(n, k), indexed by k - 1
SMALL_SAMPLE_THRESHOLDS = (500, 50, 22, 17, 15, 14)
TRIALS_PER_SAMPLE_ROW = 500
LARGE_SAMPLE_TRIALS = 3000


def combinations(n: int, r: int) -> int:
    """
    Number of ways to choose r items from n

    r is reduced to min(r, n - r) before the multiplicative accumulation.
    Each step divides exactly, so intermediate values stay as small as
    the running binomial coefficient.

    Raises:
        ValueError: if r > n or either argument is negative
    """
    if r > n:
        raise ValueError(f"r must be less than or equal to n (n={n}, r={r})")
    if r < 0 or n < 0:
        raise ValueError(f"n and r must be non-negative (n={n}, r={r})")

    r = min(r, n - r)
    c = 1
    for i in range(1, r + 1):
        c = c * (n - i + 1) // i
    return c


def plan_sample_count(subsample_size: int, num_rows: int) -> int:
    """
    Number of random trials to run

    Small subsamples (k < 7) on small datasets use C(n, k) trials; otherwise
    k * 500 trials, capped at a fixed 3000 for k >= 7.
    """
    if subsample_size < 1:
        raise ConfigError(f"subsample_size must be >= 1, got {subsample_size}")

    if subsample_size < 7:
        if num_rows < SMALL_SAMPLE_THRESHOLDS[subsample_size - 1]:
            if subsample_size > num_rows:
                raise ConfigError(
                    f"subsample_size {subsample_size} exceeds row count {num_rows}"
                )
            return combinations(num_rows, subsample_size)
        return subsample_size * TRIALS_PER_SAMPLE_ROW

    return LARGE_SAMPLE_TRIALS


class SubsetSampler:
    """
    Draw row-index subsets for LMS trials

    One sampler owns one ``numpy.random.Generator`` for a single build.
    Within a subset, indices are distinct; different subsets may repeat.
    With ``exclude_first_row`` the draw covers rows 1..n-1 only.
    """

    def __init__(self,
                 num_rows: int,
                 subsample_size: int,
                 seed: Optional[int] = 0,
                 exclude_first_row: bool = True):
        """
        Initialize sampler

        Args:
            num_rows: Rows in the dataset being sampled
            subsample_size: Indices per subset
            seed: Fixed seed, or None to seed from system entropy
            exclude_first_row: Never draw row 0
        """
        self.num_rows = num_rows
        self.subsample_size = subsample_size
        self.exclude_first_row = exclude_first_row
        self.first_index = 1 if exclude_first_row else 0
        self.rng = np.random.default_rng(self._seed_sequence(seed))

        pool_size = num_rows - self.first_index
        if pool_size < subsample_size:
            raise ConfigError(
                f"Need at least {subsample_size + self.first_index} rows to draw "
                f"subsamples of size {subsample_size}, got {num_rows}"
            )

    @staticmethod
    def _seed_sequence(seed: Optional[int]) -> np.random.SeedSequence:
        if seed is None:
            return np.random.SeedSequence()
        # SeedSequence needs a non-negative entropy value
        return np.random.SeedSequence(seed % 2 ** 64)

    def draw(self) -> np.ndarray:
        """One subset of distinct row indices"""
        picks = self.rng.choice(
            self.num_rows - self.first_index,
            size=self.subsample_size,
            replace=False
        )
        return picks + self.first_index

    def draw_many(self, count: int) -> List[np.ndarray]:
        """``count`` subsets, drawn in order"""
        return [self.draw() for _ in range(count)]
