"""Configuration for least median of squares regression"""

from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from .exceptions import ConfigError


FAILED_TRIAL_POLICIES = ('skip', 'abort')
SOLVERS = ('ols', 'ridge')
SCALE_CORRECTIONS = ('real', 'integer')


@dataclass
class LMSConfig:
    """Configuration for an LMS build"""
    subsample_size: int = 4
    random_sampling: bool = False  # Seed from system entropy instead of random_seed
    random_seed: int = 0
    debug_trace: bool = False
    failed_trial_policy: str = 'skip'  # 'skip' or 'abort'
    exclude_first_row: bool = True  # Row 0 is never drawn into a subsample
    residual_cutoff: float = 2.5
    n_jobs: int = 1
    solver: str = 'ridge'  # 'ridge' or 'ols'
    ridge: float = 1e-8
    scale_correction: str = 'real'  # 'integer' truncates 5 / (n - p) toward zero

    def validate(self) -> 'LMSConfig':
        """Check field values, raising ConfigError on the first problem"""
        if isinstance(self.subsample_size, bool) or not isinstance(self.subsample_size, int):
            raise ConfigError(f"subsample_size must be an integer, got {self.subsample_size!r}")
        if self.subsample_size < 1:
            raise ConfigError(f"subsample_size must be >= 1, got {self.subsample_size}")
        if isinstance(self.random_seed, bool) or not isinstance(self.random_seed, int):
            raise ConfigError(f"random_seed must be an integer, got {self.random_seed!r}")
        if not -2 ** 63 <= self.random_seed < 2 ** 63:
            raise ConfigError(f"random_seed must fit in 64 bits, got {self.random_seed}")
        if self.failed_trial_policy not in FAILED_TRIAL_POLICIES:
            raise ConfigError(
                f"Unknown failed_trial_policy: {self.failed_trial_policy} "
                f"(expected one of {', '.join(FAILED_TRIAL_POLICIES)})"
            )
        if self.solver not in SOLVERS:
            raise ConfigError(f"Unknown solver: {self.solver} (expected one of {', '.join(SOLVERS)})")
        if self.residual_cutoff < 0:
            raise ConfigError(f"residual_cutoff must be non-negative, got {self.residual_cutoff}")
        if self.n_jobs < 1:
            raise ConfigError(f"n_jobs must be >= 1, got {self.n_jobs}")
        if self.ridge < 0:
            raise ConfigError(f"ridge must be non-negative, got {self.ridge}")
        if self.scale_correction not in SCALE_CORRECTIONS:
            raise ConfigError(
                f"Unknown scale_correction: {self.scale_correction} "
                f"(expected one of {', '.join(SCALE_CORRECTIONS)})"
            )
        return self

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'LMSConfig':
        """Build a validated config from a plain mapping"""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {unknown}")
        return cls(**values).validate()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(path: Union[str, Path]) -> LMSConfig:
    """
    Load an LMSConfig from a YAML file

    The mapping may sit at the top level or under an ``lms`` key.
    """
    with open(path, 'r', encoding='utf-8') as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ConfigError(f"Configuration file {path} must contain a mapping")

    section = raw.get('lms', raw)
    if not isinstance(section, dict):
        raise ConfigError(f"'lms' section in {path} must be a mapping")

    return LMSConfig.from_dict(section)
