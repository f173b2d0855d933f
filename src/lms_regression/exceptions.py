"""Error taxonomy for LMS model building"""


class LMSError(Exception):
    """Base class for all errors raised while building or using a model"""


class ConfigError(LMSError, ValueError):
    """Invalid configuration or unusable training data (no partial model)"""


class FitError(LMSError, ArithmeticError):
    """A least-squares fit could not be computed (singular design)"""


class DivisionEdgeCase(LMSError, ZeroDivisionError):
    """Row count equals attribute count, so the scale estimate is undefined"""


class NotBuiltError(LMSError, RuntimeError):
    """Model used before a build completed"""


class BuildCancelledError(LMSError):
    """Build stopped between trials because cancellation was requested"""


class EmptyInlierSetWarning(UserWarning):
    """Every row was flagged as an outlier; the best trial model is used instead"""
