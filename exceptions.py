"""Error kinds raised by the volatility modeling pipeline."""


class VolatilityError(ValueError):
    """Base class for all pipeline errors"""


class InsufficientData(VolatilityError):
    """Sample is shorter than the minimum window an operation needs"""


class SingularMatrix(VolatilityError):
    """Regression design matrix is not invertible"""


class ModelUnavailable(VolatilityError):
    """HAR or GARCH preconditions are not met"""


class DomainError(VolatilityError):
    """Input leaves the mathematical domain of an estimator"""
