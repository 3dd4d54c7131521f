"""
GARCH package for volatility forecasting.
Fixed-parameter GARCH(1,1) forecaster and optional parameter estimation.
"""

from .forecaster import GARCHForecaster
from .estimator import GARCHEstimator

__all__ = ['GARCHForecaster', 'GARCHEstimator']
