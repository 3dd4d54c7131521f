"""
Regression package for volatility modeling.
Closed-form OLS and the HAR model built on it.
"""

from .ols import OLSResult, fit_ols, ordinary_least_squares, r_squared, mean_squared_error
from .har import HARModel

__all__ = [
    'OLSResult',
    'fit_ols',
    'ordinary_least_squares',
    'r_squared',
    'mean_squared_error',
    'HARModel',
]
