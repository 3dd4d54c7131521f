"""
Return series and volatility estimators.
All functions are pure: same input, same output, no I/O.
"""

from .returns import (
    calculate_returns,
    calculate_realized_volatility,
    calculate_rolling_volatilities,
)
from .estimators import calculate_parkinson_volatility, calculate_garman_klass_volatility
from .indicators import (
    calculate_ema,
    calculate_atr,
    calculate_bollinger_band_width,
    calculate_rolling_bollinger_widths,
    calculate_historical_average_width,
)

__all__ = [
    'calculate_returns',
    'calculate_realized_volatility',
    'calculate_rolling_volatilities',
    'calculate_parkinson_volatility',
    'calculate_garman_klass_volatility',
    'calculate_ema',
    'calculate_atr',
    'calculate_bollinger_band_width',
    'calculate_rolling_bollinger_widths',
    'calculate_historical_average_width',
]
