"""
Signal package: regime classification, trend and rule-based trading signals.
"""

from .regime import identify_volatility_regime, calculate_regime_thresholds, risk_score
from .trend import calculate_trend
from .generator import SignalGenerator, SignalInputs

__all__ = [
    'identify_volatility_regime',
    'calculate_regime_thresholds',
    'risk_score',
    'calculate_trend',
    'SignalGenerator',
    'SignalInputs',
]
