"""Quantile-based volatility regime classification"""

import logging
from typing import Dict, Sequence

import numpy as np

from exceptions import InsufficientData
from models import VolatilityRegime

logger = logging.getLogger(__name__)

REGIME_PERCENTILES = (25, 75, 90)

# Risk score stored alongside signals, by regime
RISK_SCORES = {
    VolatilityRegime.LOW: 30,
    VolatilityRegime.NORMAL: 50,
    VolatilityRegime.ELEVATED: 70,
    VolatilityRegime.EXTREME: 90,
}


def calculate_regime_thresholds(historical_vols: Sequence[float]) -> Dict[str, float]:
    """
    P25, P75 and P90 of the reference set

    Uses linear interpolation between order statistics (numpy's 'linear'
    method), so {1..100} gives P25=25.75, P75=75.25, P90=90.1.
    """
    reference = np.asarray(historical_vols, dtype=float)
    if len(reference) == 0:
        raise InsufficientData("Empty reference set for regime classification")
    if np.any(~np.isfinite(reference)):
        raise ValueError("Reference volatilities contain missing values")

    p25, p75, p90 = np.percentile(reference, REGIME_PERCENTILES, method='linear')
    return {'p25': float(p25), 'p75': float(p75), 'p90': float(p90)}


def identify_volatility_regime(current_vol: float,
                               historical_vols: Sequence[float]) -> VolatilityRegime:
    """Bucket current_vol: <P25 low, <P75 normal, <P90 elevated, else extreme"""
    thresholds = calculate_regime_thresholds(historical_vols)

    if current_vol < thresholds['p25']:
        return VolatilityRegime.LOW
    if current_vol < thresholds['p75']:
        return VolatilityRegime.NORMAL
    if current_vol < thresholds['p90']:
        return VolatilityRegime.ELEVATED
    return VolatilityRegime.EXTREME


def risk_score(regime: VolatilityRegime) -> int:
    return RISK_SCORES[VolatilityRegime(regime)]
