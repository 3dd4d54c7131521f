"""
Range-based volatility estimators using daily high/low (and open/close).
"""

import logging
from typing import Sequence

import numpy as np

from exceptions import InsufficientData, DomainError
from .returns import TRADING_DAYS

logger = logging.getLogger(__name__)

# 2 ln2 - 1, weight on the open-to-close term in Garman-Klass
GK_CLOSE_WEIGHT = 2 * np.log(2) - 1


def _log_ratio(numerator: np.ndarray, denominator: np.ndarray, name: str) -> np.ndarray:
    if np.any(numerator <= 0) or np.any(denominator <= 0):
        raise DomainError(f"{name} requires strictly positive prices")
    return np.log(numerator / denominator)


def calculate_parkinson_volatility(high: Sequence[float], low: Sequence[float],
                                   n: float = TRADING_DAYS) -> float:
    """sqrt(mean(ln(H/L)^2) / (4 ln2)) * sqrt(n)"""
    high = np.asarray(high, dtype=float)
    low = np.asarray(low, dtype=float)
    if len(high) != len(low):
        raise ValueError(f"High/low length mismatch: {len(high)} vs {len(low)}")
    if len(high) < 2:
        raise InsufficientData(f"Need at least 2 bars for Parkinson volatility, got {len(high)}")

    ratios = _log_ratio(high, low, "Parkinson volatility")
    return float(np.sqrt(np.mean(ratios ** 2) / (4 * np.log(2))) * np.sqrt(n))


def calculate_garman_klass_volatility(open_: Sequence[float], high: Sequence[float],
                                      low: Sequence[float], close: Sequence[float],
                                      n: float = TRADING_DAYS) -> float:
    """
    Garman-Klass estimator over bars 1..N-1

    Per-bar term is 0.5 * ln(H/L)^2 - (2 ln2 - 1) * ln(C/O)^2; the result is
    sqrt(mean(term)) * sqrt(n).

    Raises:
        DomainError: the mean term is negative, which happens when bars have
            open-to-close moves large relative to their high-low range
    """
    open_, high, low, close = (np.asarray(a, dtype=float) for a in (open_, high, low, close))
    if not (len(open_) == len(high) == len(low) == len(close)):
        raise ValueError("Open/high/low/close lengths must match")
    if len(open_) < 2:
        raise InsufficientData(f"Need at least 2 bars for Garman-Klass volatility, got {len(open_)}")

    u = _log_ratio(high[1:], low[1:], "Garman-Klass volatility")
    c = _log_ratio(close[1:], open_[1:], "Garman-Klass volatility")

    mean_term = np.mean(0.5 * u ** 2 - GK_CLOSE_WEIGHT * c ** 2)
    if mean_term < 0:
        raise DomainError(f"Garman-Klass mean term is negative: {mean_term:.3e}")

    return float(np.sqrt(mean_term) * np.sqrt(n))
