"""
Return series and close-to-close realized volatility.
"""

import logging
from typing import Sequence

import numpy as np

from exceptions import InsufficientData, DomainError

logger = logging.getLogger(__name__)

TRADING_DAYS = 252


def calculate_returns(prices: Sequence[float], return_type: str = 'simple') -> np.ndarray:
    """
    Per-period returns from consecutive closes

    Args:
        prices: Closes ordered ascending in time
        return_type: 'simple' for (p1 - p0) / p0, 'log' for ln(p1 / p0)

    Returns:
        Array of length len(prices) - 1
    """
    prices = np.asarray(prices, dtype=float)
    if len(prices) < 2:
        raise InsufficientData(f"Need at least 2 prices for returns, got {len(prices)}")
    if np.any(prices[:-1] == 0):
        raise DomainError("Zero price found, returns are undefined")

    if return_type == 'log':
        if np.any(prices <= 0):
            raise DomainError("Log returns require strictly positive prices")
        return np.log(prices[1:] / prices[:-1])
    if return_type == 'simple':
        return (prices[1:] - prices[:-1]) / prices[:-1]

    raise ValueError(f"Invalid return type: {return_type}. Expected 'simple' or 'log'")


def calculate_realized_volatility(returns: Sequence[float],
                                  annualization_factor: float = TRADING_DAYS) -> float:
    """Population standard deviation of returns scaled by sqrt(annualization_factor)"""
    returns = np.asarray(returns, dtype=float)
    if len(returns) < 2:
        raise InsufficientData(
            f"Need at least 2 returns for realized volatility, got {len(returns)}"
        )

    return float(np.std(returns) * np.sqrt(annualization_factor))


def calculate_rolling_volatilities(returns: Sequence[float], window: int = 20) -> np.ndarray:
    """
    Daily realized volatility over a trailing window slid one step at a time

    Returns:
        Array of length len(returns) - window + 1, unannualized
    """
    returns = np.asarray(returns, dtype=float)
    if window < 2:
        raise ValueError(f"Rolling window must be at least 2, got {window}")
    if len(returns) < window:
        raise InsufficientData(
            f"Insufficient returns for rolling volatility: {len(returns)} < {window}"
        )

    windows = np.lib.stride_tricks.sliding_window_view(returns, window)
    return np.std(windows, axis=1)
