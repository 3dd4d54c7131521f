"""Price-range indicators: ATR and Bollinger band width"""

import logging
from typing import Sequence

import numpy as np
import pandas as pd

from exceptions import InsufficientData, DomainError

logger = logging.getLogger(__name__)

# SMA magnitude below which band width is undefined
MIN_SMA = 1e-12


def calculate_ema(values: Sequence[float], period: int) -> float:
    """EMA with multiplier 2/(period+1), seeded with the first value"""
    values = np.asarray(values, dtype=float)
    if len(values) == 0:
        raise InsufficientData("Cannot compute EMA of an empty series")

    multiplier = 2.0 / (period + 1)
    ema = values[0]
    for value in values[1:]:
        ema = (value - ema) * multiplier + ema
    return float(ema)


def calculate_true_ranges(high: Sequence[float], low: Sequence[float],
                          close: Sequence[float]) -> np.ndarray:
    """max(H-L, |H-prevC|, |L-prevC|) for bars 1..N-1"""
    high, low, close = (np.asarray(a, dtype=float) for a in (high, low, close))
    if not (len(high) == len(low) == len(close)):
        raise ValueError("High/low/close lengths must match")

    prev_close = close[:-1]
    return np.maximum.reduce([
        high[1:] - low[1:],
        np.abs(high[1:] - prev_close),
        np.abs(low[1:] - prev_close),
    ])


def calculate_atr(high: Sequence[float], low: Sequence[float],
                  close: Sequence[float], period: int = 14) -> float:
    """Average true range in price units"""
    if len(high) < period + 1:
        raise InsufficientData(f"Insufficient bars for ATR({period}): {len(high)} < {period + 1}")

    return calculate_ema(calculate_true_ranges(high, low, close), period)


def calculate_bollinger_band_width(prices: Sequence[float], period: int = 20,
                                   num_std: float = 2.0) -> float:
    """
    (upper - lower) / SMA over the trailing period closes

    With num_std=2 this is 4 * sigma / SMA (population sigma).
    """
    prices = np.asarray(prices, dtype=float)
    if len(prices) < period:
        raise InsufficientData(f"Insufficient closes for Bollinger width: {len(prices)} < {period}")

    window = prices[-period:]
    sma = window.mean()
    if abs(sma) < MIN_SMA:
        raise DomainError(f"SMA too close to zero for Bollinger width: {sma:.3e}")

    std = window.std()
    upper_band = sma + num_std * std
    lower_band = sma - num_std * std
    return float((upper_band - lower_band) / sma)


def calculate_rolling_bollinger_widths(prices: Sequence[float], period: int = 20,
                                       num_std: float = 2.0) -> pd.Series:
    """Bollinger width for every full trailing window"""
    closes = pd.Series(np.asarray(prices, dtype=float))
    if len(closes) < period:
        raise InsufficientData(f"Insufficient closes for Bollinger width: {len(closes)} < {period}")

    rolling = closes.rolling(window=period)
    sma = rolling.mean()
    if (sma.dropna().abs() < MIN_SMA).any():
        raise DomainError("SMA too close to zero for Bollinger width")

    std = rolling.std(ddof=0)
    widths = (2 * num_std * std / sma).dropna()
    return widths.reset_index(drop=True)


def calculate_historical_average_width(prices: Sequence[float], period: int = 20,
                                       num_std: float = 2.0,
                                       default: float = 0.1) -> float:
    """Mean rolling Bollinger width, or default when history is too short"""
    if len(prices) < period:
        logger.info(
            f"Only {len(prices)} closes for average Bollinger width, using default {default}"
        )
        return default

    return float(calculate_rolling_bollinger_widths(prices, period, num_std).mean())
