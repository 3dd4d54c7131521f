"""Price trend from short and long simple moving averages"""

from typing import Sequence

import numpy as np

from models import Trend


def calculate_trend(prices: Sequence[float], short_period: int = 20,
                    long_period: int = 50) -> Trend:
    """
    Classify the trend of a close series

    up: last > SMA20 > SMA50; down: last < SMA20 < SMA50; otherwise sideways.
    With fewer than long_period closes SMA50 falls back to SMA20, and with
    fewer than short_period closes the trend is unknown.
    """
    prices = np.asarray(prices, dtype=float)
    if len(prices) < short_period:
        return Trend.UNKNOWN

    sma_short = prices[-short_period:].mean()
    sma_long = prices[-long_period:].mean() if len(prices) >= long_period else sma_short
    current_price = prices[-1]

    if current_price > sma_short > sma_long:
        return Trend.UP
    if current_price < sma_short < sma_long:
        return Trend.DOWN
    return Trend.SIDEWAYS
