"""
Synthetic daily bars for demos and tests.
"""

from datetime import datetime
from typing import List, Optional

import numpy as np
import pandas as pd

from models import PriceBar


def generate_sample_bars(n_days: int = 252,
                         start_price: float = 450.0,
                         daily_vol: float = 0.01,
                         drift: float = 0.0002,
                         seed: Optional[int] = 42,
                         end_date: Optional[datetime] = None) -> List[PriceBar]:
    """
    Random-walk OHLCV bars on business days

    Closes follow a lognormal walk; open, high and low are drawn around
    consecutive closes so every bar satisfies low <= open, close <= high.
    """
    random_state = np.random.RandomState(seed)
    end_date = end_date or datetime(2024, 12, 31)
    dates = pd.bdate_range(end=end_date, periods=n_days)

    log_returns = random_state.normal(drift, daily_vol, n_days)
    closes = start_price * np.exp(np.cumsum(log_returns))
    opens = np.concatenate([[start_price], closes[:-1]]) * (
        1 + random_state.normal(0, daily_vol / 4, n_days)
    )

    # Intraday range extends beyond the open-close body
    wicks = np.abs(random_state.normal(0, daily_vol / 2, (2, n_days)))
    highs = np.maximum(opens, closes) * (1 + wicks[0])
    lows = np.minimum(opens, closes) * (1 - wicks[1])
    volumes = random_state.randint(50_000_000, 150_000_000, n_days)

    return [
        PriceBar(
            timestamp=date.to_pydatetime(),
            open=round(float(o), 2),
            high=round(float(h), 2),
            low=round(float(l), 2),
            close=round(float(c), 2),
            volume=float(v)
        )
        for date, o, h, l, c, v in zip(dates, opens, highs, lows, closes, volumes)
    ]
