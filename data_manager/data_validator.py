"""
Data validation for daily OHLCV price bars.
"""

import math
from typing import List, Sequence, Tuple

import pandas as pd

from models import PriceBar


class DataValidator:
    """Validates price bars before they enter the analysis pipeline."""

    def __init__(self, max_price: float = 1_000_000):
        # Define reasonable bounds for data validation
        self.validation_bounds = {
            'price': {'min': 0, 'max': max_price},
            'volume': {'min': 0, 'max': math.inf},
        }

    def validate_bars(self, bars: Sequence[PriceBar]) -> Tuple[bool, List[str]]:
        """
        Validates an ordered bar series.

        Args:
            bars: PriceBars expected in ascending timestamp order

        Returns:
            Tuple of (is_valid, list_of_issues)
        """
        issues = []

        for i, bar in enumerate(bars):
            issues.extend(self._validate_bar(bar, i))

        issues.extend(self._validate_ordering(bars))

        return len(issues) == 0, issues

    def _validate_bar(self, bar: PriceBar, index: int) -> List[str]:
        """Validates a single bar's values and OHLC consistency."""
        issues = []
        prices = {'open': bar.open, 'high': bar.high, 'low': bar.low, 'close': bar.close}

        for name, value in {**prices, 'volume': bar.volume}.items():
            if value is None or not math.isfinite(value):
                issues.append(f"Bar {index} ({bar.timestamp}): {name} is not finite")

        if issues:
            return issues

        bounds = self.validation_bounds['price']
        for name, value in prices.items():
            if not bounds['min'] <= value <= bounds['max']:
                issues.append(
                    f"Bar {index} ({bar.timestamp}): {name}={value} outside "
                    f"[{bounds['min']}, {bounds['max']}]"
                )

        if bar.volume < self.validation_bounds['volume']['min']:
            issues.append(f"Bar {index} ({bar.timestamp}): negative volume {bar.volume}")

        if bar.high < bar.low:
            issues.append(f"Bar {index} ({bar.timestamp}): high {bar.high} below low {bar.low}")
        else:
            for name in ('open', 'close'):
                if not bar.low <= prices[name] <= bar.high:
                    issues.append(
                        f"Bar {index} ({bar.timestamp}): {name} {prices[name]} outside "
                        f"[{bar.low}, {bar.high}]"
                    )

        return issues

    def _validate_ordering(self, bars: Sequence[PriceBar]) -> List[str]:
        """Checks timestamps are strictly ascending."""
        issues = []
        timestamps = pd.to_datetime([bar.timestamp for bar in bars])

        for i in range(1, len(timestamps)):
            if timestamps[i] <= timestamps[i - 1]:
                issues.append(
                    f"Bar {i}: timestamp {timestamps[i]} not after {timestamps[i - 1]}"
                )

        return issues
