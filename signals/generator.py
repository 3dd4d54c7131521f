"""Rule engine turning model outputs and regime into trading signals"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from models import Signal, Trend, VolatilityRegime

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignalInputs:
    """Everything the rules look at for one analysis run"""
    regime: VolatilityRegime
    realized_volatility: float
    har_forecast_daily: float
    bollinger_width: float
    historical_avg_width: float
    trend: Trend = Trend.UNKNOWN


class SignalGenerator:
    """Evaluates a fixed, ordered rule set; every rule may fire independently"""

    def __init__(self, breakout_multiple: float = 1.5, divergence_threshold: float = 0.2):
        self.breakout_multiple = breakout_multiple
        self.divergence_threshold = divergence_threshold
        self.rules = (
            self._mean_reversion,
            self._low_vol_trend,
            self._volatility_breakout,
            self._har_divergence,
        )

    def _mean_reversion(self, inputs: SignalInputs) -> Optional[Signal]:
        if (inputs.regime == VolatilityRegime.EXTREME
                and inputs.har_forecast_daily < inputs.realized_volatility):
            return Signal(
                type='volatility_mean_reversion',
                action='prepare_to_buy',
                strength=0.8,
                reason='Extreme volatility likely to revert'
            )
        return None

    def _low_vol_trend(self, inputs: SignalInputs) -> Optional[Signal]:
        if inputs.regime == VolatilityRegime.LOW and inputs.trend == Trend.UP:
            return Signal(
                type='low_vol_trend',
                action='buy',
                strength=0.7,
                reason='Uptrend in low volatility environment'
            )
        return None

    def _volatility_breakout(self, inputs: SignalInputs) -> Optional[Signal]:
        if inputs.bollinger_width > inputs.historical_avg_width * self.breakout_multiple:
            return Signal(
                type='volatility_breakout',
                action='wait',
                strength=0.6,
                reason='Potential volatility expansion'
            )
        return None

    def _har_divergence(self, inputs: SignalInputs) -> Optional[Signal]:
        divergence = abs(inputs.har_forecast_daily - inputs.realized_volatility)
        if divergence > inputs.realized_volatility * self.divergence_threshold:
            return Signal(
                type='har_divergence',
                action='hedge',
                strength=0.65,
                reason='HAR model shows significant divergence'
            )
        return None

    def generate(self, inputs: SignalInputs) -> List[Signal]:
        """Signals in rule order"""
        signals = [s for s in (rule(inputs) for rule in self.rules) if s is not None]

        if signals:
            logger.info(
                f"Generated {len(signals)} signal(s) in {inputs.regime.value} regime: "
                + ", ".join(s.type for s in signals)
            )

        return signals
