"""Common data models used across the project."""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import List, Dict, Optional, Any


class VolatilityRegime(str, Enum):
    """Volatility level relative to its own history"""
    LOW = 'low'
    NORMAL = 'normal'
    ELEVATED = 'elevated'
    EXTREME = 'extreme'


class Trend(str, Enum):
    """Price trend from SMA20 vs SMA50"""
    UP = 'up'
    DOWN = 'down'
    SIDEWAYS = 'sideways'
    UNKNOWN = 'unknown'


@dataclass(frozen=True)
class PriceBar:
    """Daily OHLCV bar"""
    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float


@dataclass(frozen=True)
class HARModelParams:
    """Data class for fitted HAR model coefficients"""
    intercept: float
    daily_coef: float
    weekly_coef: float
    monthly_coef: float
    r_squared: float
    mse: float
    n_observations: int = 0


@dataclass(frozen=True)
class VolatilityIndicatorSnapshot:
    """One set of volatility measures per analysis run"""
    realized_volatility: float
    har_forecast_daily: float
    har_forecast_weekly: float
    har_forecast_monthly: float
    garch_forecast: float
    atr_14: float
    bollinger_band_width: float
    parkinson_volatility: float
    garman_klass_volatility: float


@dataclass(frozen=True)
class Signal:
    """Discrete trading signal produced by the rule engine"""
    type: str
    action: str
    strength: float  # in [0, 1]
    reason: str


@dataclass(frozen=True)
class MarketSummary:
    """Latest price context; changes are in percent"""
    last_close: float
    change_1d: float
    change_5d: Optional[float]
    volume: float


@dataclass(frozen=True)
class AnalysisResult:
    """Self-contained output of one analysis run"""
    symbol: str
    timestamp: datetime
    indicators: VolatilityIndicatorSnapshot
    har_model: HARModelParams
    regime: VolatilityRegime
    trend: Trend
    signals: List[Signal] = field(default_factory=list)
    market_summary: Optional[MarketSummary] = None

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict with enum values flattened to strings"""
        return {
            'symbol': self.symbol,
            'timestamp': self.timestamp,
            'volatility_indicators': asdict(self.indicators),
            'har_model': asdict(self.har_model),
            'volatility_regime': self.regime.value,
            'trend': self.trend.value,
            'signals': [asdict(s) for s in self.signals],
            'market_summary': asdict(self.market_summary) if self.market_summary else None,
        }
