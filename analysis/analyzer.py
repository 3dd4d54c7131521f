"""
Volatility analysis pipeline.
Turns an ordered price-bar series into a snapshot, HAR fit, regime and signals.
Pure computation: persistence is the caller's job (see data_manager.database).
"""

import logging
from datetime import datetime
from typing import Optional, Sequence, Tuple

import numpy as np

from config.model_config import AnalysisConfig
from exceptions import InsufficientData, ModelUnavailable, SingularMatrix
from garch.forecaster import GARCHForecaster
from models import (
    AnalysisResult, HARModelParams, MarketSummary, PriceBar, VolatilityIndicatorSnapshot
)
from regression.har import HARModel
from signals.generator import SignalGenerator, SignalInputs
from signals.regime import identify_volatility_regime
from signals.trend import calculate_trend
from volatility.estimators import calculate_garman_klass_volatility, calculate_parkinson_volatility
from volatility.indicators import (
    calculate_atr, calculate_bollinger_band_width, calculate_historical_average_width
)
from volatility.returns import (
    calculate_realized_volatility, calculate_returns, calculate_rolling_volatilities
)

logger = logging.getLogger(__name__)


def _ohlc_arrays(bars: Sequence[PriceBar]) -> Tuple[np.ndarray, ...]:
    return tuple(
        np.array([getattr(bar, name) for bar in bars], dtype=float)
        for name in ('open', 'high', 'low', 'close', 'volume')
    )


def calculate_market_summary(closes: np.ndarray, volume: float) -> MarketSummary:
    """Last close with 1- and 5-session percent changes"""
    if len(closes) < 2:
        raise InsufficientData(f"Need at least 2 closes for a market summary, got {len(closes)}")

    change_5d = None
    if len(closes) >= 6:
        change_5d = float((closes[-1] - closes[-6]) / closes[-6] * 100)

    return MarketSummary(
        last_close=float(closes[-1]),
        change_1d=float((closes[-1] - closes[-2]) / closes[-2] * 100),
        change_5d=change_5d,
        volume=float(volume)
    )


class VolatilityAnalyzer:
    """Runs one self-contained analysis per call; holds configuration only"""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()
        self.har_model = HARModel(
            weekly_window=self.config.weekly_window,
            monthly_window=self.config.monthly_window
        )
        self.garch = GARCHForecaster(
            params=self.config.garch_params,
            min_returns=self.config.garch_min_returns
        )
        self.signal_generator = SignalGenerator(
            breakout_multiple=self.config.breakout_multiple,
            divergence_threshold=self.config.divergence_threshold
        )
        self.logger = logging.getLogger('analysis.analyzer')

    def _window(self, bars: Sequence[PriceBar]) -> Sequence[PriceBar]:
        if len(bars) < self.config.required_bars:
            raise InsufficientData(
                f"Insufficient data for volatility analysis: {len(bars)} < {self.config.required_bars} bars"
            )
        return list(bars)[-self.config.lookback:]

    def rolling_volatilities(self, bars: Sequence[PriceBar]) -> np.ndarray:
        """Daily rolling realized volatility over the analysis window"""
        closes = np.array([bar.close for bar in self._window(bars)], dtype=float)
        returns = calculate_returns(closes, self.config.return_type)
        return calculate_rolling_volatilities(returns, self.config.rolling_window)

    def _fit_har(self, rolling_vols: np.ndarray) -> Tuple[HARModelParams, Tuple[float, float, float]]:
        try:
            params = self.har_model.fit(rolling_vols)
            return params, self.har_model.forecast_horizons(params, rolling_vols)
        except (InsufficientData, SingularMatrix) as e:
            raise ModelUnavailable(f"HAR model unavailable: {str(e)}") from e

    def analyze(self, bars: Sequence[PriceBar], symbol: str = 'SPY',
                timestamp: Optional[datetime] = None) -> AnalysisResult:
        """
        Full analysis of a bar series

        Args:
            bars: PriceBars ordered ascending by timestamp
            symbol: Instrument identifier carried into the result
            timestamp: Logical time of the snapshot, defaults to the last bar's

        Returns:
            AnalysisResult with every field populated

        Raises:
            InsufficientData, ModelUnavailable, DomainError: first failure
                encountered; no partial result is returned
        """
        try:
            window = self._window(bars)
            opens, highs, lows, closes, volumes = _ohlc_arrays(window)
            cfg = self.config

            returns = calculate_returns(closes, cfg.return_type)
            realized_vol = calculate_realized_volatility(returns, cfg.annualization_factor)
            parkinson_vol = calculate_parkinson_volatility(highs, lows, cfg.annualization_factor)
            garman_klass_vol = calculate_garman_klass_volatility(
                opens, highs, lows, closes, cfg.annualization_factor
            )
            atr = calculate_atr(highs, lows, closes, cfg.atr_period)
            bollinger_width = calculate_bollinger_band_width(
                closes, cfg.bollinger_period, cfg.bollinger_std
            )
            avg_width = calculate_historical_average_width(
                closes, cfg.bollinger_period, cfg.bollinger_std, cfg.default_avg_width
            )

            try:
                rolling_vols = calculate_rolling_volatilities(returns, cfg.rolling_window)
            except InsufficientData as e:
                raise ModelUnavailable(f"HAR model unavailable: {str(e)}") from e

            # Rolling series is in daily units; regime, GARCH and signals compare against it
            current_vol = float(rolling_vols[-1])

            har_params, (har_daily, har_weekly, har_monthly) = self._fit_har(rolling_vols)
            garch_forecast = self.garch.forecast(returns, current_vol)
            regime = identify_volatility_regime(current_vol, rolling_vols)
            trend = calculate_trend(closes)

            signals = self.signal_generator.generate(SignalInputs(
                regime=regime,
                realized_volatility=current_vol,
                har_forecast_daily=har_daily,
                bollinger_width=bollinger_width,
                historical_avg_width=avg_width,
                trend=trend
            ))

            snapshot = VolatilityIndicatorSnapshot(
                realized_volatility=realized_vol,
                har_forecast_daily=har_daily,
                har_forecast_weekly=har_weekly,
                har_forecast_monthly=har_monthly,
                garch_forecast=garch_forecast,
                atr_14=atr,
                bollinger_band_width=bollinger_width,
                parkinson_volatility=parkinson_vol,
                garman_klass_volatility=garman_klass_vol
            )

            result = AnalysisResult(
                symbol=symbol,
                timestamp=timestamp or window[-1].timestamp,
                indicators=snapshot,
                har_model=har_params,
                regime=regime,
                trend=trend,
                signals=signals,
                market_summary=calculate_market_summary(closes, volumes[-1])
            )

            self.logger.info(
                f"Analysis for {symbol} at {result.timestamp}:\n"
                f"  Bars:              {len(window)}\n"
                f"  Realized vol:      {realized_vol:.4f}\n"
                f"  HAR daily:         {har_daily:.6f}\n"
                f"  GARCH:             {garch_forecast:.6f}\n"
                f"  Regime:            {regime.value}\n"
                f"  Trend:             {trend.value}\n"
                f"  Signals:           {len(signals)}"
            )

            return result

        except Exception as e:
            self.logger.error(f"Error analyzing {symbol}: {str(e)}")
            raise
