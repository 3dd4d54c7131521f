"""Model and signal parameters for the analysis pipeline."""

from dataclasses import dataclass, field

# Intercept plus daily, weekly and monthly components
HAR_COEFFICIENTS = 4


@dataclass(frozen=True)
class GARCHParams:
    """GARCH(1,1) coefficients"""
    omega: float = 1e-6   # long-run variance weight
    alpha: float = 0.08   # shock weight
    beta: float = 0.90    # persistence weight

    @property
    def persistence(self) -> float:
        return self.alpha + self.beta


@dataclass(frozen=True)
class AnalysisConfig:
    """
    Parameters for a single analysis run

    Args:
        annualization_factor: Trading days per year used to annualize
        rolling_window: Returns per realized volatility window fed to HAR
        weekly_window: HAR weekly component length
        monthly_window: HAR monthly component length
        atr_period: ATR smoothing period
        bollinger_period: Closes per Bollinger window
        bollinger_std: Band width in standard deviations
        garch_params: Fixed GARCH coefficients
        garch_min_returns: Returns required before forecasting GARCH
        breakout_multiple: Width multiple over history that flags a breakout
        divergence_threshold: Relative HAR vs realized gap that flags divergence
        default_avg_width: Historical width used when history is too short
        return_type: 'log' or 'simple'
        min_bars: Floor on bars per analysis; raised to the HAR requirement
            when the windows need more (see required_bars)
        lookback: Most recent bars used per analysis
    """
    annualization_factor: int = 252
    rolling_window: int = 20
    weekly_window: int = 5
    monthly_window: int = 22
    atr_period: int = 14
    bollinger_period: int = 20
    bollinger_std: float = 2.0
    garch_params: GARCHParams = field(default_factory=GARCHParams)
    garch_min_returns: int = 30
    breakout_multiple: float = 1.5
    divergence_threshold: float = 0.2
    default_avg_width: float = 0.1
    return_type: str = 'log'
    min_bars: int = 30
    lookback: int = 252

    @property
    def required_bars(self) -> int:
        """
        Fewest bars a full analysis can complete on

        N bars give N - rolling_window rolling volatilities and
        N - rolling_window - monthly_window HAR rows, which must cover the
        four HAR coefficients.
        """
        return max(self.min_bars, self.rolling_window + self.monthly_window + HAR_COEFFICIENTS)

    def __post_init__(self):
        if self.return_type not in ('log', 'simple'):
            raise ValueError(f"Invalid return type: {self.return_type}. Expected 'log' or 'simple'")
        if self.lookback < self.required_bars:
            raise ValueError(
                f"Lookback {self.lookback} shorter than required bars {self.required_bars}"
            )
