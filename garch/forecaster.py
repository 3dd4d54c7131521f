from typing import Optional, Sequence
import logging

import numpy as np

from config.model_config import GARCHParams
from exceptions import ModelUnavailable

logger = logging.getLogger(__name__)


class GARCHForecaster:
    """
    One-step GARCH(1,1) volatility forecast with fixed coefficients

    This is an approximation, not a fitted model: omega, alpha and beta
    default to 1e-6, 0.08 and 0.90 and are never estimated here. Pass
    params from GARCHEstimator to use fitted values instead.
    """

    def __init__(self, params: Optional[GARCHParams] = None, min_returns: int = 30):
        """
        Initialize forecaster

        Args:
            params: GARCH coefficients, fixed defaults if None
            min_returns: Returns required before a forecast is produced
        """
        self.params = params or GARCHParams()
        self.min_returns = min_returns
        self.logger = logging.getLogger('garch.forecaster')

    def forecast(self, returns: Sequence[float], current_volatility: float) -> float:
        """
        sqrt(omega + alpha * r_last^2 + beta * sigma^2)

        Args:
            returns: Historical returns, most recent last
            current_volatility: Current volatility estimate sigma

        Raises:
            ModelUnavailable: fewer than min_returns returns
        """
        returns = np.asarray(returns, dtype=float)
        if len(returns) < self.min_returns:
            raise ModelUnavailable(
                f"GARCH forecast needs {self.min_returns} returns, got {len(returns)}"
            )
        if not np.isfinite(current_volatility) or current_volatility < 0:
            raise ModelUnavailable(f"Invalid current volatility: {current_volatility}")

        shock = returns[-1] ** 2
        variance = (
            self.params.omega
            + self.params.alpha * shock
            + self.params.beta * current_volatility ** 2
        )

        self.logger.debug(
            f"GARCH forecast: last return={returns[-1]:.6f}, "
            f"sigma={current_volatility:.6f}, variance={variance:.6e}"
        )

        return float(np.sqrt(variance))
