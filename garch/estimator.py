from typing import Dict, Sequence
import logging

import numpy as np
from arch import arch_model

from config.model_config import GARCHParams
from exceptions import InsufficientData, ModelUnavailable

logger = logging.getLogger(__name__)


class GARCHEstimator:
    """Maximum likelihood GARCH(1,1) parameter estimation with arch"""

    def __init__(self, min_observations: int = 250, distribution: str = 'normal'):
        """
        Initialize estimator

        Args:
            min_observations: Minimum number of daily returns required (~1 year)
            distribution: Innovation distribution passed to arch ('normal', 'studentst')
        """
        self.min_observations = min_observations
        self.distribution = distribution
        self.logger = logging.getLogger('garch.estimator')

    def _validate_params(self, params: Dict[str, float]) -> bool:
        """Check positivity and covariance stationarity"""
        omega = params.get('omega', 0)
        alpha = params.get('alpha[1]', 0)
        beta = params.get('beta[1]', 0)

        if omega <= 0 or alpha < 0 or beta < 0:
            self.logger.warning(
                f"Non-positive GARCH parameters: omega={omega:.3e}, alpha={alpha:.4f}, beta={beta:.4f}"
            )
            return False

        if alpha + beta >= 1:
            self.logger.warning(f"Non-stationary persistence {alpha + beta:.4f}")
            return False

        return True

    def estimate(self, returns: Sequence[float]) -> GARCHParams:
        """
        Fit GARCH(1,1) to decimal daily returns

        Returns are scaled to percent for the optimizer; omega is scaled back
        so the result plugs directly into GARCHForecaster.

        Raises:
            InsufficientData: fewer than min_observations returns
            ModelUnavailable: optimizer output fails validation
        """
        returns = np.asarray(returns, dtype=float)
        if len(returns) < self.min_observations:
            raise InsufficientData(
                f"Insufficient observations: {len(returns)} < {self.min_observations}"
            )
        if np.any(~np.isfinite(returns)):
            raise ValueError("Input returns contain missing values")

        model = arch_model(
            returns * 100,
            mean='constant',
            vol='GARCH',
            p=1,
            q=1,
            dist=self.distribution,
            rescale=False
        )

        try:
            result = model.fit(disp='off', show_warning=False, options={'maxiter': 1000})
        except Exception as e:
            self.logger.error(f"Error fitting GARCH(1,1): {str(e)}")
            raise ModelUnavailable(f"GARCH estimation failed: {str(e)}") from e

        params = dict(result.params)
        if not self._validate_params(params):
            raise ModelUnavailable("GARCH estimation produced invalid parameters")

        estimated = GARCHParams(
            omega=float(params['omega']) / 100 ** 2,
            alpha=float(params['alpha[1]']),
            beta=float(params['beta[1]'])
        )

        self.logger.info(
            f"Estimated GARCH(1,1) on {len(returns)} returns:\n"
            f"  omega: {estimated.omega:.3e}\n"
            f"  alpha: {estimated.alpha:.4f}\n"
            f"  beta:  {estimated.beta:.4f}\n"
            f"  persistence: {estimated.persistence:.4f}"
        )

        return estimated
