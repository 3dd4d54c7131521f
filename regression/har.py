# regression/har.py
"""Heterogeneous autoregressive (HAR) volatility model"""

import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from exceptions import InsufficientData, ModelUnavailable
from models import HARModelParams
from .ols import fit_ols

logger = logging.getLogger(__name__)

N_FEATURES = 4  # intercept, daily, weekly, monthly


class HARModel:
    """Fits and forecasts the 3-factor HAR model on a rolling volatility series"""

    def __init__(self, weekly_window: int = 5, monthly_window: int = 22):
        """
        Initialize model

        Args:
            weekly_window: Observations averaged for the weekly component
            monthly_window: Observations averaged for the monthly component,
                also the minimum series length for fitting and forecasting
        """
        if not 1 < weekly_window < monthly_window:
            raise ValueError(
                f"Expected 1 < weekly_window < monthly_window, got {weekly_window}, {monthly_window}"
            )
        self.weekly_window = weekly_window
        self.monthly_window = monthly_window
        self.logger = logging.getLogger('regression.har')

    def _components(self, volatilities: np.ndarray, end: int) -> Tuple[float, float, float]:
        """Daily, weekly and monthly components from values strictly before end"""
        return (
            volatilities[end - 1],
            volatilities[end - self.weekly_window:end].mean(),
            volatilities[end - self.monthly_window:end].mean(),
        )

    def build_features(self, volatilities: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
        """
        Design rows [1, RV_d, RV_w, RV_m] and targets RV[i] for i = monthly_window..end

        Raises:
            InsufficientData: fewer points than one monthly window
        """
        volatilities = np.asarray(volatilities, dtype=float)
        if len(volatilities) < self.monthly_window:
            raise InsufficientData(
                f"Insufficient volatility observations for HAR: "
                f"{len(volatilities)} < {self.monthly_window}"
            )

        features = [
            [1.0, *self._components(volatilities, i)]
            for i in range(self.monthly_window, len(volatilities))
        ]
        targets = volatilities[self.monthly_window:]
        return np.asarray(features, dtype=float).reshape(-1, N_FEATURES), targets

    def fit(self, volatilities: Sequence[float]) -> HARModelParams:
        """
        Fit HAR coefficients by OLS

        Raises:
            InsufficientData: series too short for a monthly window, or fewer
                regression rows than coefficients
            SingularMatrix: components are collinear (e.g. a flat series)
        """
        features, targets = self.build_features(volatilities)
        if len(targets) < N_FEATURES:
            raise InsufficientData(
                f"Insufficient HAR regression rows: {len(targets)} < {N_FEATURES} "
                f"(series length {len(targets) + self.monthly_window})"
            )

        result = fit_ols(features, targets)
        intercept, daily, weekly, monthly = (float(c) for c in result.coefficients)

        params = HARModelParams(
            intercept=intercept,
            daily_coef=daily,
            weekly_coef=weekly,
            monthly_coef=monthly,
            r_squared=result.r_squared,
            mse=result.mse,
            n_observations=result.n_observations
        )

        self.logger.info(
            f"HAR fit on {params.n_observations} observations:\n"
            f"  Intercept: {params.intercept:.6f}\n"
            f"  Daily:     {params.daily_coef:.4f}\n"
            f"  Weekly:    {params.weekly_coef:.4f}\n"
            f"  Monthly:   {params.monthly_coef:.4f}\n"
            f"  R2:        {params.r_squared:.4f}\n"
            f"  MSE:       {params.mse:.3e}"
        )

        return params

    def fitted_values(self, model: HARModelParams, volatilities: Sequence[float]) -> np.ndarray:
        """In-sample predictions aligned with volatilities[monthly_window:]"""
        features, _ = self.build_features(volatilities)
        coefficients = np.array([
            model.intercept, model.daily_coef, model.weekly_coef, model.monthly_coef
        ])
        return features @ coefficients

    def forecast(self, model: Optional[HARModelParams],
                 recent_volatilities: Sequence[float]) -> float:
        """One-step-ahead volatility forecast from the trailing components"""
        if model is None:
            raise ModelUnavailable("No fitted HAR model available for forecasting")

        recent = np.asarray(recent_volatilities, dtype=float)
        if len(recent) < self.monthly_window:
            raise ModelUnavailable(
                f"HAR forecast needs {self.monthly_window} recent observations, got {len(recent)}"
            )

        daily, weekly, monthly = self._components(recent, len(recent))
        return float(
            model.intercept
            + model.daily_coef * daily
            + model.weekly_coef * weekly
            + model.monthly_coef * monthly
        )

    def forecast_horizons(self, model: Optional[HARModelParams],
                          recent_volatilities: Sequence[float]) -> Tuple[float, float, float]:
        """
        Daily, weekly and monthly forecasts

        Weekly and monthly are the daily forecast scaled by sqrt(5) and
        sqrt(22) (square-root-of-time under i.i.d. returns), not separate
        regressions.
        """
        daily = self.forecast(model, recent_volatilities)
        return daily, daily * np.sqrt(5), daily * np.sqrt(22)
