# regression/ols.py
"""Closed-form ordinary least squares used by the HAR fitter"""

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from exceptions import InsufficientData, SingularMatrix

logger = logging.getLogger(__name__)

# XtX with a condition number above this is treated as singular
MAX_CONDITION_NUMBER = 1.0 / np.finfo(float).eps


@dataclass(frozen=True)
class OLSResult:
    """Coefficients and fit quality of one regression"""
    coefficients: np.ndarray
    fitted: np.ndarray
    r_squared: float
    mse: float
    n_observations: int


def _as_design(features: Sequence[Sequence[float]], targets: Sequence[float]):
    X = np.asarray(features, dtype=float)
    y = np.asarray(targets, dtype=float)
    if X.ndim != 2:
        raise ValueError(f"Design matrix must be 2-dimensional, got shape {X.shape}")
    if y.ndim != 1 or len(y) != X.shape[0]:
        raise ValueError(
            f"Target length {len(y)} does not match {X.shape[0]} design rows"
        )
    return X, y


def ordinary_least_squares(features: Sequence[Sequence[float]],
                           targets: Sequence[float]) -> np.ndarray:
    """
    Solve beta = (X'X)^-1 X'y

    Args:
        features: One row per observation, leading 1.0 for the intercept
        targets: One value per row

    Returns:
        Coefficient vector with one entry per feature column

    Raises:
        InsufficientData: fewer observations than features
        SingularMatrix: X'X not invertible
    """
    X, y = _as_design(features, targets)
    n_obs, n_features = X.shape

    if n_obs < n_features:
        raise InsufficientData(
            f"Insufficient observations for regression: {n_obs} < {n_features} features"
        )

    XtX = X.T @ X
    if np.linalg.matrix_rank(X) < n_features or np.linalg.cond(XtX) > MAX_CONDITION_NUMBER:
        raise SingularMatrix(
            f"Design matrix is singular (rank {np.linalg.matrix_rank(X)} of {n_features})"
        )

    try:
        XtX_inv = np.linalg.inv(XtX)
    except np.linalg.LinAlgError as e:
        raise SingularMatrix(f"Could not invert X'X: {str(e)}") from e

    return XtX_inv @ (X.T @ y)


def predict(features: Sequence[Sequence[float]], coefficients: np.ndarray) -> np.ndarray:
    """Fitted values X @ beta"""
    return np.asarray(features, dtype=float) @ np.asarray(coefficients, dtype=float)


def r_squared(actual: Sequence[float], predicted: Sequence[float]) -> float:
    """1 - RSS/TSS around the mean of actual"""
    actual = np.asarray(actual, dtype=float)
    predicted = np.asarray(predicted, dtype=float)

    total_ss = np.sum((actual - actual.mean()) ** 2)
    residual_ss = np.sum((actual - predicted) ** 2)

    # Constant target: a perfect fit explains everything, anything else explains nothing
    if total_ss == 0:
        return 1.0 if residual_ss == 0 else 0.0

    return float(1.0 - residual_ss / total_ss)


def mean_squared_error(actual: Sequence[float], predicted: Sequence[float]) -> float:
    actual = np.asarray(actual, dtype=float)
    predicted = np.asarray(predicted, dtype=float)
    return float(np.mean((predicted - actual) ** 2))


def fit_ols(features: Sequence[Sequence[float]], targets: Sequence[float]) -> OLSResult:
    """Estimate coefficients and report R-squared and MSE"""
    X, y = _as_design(features, targets)
    coefficients = ordinary_least_squares(X, y)
    fitted = predict(X, coefficients)

    result = OLSResult(
        coefficients=coefficients,
        fitted=fitted,
        r_squared=r_squared(y, fitted),
        mse=mean_squared_error(y, fitted),
        n_observations=len(y)
    )

    logger.debug(
        f"OLS fit: n={result.n_observations}, k={len(coefficients)}, "
        f"R2={result.r_squared:.4f}, MSE={result.mse:.3e}"
    )

    return result
