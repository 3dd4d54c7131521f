import sys
import os

# Add project root to Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.append(project_root)

import pytest
import numpy as np
import statsmodels.api as sm

from exceptions import InsufficientData, SingularMatrix
from regression.ols import (
    fit_ols, ordinary_least_squares, r_squared, mean_squared_error, predict
)


@pytest.fixture
def regression_data():
    """Noisy linear data with known coefficients"""
    random_state = np.random.RandomState(7)
    n = 200
    x1 = random_state.normal(0, 1, n)
    x2 = random_state.uniform(-2, 2, n)
    y = 0.5 + 1.5 * x1 - 0.75 * x2 + random_state.normal(0, 0.1, n)
    X = np.column_stack([np.ones(n), x1, x2])
    return X, y


def test_exact_fit_recovers_coefficients():
    """Noise-free data gives the generating coefficients"""
    x = np.arange(10, dtype=float)
    X = np.column_stack([np.ones(10), x])
    y = 2.0 + 3.0 * x

    beta = ordinary_least_squares(X, y)

    np.testing.assert_allclose(beta, [2.0, 3.0], atol=1e-10)


def test_matches_statsmodels(regression_data):
    """Closed form agrees with statsmodels OLS"""
    X, y = regression_data

    result = fit_ols(X, y)
    reference = sm.OLS(y, X).fit()

    np.testing.assert_allclose(result.coefficients, reference.params, rtol=1e-8)
    assert result.r_squared == pytest.approx(reference.rsquared, rel=1e-8)
    assert result.mse == pytest.approx(np.mean(reference.resid ** 2), rel=1e-8)
    assert result.n_observations == len(y)


def test_accepts_nested_lists():
    """Plain Python rows work as a design matrix"""
    features = [[1.0, 0.0], [1.0, 1.0], [1.0, 2.0]]
    targets = [1.0, 3.0, 5.0]

    beta = ordinary_least_squares(features, targets)

    np.testing.assert_allclose(beta, [1.0, 2.0], atol=1e-10)


def test_singular_matrix():
    """Collinear columns raise SingularMatrix instead of returning garbage"""
    x = np.arange(10, dtype=float)
    X = np.column_stack([np.ones(10), x, 2 * x])

    with pytest.raises(SingularMatrix):
        ordinary_least_squares(X, x)


def test_constant_regressor_is_singular():
    """A regressor identical to the intercept column is not identifiable"""
    X = np.column_stack([np.ones(30), np.full(30, 0.01)])

    with pytest.raises(SingularMatrix):
        ordinary_least_squares(X, np.linspace(0, 1, 30))


def test_fewer_observations_than_features():
    X = np.array([[1.0, 2.0, 3.0], [1.0, 4.0, 5.0]])

    with pytest.raises(InsufficientData):
        ordinary_least_squares(X, [1.0, 2.0])


def test_shape_mismatch():
    with pytest.raises(ValueError):
        ordinary_least_squares(np.ones((5, 2)), np.ones(4))


def test_r_squared_and_mse():
    """Quality metrics from hand-computed values"""
    actual = np.array([1.0, 2.0, 3.0, 4.0])
    predicted = np.array([1.0, 2.0, 3.0, 5.0])

    # TSS = 5, RSS = 1
    assert r_squared(actual, predicted) == pytest.approx(0.8)
    assert mean_squared_error(actual, predicted) == pytest.approx(0.25)
    assert r_squared(actual, actual) == pytest.approx(1.0)


def test_r_squared_constant_target():
    """Constant target has zero total variation"""
    actual = np.full(5, 2.0)

    assert r_squared(actual, actual) == 1.0
    assert r_squared(actual, actual + 0.1) == 0.0


def test_fitted_values(regression_data):
    X, y = regression_data
    result = fit_ols(X, y)

    np.testing.assert_allclose(result.fitted, predict(X, result.coefficients))
