import sys
import os

# Add project root to Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.append(project_root)

import pytest
import numpy as np

from exceptions import InsufficientData, ModelUnavailable, SingularMatrix
from models import HARModelParams
from regression.har import HARModel


@pytest.fixture
def har_model():
    return HARModel()


@pytest.fixture
def volatility_series():
    """Noisy positive daily volatility series"""
    random_state = np.random.RandomState(42)
    return random_state.uniform(0.005, 0.02, 30)


@pytest.fixture
def persistent_series():
    """AR(1)-like volatility series long enough for a stable fit"""
    random_state = np.random.RandomState(0)
    vols = [0.01]
    for _ in range(299):
        vols.append(0.002 + 0.8 * vols[-1] + random_state.normal(0, 0.0005))
    return np.abs(np.array(vols))


@pytest.fixture
def fixed_model():
    return HARModelParams(
        intercept=0.001,
        daily_coef=0.5,
        weekly_coef=0.3,
        monthly_coef=0.1,
        r_squared=0.5,
        mse=1e-6
    )


def test_fit_rejects_short_series(har_model):
    """21 points cannot fill one monthly window"""
    with pytest.raises(InsufficientData):
        har_model.fit(np.linspace(0.01, 0.02, 21))


def test_fit_rejects_too_few_regression_rows(har_model):
    """
    22 points leave no regression rows

    Rows start at index monthly_window, so exactly 22 points cannot be fit
    even though they fill one monthly window. The fit needs 22 + 4 points.
    """
    with pytest.raises(InsufficientData):
        har_model.fit(np.linspace(0.01, 0.02, 22))


def test_fit_succeeds_at_smallest_length(har_model):
    """26 points give exactly one regression row per coefficient"""
    random_state = np.random.RandomState(3)

    params = har_model.fit(random_state.uniform(0.005, 0.02, 26))

    assert params.n_observations == 4


def test_fit_succeeds_on_short_noisy_series(har_model, volatility_series):
    params = har_model.fit(volatility_series)

    assert params.n_observations == len(volatility_series) - 22
    assert np.isfinite([params.intercept, params.daily_coef,
                        params.weekly_coef, params.monthly_coef]).all()
    assert 0 <= params.r_squared <= 1
    assert params.mse >= 0


def test_fit_is_deterministic(har_model, volatility_series):
    assert har_model.fit(volatility_series) == har_model.fit(volatility_series)


def test_fit_on_persistent_series(har_model, persistent_series):
    """Daily component carries most of the weight for an AR(1) series"""
    params = har_model.fit(persistent_series)

    assert params.n_observations == 278
    assert params.daily_coef > 0
    assert params.r_squared > 0.3


def test_flat_series_is_singular(har_model):
    """All components equal the intercept column up to scale"""
    with pytest.raises(SingularMatrix):
        har_model.fit(np.full(40, 0.01))


def test_build_features(har_model):
    vols = np.arange(1, 26, dtype=float)

    features, targets = har_model.build_features(vols)

    assert features.shape == (3, 4)
    np.testing.assert_allclose(targets, [23.0, 24.0, 25.0])
    # Row for target index 22: previous value, last 5 and last 22 means
    np.testing.assert_allclose(features[0], [1.0, 22.0, 20.0, 11.5])


def test_forecast_hand_computed(har_model, fixed_model):
    """0.001 + 0.5 * 0.022 + 0.3 * 0.020 + 0.1 * 0.0115"""
    vols = np.arange(1, 23) * 0.001

    forecast = har_model.forecast(fixed_model, vols)

    assert forecast == pytest.approx(0.01915)


def test_forecast_uses_trailing_values(har_model, fixed_model):
    vols = np.arange(1, 23) * 0.001
    longer = np.concatenate([np.full(10, 0.5), vols])

    assert har_model.forecast(fixed_model, longer) == pytest.approx(
        har_model.forecast(fixed_model, vols)
    )


def test_forecast_horizons_scaling(har_model, fixed_model):
    daily, weekly, monthly = har_model.forecast_horizons(
        fixed_model, np.arange(1, 23) * 0.001
    )

    assert weekly == pytest.approx(daily * np.sqrt(5), rel=1e-12)
    assert monthly == pytest.approx(daily * np.sqrt(22), rel=1e-12)


def test_forecast_without_model(har_model):
    with pytest.raises(ModelUnavailable):
        har_model.forecast(None, np.full(30, 0.01))


def test_forecast_short_series(har_model, fixed_model):
    with pytest.raises(ModelUnavailable):
        har_model.forecast(fixed_model, np.full(21, 0.01))


def test_fitted_values_alignment(har_model, persistent_series):
    params = har_model.fit(persistent_series)

    fitted = har_model.fitted_values(params, persistent_series)

    assert len(fitted) == len(persistent_series) - 22
    residuals = persistent_series[22:] - fitted
    assert np.mean(residuals ** 2) == pytest.approx(params.mse)


def test_invalid_windows():
    with pytest.raises(ValueError):
        HARModel(weekly_window=22, monthly_window=5)
