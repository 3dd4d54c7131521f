import sys
import os

# Add project root to Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.append(project_root)

import matplotlib
matplotlib.use('Agg')

import logging
import pytest
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

from models import Signal, VolatilityIndicatorSnapshot
from signals.regime import calculate_regime_thresholds
from utils.formatting import format_signals, format_snapshot
from utils.progress import ProgressMonitor
from utils.visualization import VolatilityVisualizer


@pytest.fixture
def snapshot():
    return VolatilityIndicatorSnapshot(
        realized_volatility=0.1587,
        har_forecast_daily=0.0101,
        har_forecast_weekly=0.0226,
        har_forecast_monthly=0.0474,
        garch_forecast=0.011091,
        atr_14=5.4321,
        bollinger_band_width=0.0512,
        parkinson_volatility=0.1402,
        garman_klass_volatility=0.1399
    )


@pytest.fixture
def rolling_vols():
    np.random.seed(42)
    return np.abs(np.random.normal(0.01, 0.002, 200))


@pytest.fixture
def visualizer():
    vis = VolatilityVisualizer()
    yield vis
    vis.close_all()


# Formatting

def test_format_snapshot_scales_volatilities(snapshot):
    formatted = format_snapshot(snapshot)

    assert formatted['realized_volatility'] == 15.87
    assert formatted['garch_forecast'] == 1.11
    assert formatted['bollinger_band_width'] == 5.12


def test_format_snapshot_keeps_atr_in_price_units(snapshot):
    assert format_snapshot(snapshot)['atr_14'] == 5.43
    assert format_snapshot(snapshot, decimals=4)['atr_14'] == 5.4321


def test_format_signals():
    signals = [Signal(type='har_divergence', action='hedge', strength=0.65,
                      reason='HAR model shows significant divergence')]

    formatted = format_signals(signals)

    assert formatted == [{
        'type': 'har_divergence',
        'action': 'hedge',
        'strength_pct': 65.0,
        'reason': 'HAR model shows significant divergence',
    }]


# Visualization

def test_plot_rolling_volatility(visualizer, rolling_vols, tmp_path):
    save_path = tmp_path / "rolling.png"

    fig = visualizer.plot_rolling_volatility(
        rolling_vols=rolling_vols,
        thresholds=calculate_regime_thresholds(rolling_vols),
        har_fitted=rolling_vols[22:],
        title="Rolling volatility",
        save_path=save_path
    )

    assert isinstance(fig, plt.Figure)
    assert save_path.exists()
    ax = fig.axes[0]
    # Rolling series, HAR fit and three threshold lines
    assert len(ax.lines) == 5


def test_plot_rolling_volatility_with_dates(visualizer, rolling_vols):
    dates = pd.bdate_range(end='2024-12-31', periods=len(rolling_vols))

    fig = visualizer.plot_rolling_volatility(rolling_vols, {'p90': 0.012}, dates=dates)

    assert fig.axes[0].get_xlabel() == 'Date'


def test_plot_rolling_volatility_empty(visualizer):
    with pytest.raises(ValueError):
        visualizer.plot_rolling_volatility([], {})


def test_plot_indicator_history(visualizer, tmp_path):
    history = pd.DataFrame({
        'timestamp': pd.bdate_range(end='2024-12-31', periods=30)[::-1],
        'realized_volatility': np.linspace(0.10, 0.20, 30),
        'har_forecast_daily': np.linspace(0.008, 0.012, 30),
        'garch_forecast': np.linspace(0.009, 0.011, 30),
        'bollinger_band_width': np.linspace(0.04, 0.06, 30),
    })
    save_path = tmp_path / "history.png"

    fig = visualizer.plot_indicator_history(history, save_path=save_path)

    assert len(fig.axes) == 4
    assert save_path.exists()


def test_plot_indicator_history_empty(visualizer):
    with pytest.raises(ValueError):
        visualizer.plot_indicator_history(pd.DataFrame())


# Progress

def test_progress_monitor_counts(caplog):
    logger = logging.getLogger('test_progress')

    with caplog.at_level(logging.INFO, logger='test_progress'):
        monitor = ProgressMonitor(total=4, desc="Testing", logger=logger, log_every=2)
        monitor.update()
        monitor.update(failed=True)
        monitor.update(2)
        monitor.close()

    assert monitor.current == 4
    assert monitor.failed == 1
    assert "3/4 windows succeeded" in caplog.text
