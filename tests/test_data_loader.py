import sys
import os

# Add project root to Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.append(project_root)

import math
import pytest
import pandas as pd
from dataclasses import replace

from data_manager.data_loader import DataLoader, bars_from_frame, bars_to_frame
from data_manager.data_validator import DataValidator
from data_manager.sample_data import generate_sample_bars


@pytest.fixture
def sample_bars():
    return generate_sample_bars(n_days=60)


@pytest.fixture
def csv_file(tmp_path, sample_bars):
    """CSV export with capitalized headers in descending date order"""
    df = bars_to_frame(sample_bars).reset_index()
    df = df.rename(columns={
        'timestamp': 'Date', 'open': 'Open', 'high': 'High',
        'low': 'Low', 'close': 'Close', 'volume': 'Volume'
    })
    path = tmp_path / "spy.csv"
    df.iloc[::-1].to_csv(path, index=False)
    return path


def test_load_bars_from_csv(csv_file, sample_bars):
    bars = DataLoader().load_bars(csv_file)

    assert bars == sample_bars


def test_load_frame_normalizes_columns(csv_file):
    df = DataLoader().load_frame(csv_file)

    assert list(df.columns) == ['open', 'high', 'low', 'close', 'volume']
    assert df.index.is_monotonic_increasing


def test_missing_volume_filled(tmp_path):
    path = tmp_path / "no_volume.csv"
    pd.DataFrame({
        'date': ['2024-01-02', '2024-01-03'],
        'open': [100.0, 101.0],
        'high': [102.0, 103.0],
        'low': [99.0, 100.0],
        'close': [101.0, 102.0],
    }).to_csv(path, index=False)

    bars = DataLoader().load_bars(path)

    assert [bar.volume for bar in bars] == [0.0, 0.0]


def test_missing_timestamp_column(tmp_path):
    path = tmp_path / "bad.csv"
    pd.DataFrame({'open': [1.0], 'high': [1.0], 'low': [1.0], 'close': [1.0]}).to_csv(path)

    with pytest.raises(ValueError):
        DataLoader().load_frame(path)


def test_invalid_bars_rejected(tmp_path):
    path = tmp_path / "inverted.csv"
    pd.DataFrame({
        'date': ['2024-01-02', '2024-01-03'],
        'open': [100.0, 101.0],
        'high': [98.0, 103.0],
        'low': [99.0, 100.0],
        'close': [101.0, 102.0],
        'volume': [10, 10],
    }).to_csv(path, index=False)

    with pytest.raises(ValueError):
        DataLoader().load_bars(path)

    assert len(DataLoader().load_bars(path, validate=False)) == 2


def test_frame_round_trip(sample_bars):
    assert bars_from_frame(bars_to_frame(sample_bars)) == sample_bars


def test_bars_from_frame_missing_columns(sample_bars):
    with pytest.raises(ValueError):
        bars_from_frame(bars_to_frame(sample_bars).drop(columns=['close']))


# Validator

def test_sample_bars_are_valid(sample_bars):
    is_valid, issues = DataValidator().validate_bars(sample_bars)

    assert is_valid
    assert issues == []


def test_validator_flags_ohlc_inconsistency(sample_bars):
    bars = list(sample_bars)
    bars[5] = replace(bars[5], close=bars[5].high + 1)
    bars[6] = replace(bars[6], high=bars[6].low - 1)

    is_valid, issues = DataValidator().validate_bars(bars)

    assert not is_valid
    assert any('Bar 5' in issue and 'close' in issue for issue in issues)
    assert any('Bar 6' in issue and 'below low' in issue for issue in issues)


def test_validator_flags_non_finite_and_negative(sample_bars):
    bars = list(sample_bars)
    bars[0] = replace(bars[0], close=math.nan)
    bars[1] = replace(bars[1], volume=-5.0)

    is_valid, issues = DataValidator().validate_bars(bars)

    assert not is_valid
    assert any('not finite' in issue for issue in issues)
    assert any('negative volume' in issue for issue in issues)


def test_validator_flags_ordering(sample_bars):
    bars = list(sample_bars)
    bars[10], bars[11] = bars[11], bars[10]

    is_valid, issues = DataValidator().validate_bars(bars)

    assert not is_valid
    assert any('not after' in issue for issue in issues)


def test_validator_price_bounds(sample_bars):
    is_valid, issues = DataValidator(max_price=100).validate_bars(sample_bars)

    assert not is_valid
    assert any('outside' in issue for issue in issues)


def test_sample_bars_reproducible():
    assert generate_sample_bars(n_days=30, seed=1) == generate_sample_bars(n_days=30, seed=1)
    assert generate_sample_bars(n_days=30, seed=1) != generate_sample_bars(n_days=30, seed=2)
