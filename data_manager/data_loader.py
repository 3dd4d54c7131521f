"""
Data loader for daily OHLCV price bars.
"""

import logging
from pathlib import Path
from typing import List, Union

import pandas as pd

from data_manager.data_validator import DataValidator
from models import PriceBar

logger = logging.getLogger(__name__)

OHLCV_COLUMNS = ['open', 'high', 'low', 'close', 'volume']

# Common column spellings from CSV exports
COLUMN_ALIASES = {
    'date': 'timestamp',
    'datetime': 'timestamp',
    'time': 'timestamp',
    'adj close': 'adj_close',
    'vol': 'volume',
}


def bars_to_frame(bars: List[PriceBar]) -> pd.DataFrame:
    """DataFrame indexed by timestamp with OHLCV columns"""
    df = pd.DataFrame(
        [[bar.timestamp, bar.open, bar.high, bar.low, bar.close, bar.volume] for bar in bars],
        columns=['timestamp'] + OHLCV_COLUMNS
    )
    return df.set_index('timestamp')


def bars_from_frame(df: pd.DataFrame) -> List[PriceBar]:
    """PriceBars from a frame with OHLCV columns and a timestamp index or column"""
    if 'timestamp' in df.columns:
        df = df.set_index('timestamp')

    missing = [col for col in OHLCV_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")

    return [
        PriceBar(
            timestamp=pd.Timestamp(ts).to_pydatetime(),
            open=float(row.open),
            high=float(row.high),
            low=float(row.low),
            close=float(row.close),
            volume=float(row.volume)
        )
        for ts, row in df[OHLCV_COLUMNS].iterrows()
    ]


class DataLoader:
    def __init__(self, validator: DataValidator = None):
        """Initialize data loader with an optional validator."""
        self.validator = validator or DataValidator()

    def load_frame(self, file_path: Union[str, Path]) -> pd.DataFrame:
        """Read an OHLCV CSV, normalize column names and sort by timestamp."""
        logger.info(f"Reading data from: {file_path}")
        df = pd.read_csv(file_path)

        df.columns = [str(col).strip().lower() for col in df.columns]
        df = df.rename(columns=COLUMN_ALIASES)

        if 'timestamp' not in df.columns:
            raise ValueError(f"No date/timestamp column found in {file_path}")

        if 'volume' not in df.columns:
            logger.warning("No volume column, filling with zeros")
            df['volume'] = 0

        df['timestamp'] = pd.to_datetime(df['timestamp'])
        df = df.sort_values('timestamp').drop_duplicates('timestamp', keep='last')

        dropped = df[OHLCV_COLUMNS].isna().any(axis=1).sum()
        if dropped > 0:
            logger.warning(f"Dropping {dropped} rows with missing OHLCV values")
            df = df.dropna(subset=OHLCV_COLUMNS)

        logger.info(
            f"Loaded {len(df)} bars from {df['timestamp'].min()} to {df['timestamp'].max()}"
        )
        return df.set_index('timestamp')

    def load_bars(self, file_path: Union[str, Path], validate: bool = True) -> List[PriceBar]:
        """Load bars from CSV, raising ValueError if validation fails."""
        bars = bars_from_frame(self.load_frame(file_path))

        if validate:
            is_valid, issues = self.validator.validate_bars(bars)
            if not is_valid:
                for issue in issues[:10]:
                    logger.error(issue)
                raise ValueError(f"Price data failed validation with {len(issues)} issue(s)")

        return bars
