"""
Data management package for volatility analysis.
Handles bar loading, validation, sample generation and storage.
"""

from .data_loader import DataLoader, bars_from_frame, bars_to_frame
from .data_validator import DataValidator
from .sample_data import generate_sample_bars
from .database import VolatilityDatabase

__all__ = [
    'DataLoader',
    'DataValidator',
    'VolatilityDatabase',
    'bars_from_frame',
    'bars_to_frame',
    'generate_sample_bars',
]
