"""Utility functions and classes for volatility analysis"""

from .visualization import VolatilityVisualizer
from .progress import ProgressMonitor
from .formatting import format_snapshot, format_signals

__all__ = ['VolatilityVisualizer', 'ProgressMonitor', 'format_snapshot', 'format_signals']
