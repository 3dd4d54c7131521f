"""Volatility analysis pipeline"""

from .analyzer import VolatilityAnalyzer, calculate_market_summary

__all__ = ['VolatilityAnalyzer', 'calculate_market_summary']
