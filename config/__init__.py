"""Configuration for the volatility analysis pipeline"""

from .model_config import AnalysisConfig, GARCHParams
from .database_config import DatabaseConfig

__all__ = ['AnalysisConfig', 'GARCHParams', 'DatabaseConfig']
