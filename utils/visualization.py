from typing import Dict, List, Optional, Sequence
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
from pathlib import Path
import logging

logger = logging.getLogger(__name__)


class VolatilityVisualizer:
    """Static plots of rolling volatility, HAR fit and indicator history"""

    REGIME_COLORS = {
        'p25': 'tab:green',
        'p75': 'tab:orange',
        'p90': 'tab:red',
    }

    def __init__(self, style: str = 'whitegrid'):
        """
        Initialize visualizer

        Parameters:
        -----------
        style : str
            Seaborn style name. Falls back to matplotlib defaults if unknown.
        """
        try:
            sns.set_theme(style=style)
        except ValueError:
            plt.style.use('default')
            logger.warning(f"Style '{style}' not found, using default style")

        self.colors = plt.rcParams['axes.prop_cycle'].by_key()['color']

    def plot_rolling_volatility(self,
                                rolling_vols: Sequence[float],
                                thresholds: Dict[str, float],
                                har_fitted: Optional[Sequence[float]] = None,
                                dates: Optional[Sequence] = None,
                                title: Optional[str] = None,
                                save_path: Optional[Path] = None) -> plt.Figure:
        """
        Plot rolling volatility with regime thresholds and optional HAR fit

        Parameters:
        -----------
        rolling_vols : array-like
            Daily rolling realized volatility
        thresholds : dict
            Regime percentiles keyed 'p25', 'p75', 'p90'
        har_fitted : array-like, optional
            HAR fitted values, aligned to the end of rolling_vols
        dates : array-like, optional
            x-axis values, defaults to observation index
        """
        rolling_vols = np.asarray(rolling_vols, dtype=float)
        if len(rolling_vols) == 0:
            raise ValueError("Empty input data")

        x = np.asarray(dates) if dates is not None else np.arange(len(rolling_vols))

        fig, ax = plt.subplots(figsize=(12, 6))
        ax.plot(x, rolling_vols * 100, label='Rolling volatility', color=self.colors[0])

        if har_fitted is not None and len(har_fitted) > 0:
            har_fitted = np.asarray(har_fitted, dtype=float)
            ax.plot(x[-len(har_fitted):], har_fitted * 100, label='HAR fitted',
                    color=self.colors[1], linestyle='--')

        for name, level in thresholds.items():
            ax.axhline(level * 100, color=self.REGIME_COLORS.get(name, 'gray'),
                       linestyle=':', label=name.upper())

        ax.set_xlabel('Date' if dates is not None else 'Observation')
        ax.set_ylabel('Daily Volatility (%)')
        if title:
            ax.set_title(title)
        ax.legend()

        if save_path:
            fig.savefig(save_path)
            logger.info(f"Saved plot to {save_path}")

        return fig

    def plot_indicator_history(self,
                               history: pd.DataFrame,
                               indicators: List[str] = ['realized_volatility', 'har_forecast_daily',
                                                        'garch_forecast', 'bollinger_band_width'],
                               title: Optional[str] = None,
                               save_path: Optional[Path] = None) -> plt.Figure:
        """
        Plot stored indicator rows over time

        Parameters:
        -----------
        history : DataFrame
            Rows from VolatilityDatabase.get_historical_analysis
        indicators : list
            Columns to plot, one panel each
        """
        if history.empty:
            raise ValueError("Empty input data")

        history = history.sort_values('timestamp')
        n_panels = len(indicators)
        fig, axes = plt.subplots(n_panels, 1, figsize=(12, 3 * n_panels), sharex=True)

        if n_panels == 1:
            axes = [axes]

        for ax, column in zip(axes, indicators):
            ax.plot(history['timestamp'], history[column], color=self.colors[0])
            ax.set_ylabel(column)
            ax.grid(True)

        axes[-1].set_xlabel('Date')
        if title:
            fig.suptitle(title)

        plt.tight_layout()

        if save_path:
            fig.savefig(save_path)
            logger.info(f"Saved plot to {save_path}")

        return fig

    def close_all(self):
        """Close all open figures"""
        plt.close('all')
