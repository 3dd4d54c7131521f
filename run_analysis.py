#!/usr/bin/env python
"""
Single volatility analysis run.
Loads bars, computes the snapshot, HAR fit, regime and signals, then
optionally persists the result and saves plots.
"""
import sys
import argparse
from pathlib import Path
import logging
from datetime import datetime
import traceback
from typing import List, Optional

# Add project root to path
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.append(str(project_root))

from analysis.analyzer import VolatilityAnalyzer
from config.database_config import DatabaseConfig
from config.model_config import AnalysisConfig
from data_manager.data_loader import DataLoader
from data_manager.database import VolatilityDatabase
from data_manager.sample_data import generate_sample_bars
from models import AnalysisResult, PriceBar
from signals.regime import calculate_regime_thresholds
from utils.formatting import format_signals, format_snapshot
from utils.visualization import VolatilityVisualizer

FILE_HANDLER_NAME = 'volatility_file'
CONSOLE_HANDLER_NAME = 'volatility_console'


def setup_logging(output_dir: Path, name: str = "volatility_analysis") -> logging.Logger:
    """
    Configure logging with both file and console handlers

    Parameters:
    -----------
    output_dir : Path
        Directory for log file

    Returns:
    --------
    logging.Logger
        Configured logger
    """
    log_dir = output_dir / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"{name}_{timestamp}.log"

    # Configure the root logger so package loggers share the handlers
    root = logging.getLogger()
    root.setLevel(logging.INFO)

    # Replace handlers from an earlier call instead of stacking them
    for handler in list(root.handlers):
        if handler.get_name() in (FILE_HANDLER_NAME, CONSOLE_HANDLER_NAME):
            root.removeHandler(handler)
            handler.close()

    file_handler = logging.FileHandler(log_file)
    file_handler.set_name(FILE_HANDLER_NAME)
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(
        logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.set_name(CONSOLE_HANDLER_NAME)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter('%(message)s'))

    root.addHandler(file_handler)
    root.addHandler(console_handler)

    return logging.getLogger(name)


def load_bars(csv_path: Optional[Path], use_sample: bool, logger: logging.Logger) -> List[PriceBar]:
    """Bars from CSV, or a reproducible synthetic series"""
    if csv_path is not None:
        return DataLoader().load_bars(csv_path)
    if use_sample:
        logger.info("Generating sample data...")
        return generate_sample_bars(n_days=300)
    raise ValueError("Provide --csv PATH or --sample")


def report(result: AnalysisResult, logger: logging.Logger):
    """Log the result the way the dashboard presents it"""
    logger.info(f"\nVolatility indicators for {result.symbol} ({result.timestamp:%Y-%m-%d}):")
    for name, value in format_snapshot(result.indicators).items():
        unit = '' if name == 'atr_14' else '%'
        logger.info(f"  {name:<26} {value:>10.2f}{unit}")

    logger.info(f"Regime: {result.regime.value}  Trend: {result.trend.value}")
    logger.info(f"HAR R2: {result.har_model.r_squared:.3f}")

    if not result.signals:
        logger.info("No signals")
    for signal in format_signals(result.signals):
        logger.info(
            f"  [{signal['strength_pct']:.0f}%] {signal['type']} -> {signal['action']}: {signal['reason']}"
        )


def save_plots(analyzer: VolatilityAnalyzer, bars: List[PriceBar], result: AnalysisResult,
               plot_dir: Path):
    """Rolling volatility with regime thresholds and HAR fit"""
    plot_dir.mkdir(parents=True, exist_ok=True)
    rolling_vols = analyzer.rolling_volatilities(bars)
    visualizer = VolatilityVisualizer()
    try:
        visualizer.plot_rolling_volatility(
            rolling_vols=rolling_vols,
            thresholds=calculate_regime_thresholds(rolling_vols),
            har_fitted=analyzer.har_model.fitted_values(result.har_model, rolling_vols),
            title=f"{result.symbol} rolling volatility ({result.regime.value})",
            save_path=plot_dir / f"{result.symbol}_rolling_volatility.png"
        )
    finally:
        visualizer.close_all()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a volatility analysis")
    parser.add_argument('--csv', type=Path, help="OHLCV CSV file")
    parser.add_argument('--sample', action='store_true', help="Use generated sample data")
    parser.add_argument('--symbol', help="Instrument symbol")
    parser.add_argument('--db', type=Path, help="DuckDB file to persist results")
    parser.add_argument('--plot', type=Path, help="Directory for plots")
    parser.add_argument('--output', type=Path, help="Output directory for logs")
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point with configuration and setup"""
    args = parse_args(argv)
    db_config = DatabaseConfig.from_env()
    output_dir = args.output or db_config.output_dir
    symbol = args.symbol or db_config.symbol

    logger = setup_logging(output_dir)

    try:
        bars = load_bars(args.csv, args.sample, logger)

        analyzer = VolatilityAnalyzer(AnalysisConfig())
        result = analyzer.analyze(bars, symbol=symbol)
        report(result, logger)

        if args.db:
            with VolatilityDatabase(args.db) as db:
                db.store_market_data(bars, symbol)
                db.store_analysis(result)

        if args.plot:
            save_plots(analyzer, bars, result, args.plot)

        return result

    except Exception as e:
        logger.error(f"Analysis failed: {str(e)}")
        logger.error(f"Traceback: {traceback.format_exc()}")
        raise


if __name__ == '__main__':
    main()
