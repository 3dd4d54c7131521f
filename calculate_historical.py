#!/usr/bin/env python
"""
Historical backfill for volatility analysis.
Walks a bar history, runs one analysis per end date over the trailing
lookback and stores every snapshot.
"""
import sys
import argparse
from pathlib import Path
import logging
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
from exceptions import VolatilityError
from models import AnalysisResult, PriceBar
from run_analysis import setup_logging
from utils.progress import ProgressMonitor

QUIET_LOGGERS = ('analysis', 'regression')


def run_historical(bars: List[PriceBar],
                   symbol: str,
                   analyzer: VolatilityAnalyzer,
                   db: Optional[VolatilityDatabase] = None,
                   logger: Optional[logging.Logger] = None,
                   start_index: Optional[int] = None) -> List[AnalysisResult]:
    """
    Analyze every trailing window ending at bars[start_index:]

    Windows whose analysis raises a VolatilityError are logged and skipped;
    the remaining windows still run. Results are stored if db is given.
    """
    logger = logger or logging.getLogger('historical_calculator')
    lookback = analyzer.config.lookback
    start_index = start_index if start_index is not None else analyzer.config.required_bars - 1

    if len(bars) <= start_index:
        raise ValueError(f"Insufficient data: {len(bars)} bars, first window ends at {start_index}")

    end_indices = range(start_index, len(bars))
    monitor = ProgressMonitor(total=len(end_indices), desc=f"Backfilling {symbol}", logger=logger)
    results = []

    # Package loggers would otherwise log a full report per window
    saved_levels = {name: logging.getLogger(name).level for name in QUIET_LOGGERS}
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    try:
        for end in end_indices:
            window = bars[max(0, end + 1 - lookback):end + 1]
            try:
                result = analyzer.analyze(window, symbol=symbol)
            except VolatilityError as e:
                logger.warning(f"Skipping window ending {bars[end].timestamp}: {str(e)}")
                monitor.update(failed=True)
                continue

            if db is not None:
                db.store_analysis(result)
            results.append(result)
            monitor.update()
    finally:
        monitor.close()
        for name, level in saved_levels.items():
            logging.getLogger(name).setLevel(level)

    logger.info(f"Stored {len(results)} snapshots for {symbol}")
    return results


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Backfill historical volatility snapshots")
    parser.add_argument('--csv', type=Path, help="OHLCV CSV file")
    parser.add_argument('--sample', action='store_true', help="Use generated sample data")
    parser.add_argument('--symbol', help="Instrument symbol")
    parser.add_argument('--db', type=Path, help="DuckDB file, defaults to VOLATILITY_DB_PATH")
    parser.add_argument('--output', type=Path, help="Output directory for logs")
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point with configuration and setup"""
    args = parse_args(argv)
    db_config = DatabaseConfig.from_env()
    output_dir = args.output or db_config.output_dir
    symbol = args.symbol or db_config.symbol

    logger = setup_logging(output_dir, name="historical_calculator")
    logger.info("Starting historical calculation pipeline...")

    try:
        if args.csv:
            bars = DataLoader().load_bars(args.csv)
        elif args.sample:
            bars = generate_sample_bars(n_days=500)
        else:
            raise ValueError("Provide --csv PATH or --sample")

        analyzer = VolatilityAnalyzer(AnalysisConfig())

        with VolatilityDatabase(args.db or db_config.db_path) as db:
            db.store_market_data(bars, symbol)
            run_historical(bars, symbol, analyzer, db=db, logger=logger)

        logger.info("Pipeline completed successfully")

    except Exception as e:
        logger.error(f"Pipeline failed: {str(e)}")
        logger.error(f"Traceback: {traceback.format_exc()}")
        raise


if __name__ == '__main__':
    main()
