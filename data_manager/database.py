import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Dict, List, Optional, Union, Any

import duckdb
import pandas as pd

from models import AnalysisResult, HARModelParams, PriceBar
from signals.regime import risk_score

logger = logging.getLogger(__name__)


class VolatilityDatabase:
    """DuckDB persistence for bars, snapshots, HAR fits and signals; one row per symbol+timestamp"""

    def __init__(self, db_path: Union[str, Path]):
        """Initialize database connection"""
        self.logger = logging.getLogger(__name__)
        self.db_path = Path(db_path)

        # Create database directory if it doesn't exist
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            self.conn = duckdb.connect(str(self.db_path))
            self._initialize_tables()
        except Exception as e:
            self.logger.error(f"Failed to connect to database: {str(e)}")
            raise

        self.logger.info(f"Initialized database at {self.db_path}")

    def _initialize_tables(self):
        """Create tables if they don't exist"""
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS market_data (
                symbol VARCHAR NOT NULL,
                timestamp TIMESTAMP NOT NULL,
                open DOUBLE,
                high DOUBLE,
                low DOUBLE,
                close DOUBLE,
                volume DOUBLE,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                PRIMARY KEY (symbol, timestamp)
            );

            CREATE TABLE IF NOT EXISTS volatility_indicators (
                symbol VARCHAR NOT NULL,
                timestamp TIMESTAMP NOT NULL,
                realized_volatility DOUBLE,
                har_forecast_daily DOUBLE,
                har_forecast_weekly DOUBLE,
                har_forecast_monthly DOUBLE,
                garch_forecast DOUBLE,
                atr_14 DOUBLE,
                bollinger_band_width DOUBLE,
                parkinson_volatility DOUBLE,
                garman_klass_volatility DOUBLE,
                volatility_regime VARCHAR,
                trend VARCHAR,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                PRIMARY KEY (symbol, timestamp)
            );

            CREATE TABLE IF NOT EXISTS har_model_params (
                symbol VARCHAR NOT NULL,
                updated_at TIMESTAMP NOT NULL,
                daily_coef DOUBLE,
                weekly_coef DOUBLE,
                monthly_coef DOUBLE,
                intercept DOUBLE,
                r_squared DOUBLE,
                mse DOUBLE,
                n_observations INTEGER,
                PRIMARY KEY (symbol, updated_at)
            );

            CREATE TABLE IF NOT EXISTS trading_signals (
                symbol VARCHAR NOT NULL,
                timestamp TIMESTAMP NOT NULL,
                signal_type VARCHAR NOT NULL,
                signal_strength DOUBLE,
                volatility_regime VARCHAR,
                recommended_action VARCHAR,
                confidence_level DOUBLE,
                risk_score DOUBLE,
                reason VARCHAR,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );

            CREATE INDEX IF NOT EXISTS idx_signals_symbol_timestamp
                ON trading_signals(symbol, timestamp);
        """)

    def store_market_data(self, bars: List[PriceBar], symbol: str) -> int:
        """Upsert price bars, returns number of rows written"""
        try:
            self.conn.begin()
            self.conn.executemany("""
                INSERT INTO market_data (symbol, timestamp, open, high, low, close, volume)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (symbol, timestamp) DO UPDATE SET
                    open = EXCLUDED.open,
                    high = EXCLUDED.high,
                    low = EXCLUDED.low,
                    close = EXCLUDED.close,
                    volume = EXCLUDED.volume
            """, [
                (symbol, bar.timestamp, bar.open, bar.high, bar.low, bar.close, bar.volume)
                for bar in bars
            ])
            self.conn.commit()
            self.logger.info(f"Stored {len(bars)} bars for {symbol}")
            return len(bars)

        except Exception as e:
            self.logger.error(f"Error storing market data: {str(e)}")
            self.conn.rollback()
            raise

    def _rows_to_bars(self, rows) -> List[PriceBar]:
        return [
            PriceBar(timestamp=ts, open=o, high=h, low=l, close=c, volume=v)
            for ts, o, h, l, c, v in rows
        ]

    def get_latest_bars(self, symbol: str, limit: int = 252) -> List[PriceBar]:
        """Most recent bars, returned in ascending timestamp order"""
        rows = self.conn.execute("""
            SELECT timestamp, open, high, low, close, volume
            FROM (
                SELECT * FROM market_data
                WHERE symbol = ?
                ORDER BY timestamp DESC
                LIMIT ?
            )
            ORDER BY timestamp ASC
        """, [symbol, limit]).fetchall()
        return self._rows_to_bars(rows)

    def get_historical_bars(self, symbol: str,
                            start_date: Optional[datetime] = None,
                            end_date: Optional[datetime] = None) -> List[PriceBar]:
        """Bars between optional bounds, ascending"""
        query = """
            SELECT timestamp, open, high, low, close, volume
            FROM market_data
            WHERE symbol = ?
        """
        params = [symbol]

        if start_date:
            query += " AND timestamp >= ?"
            params.append(start_date)
        if end_date:
            query += " AND timestamp <= ?"
            params.append(end_date)

        query += " ORDER BY timestamp"

        return self._rows_to_bars(self.conn.execute(query, params).fetchall())

    def store_analysis(self, result: AnalysisResult) -> None:
        """Store snapshot, HAR parameters and signals of one run atomically"""
        ind = result.indicators
        har = result.har_model

        try:
            self.conn.begin()

            self.conn.execute("""
                INSERT INTO volatility_indicators (
                    symbol, timestamp, realized_volatility, har_forecast_daily,
                    har_forecast_weekly, har_forecast_monthly, garch_forecast,
                    atr_14, bollinger_band_width, parkinson_volatility,
                    garman_klass_volatility, volatility_regime, trend
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (symbol, timestamp) DO UPDATE SET
                    realized_volatility = EXCLUDED.realized_volatility,
                    har_forecast_daily = EXCLUDED.har_forecast_daily,
                    har_forecast_weekly = EXCLUDED.har_forecast_weekly,
                    har_forecast_monthly = EXCLUDED.har_forecast_monthly,
                    garch_forecast = EXCLUDED.garch_forecast,
                    atr_14 = EXCLUDED.atr_14,
                    bollinger_band_width = EXCLUDED.bollinger_band_width,
                    parkinson_volatility = EXCLUDED.parkinson_volatility,
                    garman_klass_volatility = EXCLUDED.garman_klass_volatility,
                    volatility_regime = EXCLUDED.volatility_regime,
                    trend = EXCLUDED.trend
            """, (
                result.symbol, result.timestamp, ind.realized_volatility,
                ind.har_forecast_daily, ind.har_forecast_weekly, ind.har_forecast_monthly,
                ind.garch_forecast, ind.atr_14, ind.bollinger_band_width,
                ind.parkinson_volatility, ind.garman_klass_volatility,
                result.regime.value, result.trend.value
            ))

            self.conn.execute("""
                INSERT INTO har_model_params (
                    symbol, updated_at, daily_coef, weekly_coef,
                    monthly_coef, intercept, r_squared, mse, n_observations
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (symbol, updated_at) DO UPDATE SET
                    daily_coef = EXCLUDED.daily_coef,
                    weekly_coef = EXCLUDED.weekly_coef,
                    monthly_coef = EXCLUDED.monthly_coef,
                    intercept = EXCLUDED.intercept,
                    r_squared = EXCLUDED.r_squared,
                    mse = EXCLUDED.mse,
                    n_observations = EXCLUDED.n_observations
            """, (
                result.symbol, result.timestamp, har.daily_coef, har.weekly_coef,
                har.monthly_coef, har.intercept, har.r_squared, har.mse, har.n_observations
            ))

            # A rerun for the same timestamp replaces the earlier signal set
            self.conn.execute("""
                DELETE FROM trading_signals WHERE symbol = ? AND timestamp = ?
            """, [result.symbol, result.timestamp])

            for signal in result.signals:
                self.conn.execute("""
                    INSERT INTO trading_signals (
                        symbol, timestamp, signal_type, signal_strength,
                        volatility_regime, recommended_action, confidence_level,
                        risk_score, reason
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    result.symbol, result.timestamp, signal.type,
                    signal.strength * 100, result.regime.value, signal.action,
                    signal.strength * 100, risk_score(result.regime), signal.reason
                ))

            self.conn.commit()
            self.logger.info(
                f"Stored analysis for {result.symbol} at {result.timestamp} "
                f"with {len(result.signals)} signal(s)"
            )

        except Exception as e:
            self.logger.error(f"Error storing analysis: {str(e)}")
            self.conn.rollback()
            raise

    def get_historical_analysis(self, symbol: str, days: int = 30,
                                as_of: Optional[datetime] = None) -> pd.DataFrame:
        """Volatility indicator rows from the last `days` days, newest first"""
        cutoff = (as_of or datetime.now()) - timedelta(days=days)
        return self.conn.execute("""
            SELECT * EXCLUDE (created_at)
            FROM volatility_indicators
            WHERE symbol = ? AND timestamp >= ?
            ORDER BY timestamp DESC
        """, [symbol, cutoff]).df()

    def get_latest_signals(self, symbol: str, limit: int = 10) -> pd.DataFrame:
        """Most recent signals, newest first"""
        return self.conn.execute("""
            SELECT * EXCLUDE (created_at)
            FROM trading_signals
            WHERE symbol = ?
            ORDER BY timestamp DESC, signal_type
            LIMIT ?
        """, [symbol, limit]).df()

    def get_latest_har_model(self, symbol: str) -> Optional[HARModelParams]:
        """Most recent HAR fit for symbol"""
        row = self.conn.execute("""
            SELECT intercept, daily_coef, weekly_coef, monthly_coef,
                   r_squared, mse, n_observations
            FROM har_model_params
            WHERE symbol = ?
            ORDER BY updated_at DESC
            LIMIT 1
        """, [symbol]).fetchone()

        if row is None:
            return None

        intercept, daily, weekly, monthly, r2, mse, n_obs = row
        return HARModelParams(
            intercept=intercept,
            daily_coef=daily,
            weekly_coef=weekly,
            monthly_coef=monthly,
            r_squared=r2,
            mse=mse,
            n_observations=n_obs or 0
        )

    def get_market_summary(self, symbol: str) -> Dict[str, Any]:
        """Latest bar, latest indicators and count of signals at the latest timestamp"""
        latest_bar = self.get_latest_bars(symbol, limit=1)
        indicators = self.conn.execute("""
            SELECT * EXCLUDE (created_at)
            FROM volatility_indicators
            WHERE symbol = ?
            ORDER BY timestamp DESC
            LIMIT 1
        """, [symbol]).df()

        active_signals = self.conn.execute("""
            SELECT COUNT(*)
            FROM trading_signals
            WHERE symbol = ?
              AND timestamp = (SELECT MAX(timestamp) FROM trading_signals WHERE symbol = ?)
        """, [symbol, symbol]).fetchone()[0]

        return {
            'symbol': symbol,
            'latest_bar': latest_bar[0] if latest_bar else None,
            'latest_indicators': indicators.iloc[0].to_dict() if len(indicators) else None,
            'active_signals': int(active_signals),
        }

    def close(self):
        """Close database connection"""
        if hasattr(self, 'conn'):
            self.conn.close()

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        self.close()
