"""Environment-driven settings for the persistence and CLI layers."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class DatabaseConfig:
    """Paths and defaults handed to collaborators at construction time"""
    db_path: Path = Path("data_manager/data/volatility.db")
    symbol: str = "SPY"
    output_dir: Path = Path("results")

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> 'DatabaseConfig':
        """Build config from environment, reading a .env file if present"""
        load_dotenv(env_file)
        defaults = cls()
        return cls(
            db_path=Path(os.getenv('VOLATILITY_DB_PATH', str(defaults.db_path))),
            symbol=os.getenv('VOLATILITY_SYMBOL', defaults.symbol),
            output_dir=Path(os.getenv('VOLATILITY_OUTPUT_DIR', str(defaults.output_dir))),
        )
