"""Presentation helpers: volatilities as percentages, ATR in price units"""

from dataclasses import asdict
from typing import Dict, List

from models import Signal, VolatilityIndicatorSnapshot

# Snapshot fields that stay in their native units
PRICE_UNIT_FIELDS = {'atr_14'}


def format_snapshot(snapshot: VolatilityIndicatorSnapshot, decimals: int = 2) -> Dict[str, float]:
    """Scale volatility fields x100; ATR is reported in absolute price units"""
    formatted = {}
    for name, value in asdict(snapshot).items():
        scaled = value if name in PRICE_UNIT_FIELDS else value * 100
        formatted[name] = round(scaled, decimals)
    return formatted


def format_signals(signals: List[Signal]) -> List[Dict[str, object]]:
    return [
        {
            'type': s.type,
            'action': s.action,
            'strength_pct': round(s.strength * 100, 1),
            'reason': s.reason,
        }
        for s in signals
    ]
