"""Pre-trade validation thresholds."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from typing import Mapping

_ENV_KEYS = {
    'min_trade_amount_sol': 'MIN_TRADE_AMOUNT_SOL',
    'max_position_size_percent': 'MAX_POSITION_SIZE_PERCENT',
    'max_slippage_percent': 'MAX_SLIPPAGE_PERCENT',
    'min_liquidity_usd': 'MIN_LIQUIDITY_USD',
    'min_daily_volume_usd': 'MIN_DAILY_VOLUME_USD',
    'min_trust_score': 'MIN_TRUST_SCORE',
}


@dataclass(frozen=True)
class TradingLimits:
    """Thresholds applied by :class:`~auto_trading_system.risk.TradeValidator`."""

    min_trade_amount_sol: float = 0.001
    max_position_size_percent: float = 10.0
    max_slippage_percent: float = 3.0
    min_liquidity_usd: float = 1_000.0
    min_daily_volume_usd: float = 2_000.0
    min_trust_score: float = 0.4

    def with_overrides(self, **overrides: float) -> 'TradingLimits':
        known = {item.name for item in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f'Unknown trading limits: {", ".join(sorted(unknown))}')
        return replace(self, **{key: float(value) for key, value in overrides.items()})

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> 'TradingLimits':
        env = os.environ if environ is None else environ
        overrides = {
            attribute: float(env[key])
            for attribute, key in _ENV_KEYS.items()
            if env.get(key) not in (None, '')
        }
        return cls().with_overrides(**overrides)


DEFAULT_TRADING_LIMITS = TradingLimits()

__all__ = ['TradingLimits', 'DEFAULT_TRADING_LIMITS']
