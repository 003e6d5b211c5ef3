"""Application-wide configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable

from .birdeye_config import BirdeyeConfig
from .trading_limits import TradingLimits

_ENV_COMMENT_PREFIX = '#'
_TRUTHY = {'1', 'true', 'yes'}
_WALLET_SECRET_KEYS = ('SOLANA_PRIVATE_KEY', 'SOLANA_WALLET_PUBLIC_KEY')


def _load_env_file(path: Path) -> Dict[str, str]:
    """Load simple KEY=VALUE pairs from a .env style file if it exists."""
    if not path.exists():
        return {}

    values: Dict[str, str] = {}
    for raw_line in path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith(_ENV_COMMENT_PREFIX):
            continue
        if '=' not in line:
            continue
        key, value = line.split('=', 1)
        values[key.strip()] = value.strip().strip('"').strip("\'")
    return values


def _merge_env(sources: Iterable[Dict[str, str]]) -> Dict[str, str]:
    merged: Dict[str, str] = {}
    for source in sources:
        merged.update(source)
    return merged


def _as_bool(value: str | bool) -> bool:
    if isinstance(value, bool):
        return value
    return value.strip().lower() in _TRUTHY


@dataclass
class Settings:
    """Container for application level settings.

    Values are resolved from (in order): process environment, `.env` file,
    and finally the provided defaults.
    """

    environment: str = 'development'
    database_url: str = 'sqlite:///data/trading_agent.db'
    data_directory: Path = field(default_factory=lambda: Path('data'))
    log_level: str = 'INFO'
    agent_id: str = ''
    agent_name: str = 'trading-agent'
    force_paper_trading: bool = False
    force_open_position: bool = False
    force_close_position: bool = False
    expected_slippage_percent: float = 1.0
    swap_max_attempts: int = 3
    swap_backoff_seconds: float = 1.0
    swap_attempt_timeout: float = 60.0
    price_history_bars: int = 100
    fetch_market_data: bool = True
    update_interval: str = 'minute'
    trading_limits: TradingLimits = field(default_factory=TradingLimits)
    birdeye: BirdeyeConfig = field(default_factory=lambda: BirdeyeConfig(api_key=''))
    wallet_secrets: Dict[str, str] = field(default_factory=dict, repr=False)

    @classmethod
    def from_env(cls, env_file: str | Path = '.env') -> 'Settings':
        env_path = Path(env_file)
        env_file_values = _load_env_file(env_path)
        merged = _merge_env([env_file_values, dict(os.environ)])

        kwargs = {
            'environment': merged.get('APP_ENV', cls.environment),
            'database_url': merged.get('DATABASE_URL', cls.database_url),
            'data_directory': merged.get('DATA_DIRECTORY', 'data'),
            'log_level': merged.get('LOG_LEVEL', cls.log_level),
            'agent_id': merged.get('AGENT_ID', cls.agent_id),
            'agent_name': merged.get('AGENT_NAME', cls.agent_name),
            'force_paper_trading': _as_bool(merged.get('FORCE_PAPER_TRADING', cls.force_paper_trading)),
            'force_open_position': _as_bool(merged.get('FORCE_OPEN_POSITION', cls.force_open_position)),
            'force_close_position': _as_bool(merged.get('FORCE_CLOSE_POSITION', cls.force_close_position)),
            'expected_slippage_percent': float(
                merged.get('EXPECTED_SLIPPAGE_PERCENT', cls.expected_slippage_percent)
            ),
            'swap_max_attempts': int(merged.get('SWAP_MAX_ATTEMPTS', cls.swap_max_attempts)),
            'swap_backoff_seconds': float(merged.get('SWAP_BACKOFF_SECONDS', cls.swap_backoff_seconds)),
            'swap_attempt_timeout': float(merged.get('SWAP_ATTEMPT_TIMEOUT', cls.swap_attempt_timeout)),
            'price_history_bars': int(merged.get('PRICE_HISTORY_BARS', cls.price_history_bars)),
            'fetch_market_data': _as_bool(merged.get('FETCH_MARKET_DATA', cls.fetch_market_data)),
            'update_interval': merged.get('UPDATE_INTERVAL', cls.update_interval),
            'trading_limits': TradingLimits.from_env(merged),
            'birdeye': BirdeyeConfig.from_env(merged),
            'wallet_secrets': {
                key: merged[key] for key in _WALLET_SECRET_KEYS if merged.get(key)
            },
        }
        settings = cls(**kwargs)
        settings.ensure_directories()
        return settings

    def ensure_directories(self) -> None:
        """Create required directories if they are missing."""
        self.data_directory = Path(self.data_directory)
        self.data_directory.mkdir(parents=True, exist_ok=True)


load_settings = Settings.from_env

__all__ = ['Settings', 'load_settings']
