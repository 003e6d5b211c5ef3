"""Configuration utilities for the trading agent."""

from .birdeye_config import BirdeyeConfig
from .config import Settings, load_settings
from .trading_limits import DEFAULT_TRADING_LIMITS, TradingLimits

__all__ = ['Settings', 'BirdeyeConfig', 'TradingLimits', 'DEFAULT_TRADING_LIMITS', 'load_settings']
