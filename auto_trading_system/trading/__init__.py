"""Cycle orchestration."""

from .context import build_trading_context
from .cycle import TradingCycle
from .evaluate import evaluate_trade_decisions

__all__ = ['TradingCycle', 'build_trading_context', 'evaluate_trade_decisions']
