"""Strategy implementations."""

from .base_strategy import BaseStrategy, StrategyEvaluation
from .rsi_strategy import RsiStrategy, build_strategy

__all__ = ['BaseStrategy', 'StrategyEvaluation', 'RsiStrategy', 'build_strategy']
