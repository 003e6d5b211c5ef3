"""Defines the base strategy contract."""

from __future__ import annotations

import abc
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..config import Settings
from ..core.models import TokenPair

if TYPE_CHECKING:
    from ..core.context import TradingContext


@dataclass(slots=True)
class StrategyEvaluation:
    should_open: bool
    should_close: bool
    open_proximity: float
    close_proximity: float
    has_open_position: bool
    current_rsi: float = math.nan
    description: str = ''

    @property
    def has_signal(self) -> bool:
        return self.should_open or self.should_close


class BaseStrategy(abc.ABC):
    """Common contract shared by all strategies."""

    def __init__(self, name: str, settings: Settings) -> None:
        self.name = name
        self.settings = settings

    @abc.abstractmethod
    def evaluate(self, ctx: 'TradingContext', pair: TokenPair, amount: float) -> StrategyEvaluation:
        """Return the open/close signal for one pair given the cycle's data."""


__all__ = ['BaseStrategy', 'StrategyEvaluation']
