"""RSI mean-reversion strategy over a token pair."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Dict, List, Optional

from ..config import Settings
from ..core.models import RsiConfig, TokenPair, TokenPriceHistory, TradingStrategyConfig
from ..database.models import StrategyType
from ..utils.formatters import format_currency
from ..utils.helpers import clamp01
from ..utils.indicators import latest_rsi
from .base_strategy import BaseStrategy, StrategyEvaluation

if TYPE_CHECKING:
    from ..core.context import TradingContext

logger = logging.getLogger(__name__)


def _flag(value: bool) -> str:
    return 'true' if value else 'false'


def _series(history: Optional[Dict[str, TokenPriceHistory]], address: str) -> List[float]:
    if not history or address not in history:
        return []
    return history[address].values


class RsiStrategy(BaseStrategy):
    """Opens below the oversold threshold and closes above the overbought one."""

    def __init__(
        self,
        name: str,
        settings: Settings,
        rsi_config: RsiConfig,
        time_interval: str,
    ) -> None:
        super().__init__(name, settings)
        self.rsi_config = rsi_config
        self.time_interval = time_interval

    def evaluate(self, ctx: 'TradingContext', pair: TokenPair, amount: float) -> StrategyEvaluation:
        over_bought = self.rsi_config.over_bought
        over_sold = self.rsi_config.over_sold

        from_prices = _series(ctx.price_history, pair.from_token.address)
        to_prices = _series(ctx.price_history, pair.to_token.address)
        current_rsi = latest_rsi(to_prices, self.rsi_config.length)

        position = ctx.portfolio.open_position_for(pair) if ctx.portfolio is not None else None
        has_open_position = position is not None

        if math.isnan(current_rsi):
            logger.info(
                'Not enough history for %s: %d bars, need %d',
                pair.label,
                len(to_prices),
                self.rsi_config.length + 1,
            )
            should_open = should_close = False
            open_proximity = close_proximity = 0.0
        else:
            should_open = not has_open_position and current_rsi < over_sold
            should_close = has_open_position and current_rsi > over_bought
            if self.settings.force_open_position and not has_open_position:
                should_open = True
            if self.settings.force_close_position and has_open_position:
                should_close = True
            open_proximity = 0.0 if has_open_position else clamp01((over_sold - current_rsi) / over_sold)
            close_proximity = (
                clamp01((current_rsi - over_bought) / (100 - over_bought)) if has_open_position else 0.0
            )

        from_price = from_prices[-1] if from_prices else None
        to_price = to_prices[-1] if to_prices else None
        rsi_text = 'n/a' if math.isnan(current_rsi) else f'{current_rsi:.2f}'
        description = (
            f'{pair.from_token.symbol} ({format_currency(from_price)}) / '
            f'{pair.to_token.symbol} ({format_currency(to_price)}) - '
            f'Interval: {self.time_interval} - RSI: {rsi_text} - '
            f'Overbought: {over_bought:g} - Oversold: {over_sold:g} - '
            f'Should Open: {_flag(should_open)} - Should Close: {_flag(should_close)} - '
            f'Open Proximity: {open_proximity:.2f} - Close Proximity: {close_proximity:.2f} - '
            f'Amount: {amount} - hasOpenPosition: {_flag(has_open_position)}'
        )
        return StrategyEvaluation(
            should_open=should_open,
            should_close=should_close,
            open_proximity=open_proximity,
            close_proximity=close_proximity,
            has_open_position=has_open_position,
            current_rsi=current_rsi,
            description=description,
        )


def build_strategy(config: TradingStrategyConfig, settings: Settings) -> BaseStrategy:
    """Instantiate the strategy named by ``config.type``."""

    if config.type.upper() == StrategyType.RSI.value:
        return RsiStrategy(config.title or 'rsi', settings, config.rsi_config, config.time_interval)
    raise ValueError(f'Unsupported strategy type: {config.type!r}')


__all__ = ['RsiStrategy', 'build_strategy']
