"""Trade sizing against the wallet balance."""

from __future__ import annotations

import logging
import math
from decimal import ROUND_DOWN, Decimal, localcontext
from typing import TYPE_CHECKING

from ..core.models import TokenPair

if TYPE_CHECKING:
    from ..core.context import TradingContext

logger = logging.getLogger(__name__)


def floor_to_decimals(amount: float, decimals: int) -> float:
    """Round ``amount`` down to the token's smallest unit."""

    if amount <= 0 or math.isnan(amount):
        return 0.0
    if decimals < 0:
        return amount
    with localcontext() as context:
        context.prec = 64
        quantum = Decimal(1).scaleb(-decimals)
        return float(Decimal(repr(amount)).quantize(quantum, rounding=ROUND_DOWN))


def calculate_trade_amount(ctx: 'TradingContext', pair: TokenPair) -> float:
    """Quantity of ``pair.from_token`` to spend when opening a position.

    Uses ``max_portfolio_allocation`` percent of the wallet balance, never more
    than the balance itself. Missing portfolio or balance yields 0.
    """

    if ctx.portfolio is None:
        logger.info('No portfolio loaded; trade amount for %s is 0', pair.label)
        return 0.0
    item = ctx.portfolio.wallet_item_for(pair.from_token)
    if item is None:
        logger.info('No wallet balance for %s; trade amount is 0', pair.from_token.symbol)
        return 0.0

    allocation = ctx.config.max_portfolio_allocation
    amount = min(item.ui_amount, allocation / 100 * item.ui_amount)
    amount = floor_to_decimals(amount, pair.from_token.decimals)
    logger.debug(
        'Trade amount for %s: %s (%.2f%% of %s)',
        pair.from_token.symbol,
        amount,
        allocation,
        item.ui_amount,
    )
    return amount


__all__ = ['calculate_trade_amount', 'floor_to_decimals']
