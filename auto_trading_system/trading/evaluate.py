"""Turns strategy evaluations into trade decisions."""

from __future__ import annotations

import logging
from typing import List

from ..core.context import TradingContext
from ..core.models import PricedToken, Token, TokenPair, TradeDecision
from ..risk.position_sizer import calculate_trade_amount
from ..strategies.base_strategy import BaseStrategy

logger = logging.getLogger(__name__)


def _priced(ctx: TradingContext, token: Token) -> PricedToken:
    history = (ctx.price_history or {}).get(token.address)
    if history is None:
        return PricedToken.from_token(token, 0.0)
    return PricedToken.from_token(token, history.latest_price or 0.0, history.market)


def evaluate_trade_decisions(ctx: TradingContext, strategy: BaseStrategy) -> List[TradeDecision]:
    """One decision per configured pair, in configuration order."""

    if ctx.portfolio is None or ctx.price_history is None:
        raise RuntimeError('Missing required data: portfolio and price history must be loaded first')

    decisions: List[TradeDecision] = []
    for pair in ctx.config.token_pairs:
        position = ctx.portfolio.open_position_for(pair)
        if position is not None:
            amount = float(position.total_base_amount)
        else:
            amount = calculate_trade_amount(ctx, pair)

        evaluation = strategy.evaluate(ctx, pair, amount)
        logger.info(evaluation.description)
        decisions.append(
            TradeDecision(
                should_open=evaluation.should_open,
                should_close=evaluation.should_close,
                amount=amount,
                description=evaluation.description,
                token_pair=TokenPair(_priced(ctx, pair.from_token), _priced(ctx, pair.to_token)),
                strategy_assignment_id=ctx.strategy_assignment.id,
                position=position if evaluation.should_close else None,
            )
        )
    return decisions


__all__ = ['evaluate_trade_decisions']
