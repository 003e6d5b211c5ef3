"""Price resolution and profit/loss arithmetic."""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from ..core.models import Token, TokenPriceHistory
from ..errors import MissingPriceHistoryError


def latest_price(price_history: Optional[Dict[str, TokenPriceHistory]], token: Token) -> float:
    """Most recent USD price of ``token``.

    Raises :class:`MissingPriceHistoryError` when no bars were loaded for it.
    """

    history = (price_history or {}).get(token.address)
    if history is None or history.latest_price is None:
        raise MissingPriceHistoryError(f'Missing price history for {token.symbol} ({token.address})')
    return history.latest_price


def resolve_token_prices(
    price_history: Optional[Dict[str, TokenPriceHistory]],
    source: Token,
    destination: Token,
) -> Tuple[float, float]:
    return latest_price(price_history, source), latest_price(price_history, destination)


def calculate_profit_loss(
    amount_sold: float,
    exit_price: float,
    position_amount: float,
    entry_price: float,
) -> float:
    """Realized P&L in USD: proceeds of the sale minus the cost basis."""

    return amount_sold * exit_price - position_amount * entry_price


def calculate_profit_loss_percentage(profit_loss: float, position_amount: float, entry_price: float) -> float:
    cost_basis = position_amount * entry_price
    if cost_basis <= 0:
        return 0.0
    return profit_loss / cost_basis * 100


__all__ = [
    'latest_price',
    'resolve_token_prices',
    'calculate_profit_loss',
    'calculate_profit_loss_percentage',
]
