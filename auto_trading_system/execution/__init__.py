"""Trade execution layer."""

from .pricing import (
    calculate_profit_loss,
    calculate_profit_loss_percentage,
    latest_price,
    resolve_token_prices,
)
from .trade_executor import MISSING_TOKEN_PAIR, TradeExecutor
from .transaction_recorder import TransactionRecorder, amount_to_string

__all__ = [
    'TradeExecutor',
    'TransactionRecorder',
    'MISSING_TOKEN_PAIR',
    'amount_to_string',
    'calculate_profit_loss',
    'calculate_profit_loss_percentage',
    'latest_price',
    'resolve_token_prices',
]
