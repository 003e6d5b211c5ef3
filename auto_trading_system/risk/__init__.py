"""Risk management tools."""

from .position_sizer import calculate_trade_amount, floor_to_decimals
from .trade_validator import TradeValidator, ValidationResult

__all__ = ['calculate_trade_amount', 'floor_to_decimals', 'TradeValidator', 'ValidationResult']
