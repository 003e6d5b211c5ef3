"""Market and portfolio data layer."""

from .portfolio import PortfolioProvider
from .price_history import PriceHistoryProvider, unique_tokens

__all__ = ['PortfolioProvider', 'PriceHistoryProvider', 'unique_tokens']
