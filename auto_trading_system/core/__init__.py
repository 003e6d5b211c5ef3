"""Domain types shared across the trading pipeline."""

from .context import AgentRuntime, CycleOutcome, TradingContext
from .models import (
    ExecutionState,
    MarketMetadata,
    PortfolioState,
    PricedToken,
    PricePoint,
    RsiConfig,
    SwapDetails,
    Token,
    TokenPair,
    TokenPriceHistory,
    TradeDecision,
    TradeResult,
    TradingStrategyConfig,
    WalletPortfolio,
    WalletPortfolioItem,
)

__all__ = [
    'AgentRuntime',
    'CycleOutcome',
    'TradingContext',
    'ExecutionState',
    'MarketMetadata',
    'PortfolioState',
    'PricedToken',
    'PricePoint',
    'RsiConfig',
    'SwapDetails',
    'Token',
    'TokenPair',
    'TokenPriceHistory',
    'TradeDecision',
    'TradeResult',
    'TradingStrategyConfig',
    'WalletPortfolio',
    'WalletPortfolioItem',
]
