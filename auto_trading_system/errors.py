"""Exception hierarchy shared across the trading pipeline."""

from __future__ import annotations


class TradingError(Exception):
    """Base class for all trading pipeline errors."""


class ConfigurationError(TradingError):
    """Raised when agent or strategy configuration is unusable."""


class WalletConfigurationError(ConfigurationError):
    """Raised when wallet secrets are missing for an agent."""


class StrategyAssignmentNotFound(ConfigurationError):
    """Raised when an agent has no active strategy assignment."""


class ProviderError(TradingError):
    """Raised when an external data provider fails."""


class BirdeyeAPIError(ProviderError):
    """Raised for non-successful responses from the Birdeye API."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class TradeValidationError(TradingError):
    """Raised when a decision fails pre-trade validation."""


class TradeExecutionError(TradingError):
    """Raised when a swap cannot be submitted or confirmed."""


class SwapClientUnavailable(TradeExecutionError):
    """Raised when live trading is requested without a swap client."""


class MissingPriceHistoryError(TradingError):
    """Raised when price history is missing for one leg of a pair."""


class SwapDetailsError(TradingError):
    """Raised when swap amounts cannot be derived from a transaction."""


class PositionNotFoundError(TradingError):
    """Raised when a close decision has no matching open position."""


__all__ = [
    'TradingError',
    'ConfigurationError',
    'WalletConfigurationError',
    'StrategyAssignmentNotFound',
    'ProviderError',
    'BirdeyeAPIError',
    'TradeValidationError',
    'TradeExecutionError',
    'SwapClientUnavailable',
    'MissingPriceHistoryError',
    'SwapDetailsError',
    'PositionNotFoundError',
]
