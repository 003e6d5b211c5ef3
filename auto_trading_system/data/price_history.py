"""Historical price retrieval for the tokens of a strategy."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Protocol

from ..core.models import MarketMetadata, PricePoint, Token, TokenPriceHistory, TradingStrategyConfig
from ..errors import ProviderError
from ..utils.timing import interval_to_timedelta

logger = logging.getLogger(__name__)

DEFAULT_BARS = 100


class PriceService(Protocol):
    async def fetch_price_history(
        self,
        address: str,
        address_type: str,
        interval: str,
        time_from: int,
        time_to: int,
    ) -> List[PricePoint]:
        ...

    async def fetch_token_overview(self, address: str) -> MarketMetadata:
        ...


def unique_tokens(config: TradingStrategyConfig) -> List[Token]:
    """Tokens across all pairs, first occurrence wins, order preserved."""

    seen: Dict[str, Token] = {}
    for pair in config.token_pairs:
        for token in (pair.from_token, pair.to_token):
            seen.setdefault(token.address, token)
    return list(seen.values())


class PriceHistoryProvider:
    """Fetches a fixed window of bars for every unique token in a strategy."""

    def __init__(
        self,
        service: PriceService,
        *,
        bars: int = DEFAULT_BARS,
        fetch_market_data: bool = False,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        if bars <= 0:
            raise ValueError('bars must be positive')
        self._service = service
        self._bars = bars
        self._fetch_market_data = fetch_market_data
        self._clock = clock or (lambda: datetime.now(tz=timezone.utc))

    def window(self, interval: str) -> tuple[int, int]:
        """Return ``(time_from, time_to)`` in unix seconds ending now."""

        now = self._clock()
        start = now - interval_to_timedelta(interval) * self._bars
        return int(start.timestamp()), int(now.timestamp())

    async def get_price_history(self, config: TradingStrategyConfig) -> Dict[str, TokenPriceHistory]:
        tokens = unique_tokens(config)
        time_from, time_to = self.window(config.time_interval)
        logger.debug(
            'Fetching %d price series (%s) from %d to %d',
            len(tokens),
            config.time_interval,
            time_from,
            time_to,
        )
        series = await asyncio.gather(
            *(
                self._service.fetch_price_history(
                    token.address,
                    'token',
                    config.time_interval,
                    time_from,
                    time_to,
                )
                for token in tokens
            )
        )
        markets: List[Optional[MarketMetadata]] = [None] * len(tokens)
        if self._fetch_market_data:
            markets = list(await asyncio.gather(*(self._market_for(token) for token in tokens)))

        history: Dict[str, TokenPriceHistory] = {}
        for token, prices, market in zip(tokens, series, markets):
            if not prices:
                logger.warning('Empty price history for %s (%s)', token.symbol, token.address)
            history[token.address] = TokenPriceHistory(token=token, prices=list(prices), market=market)
        return history

    async def _market_for(self, token: Token) -> Optional[MarketMetadata]:
        try:
            return await self._service.fetch_token_overview(token.address)
        except ProviderError as error:
            logger.warning('Market overview unavailable for %s: %s', token.symbol, error)
            return None


__all__ = ['PriceHistoryProvider', 'PriceService', 'unique_tokens', 'DEFAULT_BARS']
