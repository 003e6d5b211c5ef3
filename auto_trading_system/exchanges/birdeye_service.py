"""Shared Birdeye HTTP client management."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional

import aiohttp

from ..config import BirdeyeConfig
from ..core.models import MarketMetadata, PricePoint, WalletPortfolio, WalletPortfolioItem
from ..errors import BirdeyeAPIError

logger = logging.getLogger(__name__)


class BirdeyeService:
    """Lazily instantiates an aiohttp session for the Birdeye public API."""

    def __init__(self, config: BirdeyeConfig) -> None:
        self._config = config
        self._session: Optional[aiohttp.ClientSession] = None
        self._lock = asyncio.Lock()

    @property
    def config(self) -> BirdeyeConfig:
        return self._config

    async def session(self) -> aiohttp.ClientSession:
        async with self._lock:
            if self._session is None or self._session.closed:
                self._session = aiohttp.ClientSession(
                    headers=self._config.headers,
                    timeout=aiohttp.ClientTimeout(total=self._config.request_timeout),
                )
            return self._session

    async def close(self) -> None:
        async with self._lock:
            if self._session is not None:
                await self._session.close()
                self._session = None

    async def fetch_price_history(
        self,
        address: str,
        address_type: str,
        interval: str,
        time_from: int,
        time_to: int,
    ) -> List[PricePoint]:
        """Return the ``/defi/history_price`` series for one token or pair."""

        payload = await self._get(
            '/defi/history_price',
            {
                'address': address,
                'address_type': address_type,
                'type': interval,
                'time_from': time_from,
                'time_to': time_to,
            },
        )
        items = (payload.get('data') or {}).get('items') or []
        return [
            PricePoint(unix_time=int(item['unixTime']), value=float(item['value']))
            for item in items
            if item.get('value') is not None
        ]

    async def get_wallet_portfolio(self, public_key: str) -> WalletPortfolio:
        payload = await self._get('/v1/wallet/token_list', {'wallet': public_key})
        data = payload.get('data') or {}
        items = [WalletPortfolioItem.from_dict(item) for item in data.get('items') or []]
        return WalletPortfolio(
            wallet=str(data.get('wallet') or public_key),
            items=items,
            total_usd=float(data.get('totalUsd') or 0.0),
        )

    async def fetch_token_overview(self, address: str) -> MarketMetadata:
        payload = await self._get('/defi/token_overview', {'address': address})
        data = payload.get('data') or {}
        return MarketMetadata(
            liquidity_usd=float(data.get('liquidity') or 0.0),
            volume_24h_usd=float(data.get('v24hUSD') or 0.0),
            price_usd=None if data.get('price') is None else float(data['price']),
        )

    async def _get(self, path: str, params: Mapping[str, Any]) -> Dict[str, Any]:
        if not self._config.is_configured:
            raise BirdeyeAPIError('BIRDEYE_API_KEY is not configured')
        session = await self.session()
        url = f'{self._config.base_url}{path}'
        logger.debug('GET %s %s', url, dict(params))
        try:
            async with session.get(url, params={key: str(value) for key, value in params.items()}) as response:
                if response.status != 200:
                    body = await response.text()
                    raise BirdeyeAPIError(
                        f'HTTP error! status: {response.status} for {path}: {body[:200]}',
                        status=response.status,
                    )
                payload = await response.json()
        except aiohttp.ClientError as error:
            raise BirdeyeAPIError(f'Request to {path} failed: {error}') from error
        if not isinstance(payload, dict) or payload.get('success') is False:
            raise BirdeyeAPIError(f'Unsuccessful response from {path}: {payload!r}')
        return payload


__all__ = ['BirdeyeService']
