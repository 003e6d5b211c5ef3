"""Tests for :mod:`auto_trading_system.exchanges.birdeye_service` against a local aiohttp app."""

from __future__ import annotations

import asyncio

import pytest
from aiohttp import test_utils, web

from auto_trading_system.config import BirdeyeConfig
from auto_trading_system.errors import BirdeyeAPIError
from auto_trading_system.exchanges import BirdeyeService


def _app(requests: list) -> web.Application:
    async def history_price(request: web.Request) -> web.Response:
        requests.append((request.path, dict(request.query), request.headers.get('X-API-KEY')))
        return web.json_response(
            {
                'success': True,
                'data': {
                    'items': [
                        {'unixTime': 1700000000, 'value': 1.5},
                        {'unixTime': 1700000900, 'value': 1.6},
                    ]
                },
            }
        )

    async def token_list(request: web.Request) -> web.Response:
        requests.append((request.path, dict(request.query), request.headers.get('x-chain')))
        return web.json_response(
            {
                'success': True,
                'data': {
                    'wallet': request.query['wallet'],
                    'totalUsd': 300.0,
                    'items': [
                        {
                            'address': 'mint-a',
                            'symbol': 'AAA',
                            'decimals': 6,
                            'balance': 100000000,
                            'uiAmount': 100.0,
                            'priceUsd': 3.0,
                            'valueUsd': 300.0,
                            'logoURI': 'https://logo.test/a.png',
                        }
                    ],
                },
            }
        )

    async def token_overview(request: web.Request) -> web.Response:
        if request.query['address'] == 'missing':
            return web.json_response({'success': False, 'message': 'not found'}, status=404)
        return web.json_response(
            {'success': True, 'data': {'liquidity': 12345.0, 'v24hUSD': 6789.0, 'price': 2.5}}
        )

    app = web.Application()
    app.router.add_get('/defi/history_price', history_price)
    app.router.add_get('/v1/wallet/token_list', token_list)
    app.router.add_get('/defi/token_overview', token_overview)
    return app


async def _with_service(scenario):
    requests: list = []
    async with test_utils.TestServer(_app(requests)) as server:
        service = BirdeyeService(BirdeyeConfig(api_key='secret', base_url=str(server.make_url('/'))))
        try:
            return await scenario(service), requests
        finally:
            await service.close()


def test_fetch_price_history_parses_items() -> None:
    async def scenario(service):
        return await service.fetch_price_history('mint-a', 'token', '15m', 100, 200)

    points, requests = asyncio.run(_with_service(scenario))

    assert [(point.unix_time, point.value) for point in points] == [(1700000000, 1.5), (1700000900, 1.6)]
    path, query, api_key = requests[0]
    assert path == '/defi/history_price'
    assert query == {
        'address': 'mint-a',
        'address_type': 'token',
        'type': '15m',
        'time_from': '100',
        'time_to': '200',
    }
    assert api_key == 'secret'


def test_wallet_portfolio_and_overview() -> None:
    async def scenario(service):
        portfolio = await service.get_wallet_portfolio('wallet-1')
        overview = await service.fetch_token_overview('mint-a')
        return portfolio, overview

    (portfolio, overview), requests = asyncio.run(_with_service(scenario))

    assert portfolio.wallet == 'wallet-1'
    assert portfolio.total_usd == 300.0
    [item] = portfolio.items
    assert (item.symbol, item.ui_amount, item.value_usd, item.logo_uri) == ('AAA', 100.0, 300.0, 'https://logo.test/a.png')
    assert requests[0][2] == 'solana'
    assert overview.liquidity_usd == 12345.0
    assert overview.volume_24h_usd == 6789.0
    assert overview.price_usd == 2.5


def test_http_errors_map_to_birdeye_error() -> None:
    async def scenario(service):
        with pytest.raises(BirdeyeAPIError) as excinfo:
            await service.fetch_token_overview('missing')
        return excinfo.value.status

    status, _ = asyncio.run(_with_service(scenario))
    assert status == 404


def test_missing_api_key_is_rejected() -> None:
    service = BirdeyeService(BirdeyeConfig(api_key=''))
    with pytest.raises(BirdeyeAPIError):
        asyncio.run(service.fetch_token_overview('mint-a'))
