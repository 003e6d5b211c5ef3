"""Tests for :mod:`auto_trading_system.data.portfolio`."""

from __future__ import annotations

import asyncio

import pytest

from auto_trading_system.core import TokenPair
from auto_trading_system.data import PortfolioProvider

from factories import SOL, USDC, StubWalletService, open_position, wallet_item


class StubPositionStore:
    def __init__(self, positions) -> None:
        self.positions = positions
        self.calls: list[str] = []

    def find_open_positions(self, strategy_assignment_id: str):
        self.calls.append(strategy_assignment_id)
        return list(self.positions)


def test_portfolio_combines_positions_and_wallet() -> None:
    store = StubPositionStore([open_position()])
    wallet = StubWalletService([wallet_item(USDC, 100.0, 1.0), wallet_item(SOL, 2.0, 150.0)])
    provider = PortfolioProvider(store, wallet)

    portfolio = asyncio.run(provider.get_portfolio('assignment-1', 'wallet-public-key'))

    assert store.calls == ['assignment-1']
    assert wallet.calls == ['wallet-public-key']
    assert portfolio.total_value == pytest.approx(400.0)
    assert portfolio.open_position_for(TokenPair(USDC, SOL)).id == 'position-1'
    assert portfolio.open_position_for(TokenPair(SOL, USDC)) is None
    assert portfolio.wallet_item_for(SOL).ui_amount == 2.0


def test_empty_portfolio_is_valid() -> None:
    provider = PortfolioProvider(StubPositionStore([]), StubWalletService([]))
    portfolio = asyncio.run(provider.get_portfolio('assignment-1', 'key'))
    assert portfolio.open_positions == []
    assert portfolio.wallet_portfolio_items == []
    assert portfolio.total_value == 0.0


def test_wallet_errors_propagate() -> None:
    class BrokenWallet:
        async def get_wallet_portfolio(self, public_key):
            raise ConnectionError('wallet service down')

    provider = PortfolioProvider(StubPositionStore([]), BrokenWallet())
    with pytest.raises(ConnectionError):
        asyncio.run(provider.get_portfolio('assignment-1', 'key'))
