"""Tests for :mod:`auto_trading_system.risk.position_sizer`."""

from __future__ import annotations

import pytest

from auto_trading_system.core import PortfolioState, TokenPair
from auto_trading_system.risk import calculate_trade_amount, floor_to_decimals

from factories import BONK, SOL, USDC, make_context, strategy_config_dict, wallet_item

PAIR = TokenPair(USDC, SOL)


def _context(items, allocation: float = 50):
    return make_context(
        config=strategy_config_dict(allocation=allocation),
        portfolio=PortfolioState(wallet_portfolio_items=items),
    )


def test_amount_is_allocation_share_of_balance() -> None:
    ctx = _context([wallet_item(USDC, 250.0, 1.0)], allocation=40)
    assert calculate_trade_amount(ctx, PAIR) == pytest.approx(100.0)


def test_amount_never_exceeds_balance() -> None:
    ctx = _context([wallet_item(USDC, 250.0, 1.0)], allocation=100)
    assert calculate_trade_amount(ctx, PAIR) == pytest.approx(250.0)


def test_amount_is_floored_to_token_decimals() -> None:
    ctx = _context([wallet_item(USDC, 0.3333339, 1.0)], allocation=100)
    assert calculate_trade_amount(ctx, PAIR) == pytest.approx(0.333333)


def test_missing_balance_or_portfolio_yields_zero() -> None:
    assert calculate_trade_amount(_context([wallet_item(BONK, 10.0, 1.0)]), PAIR) == 0.0
    assert calculate_trade_amount(make_context(), PAIR) == 0.0


def test_balance_is_matched_by_address() -> None:
    renamed = wallet_item(USDC, 10.0, 1.0)
    renamed.symbol = 'USDC.e'
    assert calculate_trade_amount(_context([renamed], allocation=50), PAIR) == pytest.approx(5.0)


def test_floor_to_decimals() -> None:
    assert floor_to_decimals(0.29, 2) == 0.29
    assert floor_to_decimals(1.999, 0) == 1.0
    assert floor_to_decimals(-1.0, 6) == 0.0
