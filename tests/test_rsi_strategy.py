"""Tests for :mod:`auto_trading_system.strategies.rsi_strategy`."""

from __future__ import annotations

import math

import pytest

from auto_trading_system.core import PortfolioState, RsiConfig, TokenPair, TradingStrategyConfig
from auto_trading_system.strategies import RsiStrategy, build_strategy

from factories import (
    RSI_25_SERIES,
    RSI_75_SERIES,
    SOL,
    USDC,
    history_for,
    make_context,
    open_position,
    settings,
    strategy_config_dict,
)

PAIR = TokenPair(USDC, SOL)


def _strategy(**setting_overrides) -> RsiStrategy:
    return RsiStrategy('rsi', settings(**setting_overrides), RsiConfig(length=4), '15m')


def _context(to_values, *, with_position: bool = False):
    positions = [open_position()] if with_position else []
    return make_context(
        portfolio=PortfolioState(open_positions=positions),
        price_history={
            USDC.address: history_for(USDC, [1.0] * len(to_values)),
            SOL.address: history_for(SOL, to_values),
        },
    )


def test_short_history_produces_no_signal() -> None:
    ctx = _context([10.0, 11.0, 12.0])
    result = _strategy(force_open_position=True).evaluate(ctx, PAIR, 5.0)

    assert math.isnan(result.current_rsi)
    assert result.should_open is False
    assert result.should_close is False
    assert result.open_proximity == 0.0
    assert result.close_proximity == 0.0
    assert 'RSI: n/a' in result.description


def test_missing_history_is_treated_as_short() -> None:
    ctx = make_context(portfolio=PortfolioState(), price_history={})
    result = _strategy().evaluate(ctx, PAIR, 0.0)
    assert result.has_signal is False


def test_oversold_without_position_opens() -> None:
    result = _strategy().evaluate(_context(RSI_25_SERIES), PAIR, 5.0)

    assert result.current_rsi == pytest.approx(25.0)
    assert result.should_open is True
    assert result.should_close is False
    assert result.has_open_position is False
    assert result.open_proximity == pytest.approx(5 / 30)
    assert result.close_proximity == 0.0


def test_overbought_with_position_closes() -> None:
    result = _strategy().evaluate(_context(RSI_75_SERIES, with_position=True), PAIR, 2.0)

    assert result.should_close is True
    assert result.should_open is False
    assert result.has_open_position is True
    assert result.close_proximity == pytest.approx(5 / 30)
    assert result.open_proximity == 0.0


def test_oversold_with_position_does_not_open_again() -> None:
    result = _strategy().evaluate(_context(RSI_25_SERIES, with_position=True), PAIR, 2.0)
    assert result.should_open is False
    assert result.should_close is False


def test_position_for_other_direction_is_ignored() -> None:
    ctx = _context(RSI_75_SERIES)
    ctx.portfolio = PortfolioState(open_positions=[open_position(base=USDC, quote=SOL)])
    result = _strategy().evaluate(ctx, PAIR, 2.0)
    assert result.has_open_position is False
    assert result.should_close is False


@pytest.mark.parametrize('with_position', [False, True])
def test_force_flags_keep_open_and_close_exclusive(with_position: bool) -> None:
    strategy = _strategy(force_open_position=True, force_close_position=True)
    result = strategy.evaluate(_context([10.0, 10.5, 10.0, 10.5, 10.0], with_position=with_position), PAIR, 1.0)

    assert not (result.should_open and result.should_close)
    assert result.should_open is (not with_position)
    assert result.should_close is with_position


def test_description_format() -> None:
    result = _strategy().evaluate(_context(RSI_25_SERIES), PAIR, 5.0)
    assert result.description == (
        'USDC ($1.00) / SOL ($8.00) - Interval: 15m - RSI: 25.00 - Overbought: 70 - '
        'Oversold: 30 - Should Open: true - Should Close: false - Open Proximity: 0.17 - '
        'Close Proximity: 0.00 - Amount: 5.0 - hasOpenPosition: false'
    )


def test_build_strategy_rejects_unknown_type() -> None:
    config = TradingStrategyConfig.from_dict({**strategy_config_dict(), 'type': 'MACD'})
    with pytest.raises(ValueError):
        build_strategy(config, settings())


def test_build_strategy_returns_rsi() -> None:
    config = TradingStrategyConfig.from_dict(strategy_config_dict())
    strategy = build_strategy(config, settings())
    assert isinstance(strategy, RsiStrategy)
    assert strategy.rsi_config.length == 4
