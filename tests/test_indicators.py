"""Tests for :mod:`auto_trading_system.utils.indicators`."""

from __future__ import annotations

import math

import pytest

from auto_trading_system.utils import latest_rsi, relative_strength_index

from factories import RSI_25_SERIES, RSI_75_SERIES


def test_rsi_needs_period_plus_one_values() -> None:
    assert relative_strength_index([1.0, 2.0, 3.0, 4.0], 4) == []
    assert math.isnan(latest_rsi([1.0, 2.0, 3.0, 4.0], 4))
    assert len(relative_strength_index(range(1, 21), 14)) == 20 - 14


def test_rsi_simple_average_seed() -> None:
    assert latest_rsi(RSI_25_SERIES, 4) == pytest.approx(25.0)
    assert latest_rsi(RSI_75_SERIES, 4) == pytest.approx(75.0)


def test_rsi_wilder_smoothing_after_seed() -> None:
    values = RSI_25_SERIES + [9.0]
    # seed averages: gain 0.25, loss 0.75; next change +1
    avg_gain = (0.25 * 3 + 1.0) / 4
    avg_loss = (0.75 * 3 + 0.0) / 4
    expected = 100 - 100 / (1 + avg_gain / avg_loss)
    assert relative_strength_index(values, 4)[-1] == pytest.approx(expected)


def test_rsi_edge_values() -> None:
    assert latest_rsi([1.0, 2.0, 3.0], 2) == 100.0
    assert latest_rsi([5.0, 5.0, 5.0], 2) == 50.0
    assert latest_rsi([3.0, 2.0, 1.0], 2) == pytest.approx(0.0)


def test_rsi_rejects_non_positive_period() -> None:
    with pytest.raises(ValueError):
        relative_strength_index([1.0, 2.0], 0)
