"""Indicator helpers."""

from __future__ import annotations

import math
from typing import Iterable, List


def relative_strength_index(values: Iterable[float], period: int) -> List[float]:
    """Wilder RSI.

    The first value is produced once ``period + 1`` prices are available; the
    result therefore has ``len(values) - period`` entries (or none).
    """
    values = list(values)
    if period <= 0:
        raise ValueError('period must be positive')
    if len(values) < period + 1:
        return []

    changes = [current - previous for previous, current in zip(values, values[1:])]
    gains = [max(change, 0.0) for change in changes]
    losses = [max(-change, 0.0) for change in changes]

    avg_gain = sum(gains[:period]) / period
    avg_loss = sum(losses[:period]) / period
    result: List[float] = [_rsi_from_averages(avg_gain, avg_loss)]
    for gain, loss in zip(gains[period:], losses[period:]):
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period
        result.append(_rsi_from_averages(avg_gain, avg_loss))
    return result


def latest_rsi(values: Iterable[float], period: int) -> float:
    """Most recent RSI value, or NaN when the series is too short."""
    series = relative_strength_index(values, period)
    return series[-1] if series else math.nan


def _rsi_from_averages(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        # flat series sits at the midpoint
        return 100.0 if avg_gain > 0 else 50.0
    relative_strength = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + relative_strength)


__all__ = ['relative_strength_index', 'latest_rsi']
