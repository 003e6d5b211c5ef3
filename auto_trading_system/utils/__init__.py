"""Utility helpers."""

from .formatters import format_currency
from .helpers import RetryPolicy, clamp01
from .indicators import latest_rsi, relative_strength_index
from .timing import (
    UpdateInterval,
    interval_to_timedelta,
    is_supported_interval,
    update_interval_seconds,
)

__all__ = [
    'RetryPolicy',
    'clamp01',
    'format_currency',
    'latest_rsi',
    'relative_strength_index',
    'UpdateInterval',
    'interval_to_timedelta',
    'is_supported_interval',
    'update_interval_seconds',
]
