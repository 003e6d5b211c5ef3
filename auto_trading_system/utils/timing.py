"""Bar-size and update cadence conversions."""

from __future__ import annotations

import enum
from datetime import timedelta

_TIME_INTERVALS = {
    '1m': timedelta(minutes=1),
    '3m': timedelta(minutes=3),
    '5m': timedelta(minutes=5),
    '15m': timedelta(minutes=15),
    '30m': timedelta(minutes=30),
    '1H': timedelta(hours=1),
    '2H': timedelta(hours=2),
    '4H': timedelta(hours=4),
    '6H': timedelta(hours=6),
    '8H': timedelta(hours=8),
    '12H': timedelta(hours=12),
    '1D': timedelta(days=1),
    '3D': timedelta(days=3),
    '1W': timedelta(weeks=1),
    '1M': timedelta(days=30),
}


class UpdateInterval(str, enum.Enum):
    CONTINUOUS = 'continuous'
    MINUTE = 'minute'
    HOUR = 'hour'
    DAY = 'day'


_UPDATE_INTERVALS = {
    UpdateInterval.CONTINUOUS: timedelta(0),
    UpdateInterval.MINUTE: timedelta(minutes=1),
    UpdateInterval.HOUR: timedelta(hours=1),
    UpdateInterval.DAY: timedelta(days=1),
}


def interval_to_timedelta(interval: str) -> timedelta:
    if interval not in _TIME_INTERVALS:
        raise ValueError(f'Unsupported interval: {interval}')
    return _TIME_INTERVALS[interval]


def update_interval_seconds(value: str | UpdateInterval) -> float:
    """Seconds between cycles; unknown values fall back to one minute."""
    try:
        interval = UpdateInterval(value)
    except ValueError:
        interval = UpdateInterval.MINUTE
    return _UPDATE_INTERVALS[interval].total_seconds()


def is_supported_interval(interval: str) -> bool:
    return interval in _TIME_INTERVALS


__all__ = [
    'UpdateInterval',
    'interval_to_timedelta',
    'update_interval_seconds',
    'is_supported_interval',
]
