"""Human readable number formatting for log lines."""

from __future__ import annotations

import math


def format_currency(amount: float | None, *, digits: int = 2, show_sign: bool = False) -> str:
    """Format as ``$1,234.56``; negatives are wrapped in parentheses."""
    if amount is None or math.isnan(amount):
        return 'n/a'
    formatted = f'${abs(amount):,.{digits}f}'
    if amount < 0:
        return f'({formatted})'
    return f'+{formatted}' if show_sign else formatted


__all__ = ['format_currency']
