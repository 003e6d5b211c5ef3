"""Logging helpers."""

from __future__ import annotations

import logging
from typing import Iterable

_NOISY_LOGGERS = ('aiohttp.access', 'sqlalchemy.engine')


def configure_logging(
    level: str = 'INFO',
    *,
    include_timestamp: bool = True,
    quiet: Iterable[str] = _NOISY_LOGGERS,
) -> None:
    """Configure root logging handlers."""
    fmt = '%(asctime)s - %(name)s - %(levelname)s - %(message)s' if include_timestamp else '%(name)s - %(levelname)s - %(message)s'
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=fmt)
    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)


def log_block(logger: logging.Logger, message: str, *, level: int = logging.INFO) -> None:
    """Emit a multi-line block one line at a time so handlers keep the prefix."""
    for line in message.splitlines():
        logger.log(level, line)


__all__ = ['configure_logging', 'log_block']
