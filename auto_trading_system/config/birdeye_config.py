"""Birdeye data API settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

DEFAULT_BASE_URL = 'https://public-api.birdeye.so'
SUPPORTED_CHAINS = {'solana', 'ethereum', 'arbitrum', 'base', 'bsc', 'polygon'}


@dataclass
class BirdeyeConfig:
    """Normalized representation of Birdeye API configuration."""

    api_key: str
    chain: str = 'solana'
    base_url: str = DEFAULT_BASE_URL
    request_timeout: int = 10

    def __post_init__(self) -> None:
        if self.chain not in SUPPORTED_CHAINS:
            raise ValueError(f'Unsupported chain: {self.chain}')
        if self.request_timeout <= 0:
            raise ValueError('request_timeout must be positive')
        self.base_url = (self.base_url or DEFAULT_BASE_URL).rstrip('/')

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @property
    def headers(self) -> dict[str, str]:
        return {
            'accept': 'application/json',
            'x-chain': self.chain,
            'X-API-KEY': self.api_key,
        }

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> 'BirdeyeConfig':
        env = os.environ if environ is None else environ
        return cls(
            api_key=env.get('BIRDEYE_API_KEY', ''),
            chain=env.get('BIRDEYE_CHAIN', cls.chain),
            base_url=env.get('BIRDEYE_BASE_URL', cls.base_url),
            request_timeout=int(env.get('BIRDEYE_API_TIMEOUT', cls.request_timeout)),
        )


__all__ = ['BirdeyeConfig', 'DEFAULT_BASE_URL']
