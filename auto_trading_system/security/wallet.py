"""Agent wallet secret resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from ..core.context import AgentRuntime
from ..errors import WalletConfigurationError

logger = logging.getLogger(__name__)

PRIVATE_KEY_SECRET = 'SOLANA_PRIVATE_KEY'
PUBLIC_KEY_SECRET = 'SOLANA_WALLET_PUBLIC_KEY'

Decryptor = Callable[[str], str]


def passthrough_decryptor(value: str) -> str:
    return value


@dataclass(frozen=True, slots=True)
class AgentWalletDetails:
    public_key: str
    private_key: str = field(repr=False)


class WalletDetailsProvider:
    """Reads wallet secrets from the runtime and decrypts the private key."""

    def __init__(self, decryptor: Optional[Decryptor] = None) -> None:
        self._decrypt = decryptor or passthrough_decryptor

    def get_agent_wallet_details(self, runtime: AgentRuntime, cycle: int) -> AgentWalletDetails:
        encrypted_private_key = runtime.get_secret(PRIVATE_KEY_SECRET)
        public_key = runtime.get_secret(PUBLIC_KEY_SECRET)
        if not encrypted_private_key or not public_key:
            raise WalletConfigurationError(
                f'Agent {runtime.agent_id} is missing {PRIVATE_KEY_SECRET} or {PUBLIC_KEY_SECRET}'
            )
        logger.debug('Resolved wallet %s for agent %s (cycle %d)', public_key, runtime.agent_id, cycle)
        return AgentWalletDetails(public_key=public_key, private_key=self._decrypt(encrypted_private_key))


__all__ = [
    'AgentWalletDetails',
    'WalletDetailsProvider',
    'passthrough_decryptor',
    'PRIVATE_KEY_SECRET',
    'PUBLIC_KEY_SECRET',
]
