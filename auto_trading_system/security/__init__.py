"""Wallet secret handling."""

from .wallet import AgentWalletDetails, WalletDetailsProvider, passthrough_decryptor

__all__ = ['AgentWalletDetails', 'WalletDetailsProvider', 'passthrough_decryptor']
