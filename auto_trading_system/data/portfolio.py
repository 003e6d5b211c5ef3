"""Portfolio snapshot assembly."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Protocol

from ..core.models import PortfolioState, WalletPortfolio
from ..database import DatabaseManager
from ..database.models import PositionRecord

logger = logging.getLogger(__name__)


class WalletService(Protocol):
    async def get_wallet_portfolio(self, public_key: str) -> WalletPortfolio:
        ...


class PortfolioProvider:
    """Combines open positions from the store with on-chain wallet balances."""

    def __init__(self, database: DatabaseManager, wallet_service: WalletService) -> None:
        self._database = database
        self._wallet_service = wallet_service

    async def get_portfolio(self, strategy_assignment_id: str, public_key: str) -> PortfolioState:
        positions, wallet = await asyncio.gather(
            self._open_positions(strategy_assignment_id),
            self._wallet_service.get_wallet_portfolio(public_key),
        )
        total_value = sum(item.value_usd for item in wallet.items)
        logger.debug(
            'Portfolio for %s: %d open positions, %d wallet items, $%.2f',
            strategy_assignment_id,
            len(positions),
            len(wallet.items),
            total_value,
        )
        return PortfolioState(
            open_positions=positions,
            wallet_portfolio_items=list(wallet.items),
            total_value=total_value,
        )

    async def _open_positions(self, strategy_assignment_id: str) -> List[PositionRecord]:
        return await asyncio.to_thread(self._database.find_open_positions, strategy_assignment_id)


__all__ = ['PortfolioProvider', 'WalletService']
