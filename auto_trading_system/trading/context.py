"""Trading context assembly."""

from __future__ import annotations

import asyncio
import logging

from ..config import Settings
from ..core.context import AgentRuntime, TradingContext
from ..core.models import TradingStrategyConfig
from ..database import DatabaseManager
from ..security.wallet import WalletDetailsProvider

logger = logging.getLogger(__name__)


async def build_trading_context(
    runtime: AgentRuntime,
    cycle: int,
    *,
    database: DatabaseManager,
    wallet_provider: WalletDetailsProvider,
    settings: Settings,
) -> TradingContext:
    """Resolve wallet secrets and the active strategy for ``runtime``.

    Raises :class:`~auto_trading_system.errors.WalletConfigurationError` or
    :class:`~auto_trading_system.errors.StrategyAssignmentNotFound`.
    """

    wallet = wallet_provider.get_agent_wallet_details(runtime, cycle)
    assignment = await asyncio.to_thread(database.find_active_assignment, runtime.agent_id)
    config = TradingStrategyConfig.from_dict(
        {
            'title': assignment.strategy_title,
            'type': assignment.strategy_type.value,
            **assignment.config,
        }
    )
    is_paper_trading = assignment.is_paper_trading or settings.force_paper_trading
    logger.info(
        'Cycle %d for %s: strategy %s (%s), paper=%s',
        cycle,
        runtime.name,
        assignment.strategy_title,
        assignment.id,
        is_paper_trading,
    )
    return TradingContext(
        runtime=runtime,
        cycle=cycle,
        public_key=wallet.public_key,
        private_key=wallet.private_key,
        strategy_assignment=assignment,
        config=config,
        is_paper_trading=is_paper_trading,
    )


__all__ = ['build_trading_context']
