"""Per-cycle orchestration of the trading pipeline."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ..config import Settings
from ..core.context import AgentRuntime, CycleOutcome, TradingContext
from ..core.models import TradingStrategyConfig
from ..data.portfolio import PortfolioProvider
from ..data.price_history import PriceHistoryProvider
from ..database import DatabaseManager
from ..execution.trade_executor import TradeExecutor
from ..monitoring.log_message import build_trading_context_log_message
from ..monitoring.logger import log_block
from ..monitoring.memory import MemoryRecorder
from ..security.wallet import WalletDetailsProvider
from ..strategies.base_strategy import BaseStrategy
from ..strategies.rsi_strategy import build_strategy
from ..utils.timing import update_interval_seconds
from .context import build_trading_context
from .evaluate import evaluate_trade_decisions

logger = logging.getLogger(__name__)

StrategyFactory = Callable[[TradingStrategyConfig, Settings], BaseStrategy]


class TradingCycle:
    """Runs context -> data -> evaluation -> execution -> memory for one agent."""

    def __init__(
        self,
        settings: Settings,
        database: DatabaseManager,
        wallet_provider: WalletDetailsProvider,
        portfolio_provider: PortfolioProvider,
        price_history_provider: PriceHistoryProvider,
        executor: TradeExecutor,
        memory: MemoryRecorder,
        strategy_factory: StrategyFactory = build_strategy,
    ) -> None:
        self._settings = settings
        self._database = database
        self._wallet_provider = wallet_provider
        self._portfolio_provider = portfolio_provider
        self._price_history_provider = price_history_provider
        self._executor = executor
        self._memory = memory
        self._strategy_factory = strategy_factory

    async def run(self, runtime: AgentRuntime, cycle: int) -> CycleOutcome:
        """Run one cycle; failures are logged and stored as ERROR memories."""

        ctx: Optional[TradingContext] = None
        try:
            ctx = await build_trading_context(
                runtime,
                cycle,
                database=self._database,
                wallet_provider=self._wallet_provider,
                settings=self._settings,
            )
            strategy = self._strategy_factory(ctx.config, self._settings)

            ctx.portfolio, ctx.price_history = await asyncio.gather(
                self._portfolio_provider.get_portfolio(ctx.strategy_assignment.id, ctx.public_key),
                self._price_history_provider.get_price_history(ctx.config),
            )

            ctx.trade_decisions = evaluate_trade_decisions(ctx, strategy)
            ctx.trade_results = await self._executor.execute_all(ctx, ctx.trade_decisions)

            ctx.thought = await self._memory.generate_thought(ctx)
            ctx.log_message = build_trading_context_log_message(ctx)
            try:
                await self._memory.record_cycle(ctx)
            except Exception as error:
                logger.error('Failed to record cycle memory: %s', error, exc_info=True)
            log_block(logger, ctx.log_message)
            return CycleOutcome(success=True, context=ctx)
        except Exception as error:
            logger.error('Trading cycle %d failed: %s', cycle, error, exc_info=True)
            try:
                await self._memory.record_error(runtime, error, cycle)
            except Exception as memory_error:
                logger.error('Failed to record error memory: %s', memory_error, exc_info=True)
            return CycleOutcome(success=False, context=ctx, error=error)

    async def run_loop(
        self,
        runtime: AgentRuntime,
        *,
        cycles: Optional[int] = None,
        interval_seconds: Optional[float] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> int:
        """Run cycles back to back until ``cycles`` have completed.

        Returns the number of cycles that finished successfully.
        """

        if interval_seconds is None:
            interval_seconds = update_interval_seconds(self._settings.update_interval)
        succeeded = 0
        cycle = 0
        while cycles is None or cycle < cycles:
            cycle += 1
            outcome = await self.run(runtime, cycle)
            if outcome.success:
                succeeded += 1
            if cycles is not None and cycle >= cycles:
                break
            await sleep(interval_seconds)
        return succeeded


__all__ = ['TradingCycle', 'StrategyFactory']
