"""Narrative memory entries written at the end of each cycle."""

from __future__ import annotations

import asyncio
import logging
import traceback
from typing import TYPE_CHECKING, Any, Dict, Optional, Protocol

from ..core.context import AgentRuntime
from ..database import DatabaseManager
from ..database.models import MemoryRecord, MemoryType

if TYPE_CHECKING:
    from ..core.context import TradingContext

logger = logging.getLogger(__name__)


class ThoughtGenerator(Protocol):
    async def generate(self, ctx: 'TradingContext') -> str:
        """Return a short narrative for the cycle."""


class DecisionSummaryThoughtGenerator:
    """Deterministic narrative built from the cycle's decisions and results."""

    async def generate(self, ctx: 'TradingContext') -> str:
        executed = [result for result in ctx.trade_results if result.success]
        failed = [result for result in ctx.trade_results if not result.success]
        if executed:
            action = f'Executed {len(executed)} trade(s)'
        else:
            action = 'Analyzed market conditions'
        parts = [f'{action} in cycle {ctx.cycle} for {ctx.config.title or "strategy"}.']
        if failed:
            parts.append(f'{len(failed)} trade(s) failed.')
        parts.extend(decision.description for decision in ctx.trade_decisions)
        return ' '.join(parts)


def _has_recorded_trade(ctx: 'TradingContext') -> bool:
    return any(result.transaction is not None for result in ctx.trade_results)


class MemoryRecorder:
    """Persists one memory per cycle (or per error) for an agent."""

    def __init__(
        self,
        database: DatabaseManager,
        thought_generator: Optional[ThoughtGenerator] = None,
    ) -> None:
        self._database = database
        self._fallback = DecisionSummaryThoughtGenerator()
        self._thoughts = thought_generator or self._fallback

    async def generate_thought(self, ctx: 'TradingContext') -> str:
        """Narrative for the cycle; a failing generator falls back to the decision summary."""
        try:
            return await self._thoughts.generate(ctx)
        except Exception as error:
            if self._thoughts is self._fallback:
                raise
            logger.warning('Thought generation failed for cycle %d, using decision summary: %s', ctx.cycle, error)
            return await self._fallback.generate(ctx)

    async def record_cycle(self, ctx: 'TradingContext') -> MemoryRecord:
        memory_type = MemoryType.TRADE if _has_recorded_trade(ctx) else MemoryType.IDLE
        message = ctx.thought or await self.generate_thought(ctx)
        content: Dict[str, Any] = {
            'type': memory_type.value,
            'cycle': ctx.cycle,
            'strategyAssignmentId': ctx.strategy_assignment.id,
            'isPaperTrading': ctx.is_paper_trading,
            'totalValue': ctx.portfolio.total_value if ctx.portfolio else None,
            'decisions': [decision.description for decision in ctx.trade_decisions],
            'transactions': [
                {
                    'id': result.transaction.id,
                    'status': result.transaction.status.value,
                    'hash': result.transaction.transaction_hash,
                }
                for result in ctx.trade_results
                if result.transaction is not None
            ],
        }
        record = MemoryRecord(
            agent_id=ctx.agent_id,
            memory_type=memory_type,
            message=message,
            content=content,
        )
        saved = await asyncio.to_thread(self._database.create_memory, record)
        logger.debug('Recorded %s memory %s for cycle %d', memory_type.value, saved.id, ctx.cycle)
        return saved

    async def record_error(self, runtime: AgentRuntime, error: BaseException, cycle: int) -> MemoryRecord:
        stack = ''.join(traceback.format_exception(type(error), error, error.__traceback__))
        record = MemoryRecord(
            agent_id=runtime.agent_id,
            memory_type=MemoryType.ERROR,
            message=f'Trading error: {error}',
            content={
                'type': MemoryType.ERROR.value,
                'cycle': cycle,
                'errorMessage': str(error),
                'errorType': error.__class__.__name__,
                'stack': stack,
            },
        )
        return await asyncio.to_thread(self._database.create_memory, record)


__all__ = ['MemoryRecorder', 'ThoughtGenerator', 'DecisionSummaryThoughtGenerator']
