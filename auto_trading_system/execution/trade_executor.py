"""Validates, executes and records trade decisions."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, List, Mapping, Optional, Tuple

from ..core.models import ExecutionState, MarketMetadata, Token, TradeDecision, TradeResult
from ..database.models import PAPER_TRANSACTION_HASH
from ..errors import PositionNotFoundError, SwapClientUnavailable, TradeExecutionError, TradeValidationError
from ..exchanges.swap_service import SwapClient, extract_swap_details, paper_swap_details
from ..risk.trade_validator import TradeValidator
from ..utils.helpers import RetryPolicy
from .pricing import resolve_token_prices
from .transaction_recorder import TransactionRecorder

if TYPE_CHECKING:
    from ..core.context import TradingContext

logger = logging.getLogger(__name__)

MISSING_TOKEN_PAIR = 'Cannot execute trade: missing tokenPair'
DEFAULT_EXPECTED_SLIPPAGE_PERCENT = 1.0


class TradeExecutor:
    """Runs each actionable decision through validation, the swap and bookkeeping.

    Paper trading never touches the swap client and records the all-zero hash.
    Live swaps are retried with :class:`RetryPolicy`; every failure ends as a
    FAILED transaction when the decision carries enough data to record one.
    """

    def __init__(
        self,
        recorder: TransactionRecorder,
        validator: TradeValidator | None = None,
        *,
        swap_client: Optional[SwapClient] = None,
        retry_policy: RetryPolicy | None = None,
        expected_slippage_percent: float = DEFAULT_EXPECTED_SLIPPAGE_PERCENT,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._recorder = recorder
        self._validator = validator or TradeValidator()
        self._swap_client = swap_client
        self._retry = retry_policy or RetryPolicy(max_attempts=3, base_delay=1.0, attempt_timeout=60.0)
        self._expected_slippage = expected_slippage_percent
        self._sleep = sleep

    async def execute_all(self, ctx: 'TradingContext', decisions: List[TradeDecision]) -> List[TradeResult]:
        """Execute actionable decisions concurrently; others produce no result."""

        actionable = [decision for decision in decisions if decision.is_actionable]
        if not actionable:
            return []
        return list(await asyncio.gather(*(self.execute(ctx, decision) for decision in actionable)))

    async def execute(self, ctx: 'TradingContext', decision: TradeDecision) -> TradeResult:
        state = ExecutionState.PENDING
        if decision.token_pair is None:
            logger.warning(MISSING_TOKEN_PAIR)
            return TradeResult(
                decision=decision,
                success=False,
                state=ExecutionState.FAILED,
                error=MISSING_TOKEN_PAIR,
                failed_state=state,
            )

        tx_hash: Optional[str] = None
        try:
            state = ExecutionState.VALIDATING
            source, destination = decision.swap_tokens()
            self._validate(ctx, decision, source, destination)

            state = ExecutionState.EXECUTING
            if ctx.is_paper_trading:
                tx_hash = PAPER_TRANSACTION_HASH
                swap = paper_swap_details(decision.amount, source, destination)
                logger.info(
                    'Paper swap %s %s -> %s',
                    decision.amount,
                    source.symbol,
                    destination.symbol,
                )
            else:
                tx_hash, transaction = await self._swap(decision, source, destination)
                swap = extract_swap_details(
                    transaction,
                    owner=ctx.public_key,
                    input_mint=source.address,
                    output_mint=destination.address,
                )

            state = ExecutionState.RECORDING
            prices = resolve_token_prices(ctx.price_history, source, destination)
            if decision.should_open:
                transaction_record, position = await self._recorder.record_open(decision, swap, prices, tx_hash)
            else:
                transaction_record, position = await self._recorder.record_close(decision, swap, prices, tx_hash)
        except Exception as error:
            return await self._fail(decision, state, error, tx_hash)

        return TradeResult(
            decision=decision,
            success=True,
            state=ExecutionState.SUCCEEDED,
            transaction=transaction_record,
            position=position,
            tx_hash=tx_hash,
        )

    def _validate(
        self,
        ctx: 'TradingContext',
        decision: TradeDecision,
        source: Token,
        destination: Token,
    ) -> None:
        if decision.should_close and decision.position is None:
            raise PositionNotFoundError(f'No open position to close for {decision.token_pair.label}')

        market = self._market_for(ctx, destination)
        liquidity = market.liquidity_usd if market else 0.0
        volume = market.volume_24h_usd if market else 0.0
        trust_score = market.trust_score if market else None

        result = self._validator.validate_trade_parameters(
            decision.amount,
            liquidity,
            volume,
            self._expected_slippage,
            trust_score,
        )
        if not result.is_valid:
            raise TradeValidationError(f'Trade validation failed: {result.reason}')

        amount_usd = decision.amount * self._source_price(ctx, source)
        result = self._validator.validate_position_size(amount_usd, liquidity)
        if not result.is_valid:
            raise TradeValidationError(f'Position size validation failed: {result.reason}')

    @staticmethod
    def _market_for(ctx: 'TradingContext', token: Token) -> Optional[MarketMetadata]:
        market = getattr(token, 'market', None)
        if market is not None:
            return market
        history = (ctx.price_history or {}).get(token.address)
        return history.market if history is not None else None

    @staticmethod
    def _source_price(ctx: 'TradingContext', token: Token) -> float:
        price = float(getattr(token, 'price', 0.0) or 0.0)
        if price > 0:
            return price
        history = (ctx.price_history or {}).get(token.address)
        if history is not None and history.latest_price is not None:
            return history.latest_price
        return 0.0

    async def _swap(
        self,
        decision: TradeDecision,
        source: Token,
        destination: Token,
    ) -> Tuple[str, Mapping[str, Any]]:
        client = self._swap_client
        if client is None:
            raise SwapClientUnavailable('Live trading requested but no swap client is configured')

        async def attempt() -> Tuple[str, Mapping[str, Any]]:
            tx_hash = await client.trade(source, decision.amount, destination)
            transaction = await client.get_transaction(tx_hash)
            if transaction is None:
                raise TradeExecutionError(f'Transaction {tx_hash} not found after swap')
            return tx_hash, transaction

        logger.info('Submitting swap %s %s -> %s', decision.amount, source.symbol, destination.symbol)
        return await self._retry.run(attempt, sleep=self._sleep)

    async def _fail(
        self,
        decision: TradeDecision,
        state: ExecutionState,
        error: Exception,
        tx_hash: Optional[str],
    ) -> TradeResult:
        reason = str(error) or error.__class__.__name__
        if isinstance(error, (TradeValidationError, PositionNotFoundError)):
            logger.warning('Trade rejected for %s: %s', decision.token_pair.label, reason)
        else:
            logger.exception('Trade failed for %s during %s: %s', decision.token_pair.label, state.value, reason)

        transaction = None
        try:
            transaction = await self._recorder.record_failure(decision, reason, tx_hash)
        except Exception as record_error:
            logger.error('Failed to record failed transaction: %s', record_error, exc_info=True)

        return TradeResult(
            decision=decision,
            success=False,
            state=ExecutionState.FAILED,
            transaction=transaction,
            tx_hash=tx_hash,
            error=reason,
            failed_state=state,
        )


__all__ = ['TradeExecutor', 'MISSING_TOKEN_PAIR']
