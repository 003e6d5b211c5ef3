"""Persists the outcome of swaps as transactions and positions."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Optional, Tuple

from ..core.models import SwapDetails, Token, TradeDecision
from ..database import DatabaseManager
from ..database.models import (
    PositionCloseUpdate,
    PositionRecord,
    PositionStatus,
    TradeSide,
    TransactionRecord,
    TransactionStatus,
)
from ..errors import PositionNotFoundError
from .pricing import calculate_profit_loss, calculate_profit_loss_percentage

logger = logging.getLogger(__name__)


def amount_to_string(amount: float) -> str:
    """Plain decimal string without exponent notation."""

    text = format(Decimal(repr(float(amount))), 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return text or '0'


def _snapshot_price(token: Token) -> float:
    return float(getattr(token, 'price', 0.0) or 0.0)


class TransactionRecorder:
    """Turns executed swaps into transaction/position rows."""

    def __init__(
        self,
        database: DatabaseManager,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._database = database
        self._clock = clock or (lambda: datetime.now(tz=timezone.utc))

    async def record_open(
        self,
        decision: TradeDecision,
        swap: SwapDetails,
        prices: Tuple[float, float],
        tx_hash: str,
    ) -> Tuple[TransactionRecord, PositionRecord]:
        """Write an OPEN/BUY transaction and the position it creates."""

        source, destination = decision.swap_tokens()
        source_price, destination_price = prices
        now = self._clock()
        transaction = self._transaction(
            decision,
            side=TradeSide.BUY,
            status=TransactionStatus.OPEN,
            timestamp=now,
            source=source,
            destination=destination,
            source_amount=swap.input_amount,
            destination_amount=swap.output_amount,
            source_price=source_price,
            destination_price=destination_price,
            tx_hash=tx_hash,
        )
        position = PositionRecord(
            strategy_assignment_id=transaction.strategy_assignment_id,
            status=PositionStatus.OPEN,
            base_token_address=destination.address,
            base_token_symbol=destination.symbol,
            base_token_decimals=destination.decimals,
            base_token_logo_uri=destination.logo_uri,
            quote_token_address=source.address,
            quote_token_symbol=source.symbol,
            quote_token_decimals=source.decimals,
            quote_token_logo_uri=source.logo_uri,
            entry_price=destination_price,
            total_base_amount=amount_to_string(swap.output_amount),
            average_entry_price=destination_price,
            opened_at=now,
        )
        saved_transaction, saved_position = await asyncio.to_thread(
            self._database.record_open_trade,
            transaction,
            position,
        )
        logger.info(
            'Opened position %s: %s %s at %s',
            saved_position.id,
            saved_position.total_base_amount,
            destination.symbol,
            destination_price,
        )
        return saved_transaction, saved_position

    async def record_close(
        self,
        decision: TradeDecision,
        swap: SwapDetails,
        prices: Tuple[float, float],
        tx_hash: str,
    ) -> Tuple[TransactionRecord, PositionRecord]:
        """Write a CLOSED/SELL transaction and close the matching position."""

        position = decision.position
        if position is None or position.id is None:
            raise PositionNotFoundError('No open position to close')
        source, destination = decision.swap_tokens()
        exit_price, destination_price = prices
        position_amount = float(position.total_base_amount)
        profit_loss = calculate_profit_loss(
            swap.input_amount,
            exit_price,
            position_amount,
            position.entry_price,
        )
        profit_loss_percentage = calculate_profit_loss_percentage(
            profit_loss,
            position_amount,
            position.entry_price,
        )
        now = self._clock()
        transaction = self._transaction(
            decision,
            side=TradeSide.SELL,
            status=TransactionStatus.CLOSED,
            timestamp=now,
            source=source,
            destination=destination,
            source_amount=swap.input_amount,
            destination_amount=swap.output_amount,
            source_price=exit_price,
            destination_price=destination_price,
            tx_hash=tx_hash,
            profit_loss_usd=profit_loss,
            profit_loss_percentage=profit_loss_percentage,
        )
        update = PositionCloseUpdate(exit_price=exit_price, realized_pnl_usd=profit_loss, closed_at=now)
        saved_transaction, saved_position = await asyncio.to_thread(
            self._database.record_close_trade,
            transaction,
            position.id,
            update,
        )
        logger.info(
            'Closed position %s: pnl=%.4f USD (%.2f%%)',
            saved_position.id,
            profit_loss,
            profit_loss_percentage,
        )
        return saved_transaction, saved_position

    async def record_failure(
        self,
        decision: TradeDecision,
        reason: str,
        tx_hash: Optional[str] = None,
    ) -> Optional[TransactionRecord]:
        """Write a FAILED transaction; returns ``None`` when the decision is incomplete."""

        if decision.token_pair is None or not decision.strategy_assignment_id:
            logger.warning('Not recording failed trade without token pair or assignment: %s', reason)
            return None
        source, destination = decision.swap_tokens()
        transaction = self._transaction(
            decision,
            side=TradeSide.SELL if decision.should_close else TradeSide.BUY,
            status=TransactionStatus.FAILED,
            timestamp=self._clock(),
            source=source,
            destination=destination,
            source_amount=decision.amount,
            destination_amount=0.0,
            source_price=_snapshot_price(source),
            destination_price=_snapshot_price(destination),
            tx_hash=tx_hash,
            failure_reason=reason,
        )
        if decision.should_close and decision.position is not None:
            transaction.position_id = decision.position.id
        return await asyncio.to_thread(self._database.create_transaction, transaction)

    @staticmethod
    def _transaction(
        decision: TradeDecision,
        *,
        side: TradeSide,
        status: TransactionStatus,
        timestamp: datetime,
        source: Token,
        destination: Token,
        source_amount: float,
        destination_amount: float,
        source_price: float,
        destination_price: float,
        tx_hash: Optional[str],
        profit_loss_usd: Optional[float] = None,
        profit_loss_percentage: Optional[float] = None,
        failure_reason: Optional[str] = None,
    ) -> TransactionRecord:
        return TransactionRecord(
            strategy_assignment_id=decision.strategy_assignment_id or '',
            side=side,
            status=status,
            timestamp=timestamp,
            token_from_address=source.address,
            token_from_symbol=source.symbol,
            token_from_decimals=source.decimals,
            token_from_logo_uri=source.logo_uri,
            token_to_address=destination.address,
            token_to_symbol=destination.symbol,
            token_to_decimals=destination.decimals,
            token_to_logo_uri=destination.logo_uri,
            token_from_amount=amount_to_string(source_amount),
            token_to_amount=amount_to_string(destination_amount),
            token_from_price=source_price,
            token_to_price=destination_price,
            profit_loss_usd=profit_loss_usd,
            profit_loss_percentage=profit_loss_percentage,
            transaction_hash=tx_hash,
            failure_reason=failure_reason,
        )


__all__ = ['TransactionRecorder', 'amount_to_string']
