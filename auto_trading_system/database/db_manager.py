"""SQLAlchemy-backed persistence manager."""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import Select, create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from ..errors import PositionNotFoundError, StrategyAssignmentNotFound
from .models import (
    Base,
    Memory,
    MemoryRecord,
    MemoryType,
    Position,
    PositionCloseUpdate,
    PositionRecord,
    PositionStatus,
    StrategyAssignment,
    StrategyAssignmentRecord,
    StrategyType,
    TradeSide,
    TradingStrategy,
    Transaction,
    TransactionRecord,
    TransactionStatus,
)


def _as_utc(value: datetime) -> datetime:
    """Ensure datetimes are timezone-aware in UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _as_utc_or_none(value: Optional[datetime]) -> Optional[datetime]:
    return _as_utc(value) if value is not None else None


def _new_id() -> str:
    return str(uuid.uuid4())


class DatabaseManager:
    """High level helper around a SQLAlchemy engine and session factory."""

    def __init__(self, database_url: str, *, echo: bool = False) -> None:
        self._database_url = database_url
        connect_args: dict[str, object] = {}
        if database_url.startswith('sqlite:///'):
            db_path = Path(database_url.replace('sqlite:///', '', 1))
            db_path.parent.mkdir(parents=True, exist_ok=True)
            connect_args['check_same_thread'] = False
        self._engine: Engine = create_engine(
            database_url,
            echo=echo,
            future=True,
            connect_args=connect_args,
        )
        self._session_factory = sessionmaker(
            self._engine,
            expire_on_commit=False,
            future=True,
        )
        self.create_schema()

    def create_schema(self) -> None:
        """Create database tables if they do not already exist."""

        Base.metadata.create_all(self._engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Context manager returning a database session with automatic commit."""

        session: Session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # strategies -------------------------------------------------------------

    def create_strategy_assignment(
        self,
        agent_id: str,
        config: Dict[str, Any],
        *,
        title: str,
        strategy_type: StrategyType = StrategyType.RSI,
        is_paper_trading: bool = True,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> StrategyAssignmentRecord:
        """Create a strategy and make it the agent's only active assignment."""

        now = datetime.now(tz=timezone.utc)
        strategy = TradingStrategy(
            id=_new_id(),
            title=title,
            type=StrategyType(strategy_type).value,
            created_at=now,
        )
        assignment = StrategyAssignment(
            id=_new_id(),
            agent_id=agent_id,
            strategy_id=strategy.id,
            config=config,
            is_active=True,
            is_paper_trading=is_paper_trading,
            start_date=_as_utc(start_date or now),
            end_date=_as_utc_or_none(end_date),
        )
        with self.session() as session:
            previous = session.execute(
                select(StrategyAssignment).where(
                    StrategyAssignment.agent_id == agent_id,
                    StrategyAssignment.is_active.is_(True),
                )
            ).scalars()
            for row in previous:
                row.is_active = False
                row.end_date = now
            session.add(strategy)
            session.flush()
            session.add(assignment)
        return self._assignment_record(assignment, strategy)

    def find_active_assignment(self, agent_id: str) -> StrategyAssignmentRecord:
        """Return the agent's active assignment or raise when there is none."""

        stmt = (
            select(StrategyAssignment, TradingStrategy)
            .join(TradingStrategy, TradingStrategy.id == StrategyAssignment.strategy_id)
            .where(
                StrategyAssignment.agent_id == agent_id,
                StrategyAssignment.is_active.is_(True),
            )
            .order_by(StrategyAssignment.start_date.desc())
            .limit(1)
        )
        with self.session() as session:
            row = session.execute(stmt).first()
        if row is None:
            raise StrategyAssignmentNotFound(f'No active strategy assignment for agent {agent_id}')
        assignment, strategy = row
        return self._assignment_record(assignment, strategy)

    # positions --------------------------------------------------------------

    def find_open_positions(self, strategy_assignment_id: str) -> List[PositionRecord]:
        """Return OPEN positions for an assignment ordered by opening time."""

        stmt: Select[tuple[Position]] = (
            select(Position)
            .where(
                Position.strategy_assignment_id == strategy_assignment_id,
                Position.status == PositionStatus.OPEN.value,
            )
            .order_by(Position.opened_at)
        )
        with self.session() as session:
            rows = session.execute(stmt).scalars().all()
        return [self._position_record(row) for row in rows]

    # transactions -----------------------------------------------------------

    def create_transaction(self, transaction: TransactionRecord) -> TransactionRecord:
        with self.session() as session:
            row = self._transaction_row(transaction)
            session.add(row)
        return self._transaction_record(row)

    def record_open_trade(
        self,
        transaction: TransactionRecord,
        position: PositionRecord,
    ) -> tuple[TransactionRecord, PositionRecord]:
        """Persist an opening transaction and its new position atomically."""

        with self.session() as session:
            position_row = self._position_row(position)
            session.add(position_row)
            session.flush()
            transaction.position_id = position_row.id
            transaction_row = self._transaction_row(transaction)
            session.add(transaction_row)
        return self._transaction_record(transaction_row), self._position_record(position_row)

    def record_close_trade(
        self,
        transaction: TransactionRecord,
        position_id: str,
        update: PositionCloseUpdate,
    ) -> tuple[TransactionRecord, PositionRecord]:
        """Persist a closing transaction and close the position atomically."""

        with self.session() as session:
            position_row = self._close_position_row(session, position_id, update)
            transaction.position_id = position_row.id
            transaction_row = self._transaction_row(transaction)
            session.add(transaction_row)
        return self._transaction_record(transaction_row), self._position_record(position_row)

    def list_transactions(self, strategy_assignment_id: str) -> List[TransactionRecord]:
        stmt: Select[tuple[Transaction]] = (
            select(Transaction)
            .where(Transaction.strategy_assignment_id == strategy_assignment_id)
            .order_by(Transaction.timestamp)
        )
        with self.session() as session:
            rows = session.execute(stmt).scalars().all()
        return [self._transaction_record(row) for row in rows]

    # memories ---------------------------------------------------------------

    def create_memory(self, memory: MemoryRecord) -> MemoryRecord:
        row = Memory(
            id=memory.id or _new_id(),
            agent_id=memory.agent_id,
            memory_type=MemoryType(memory.memory_type).value,
            message=memory.message,
            content=memory.content,
            created_at=_as_utc(memory.created_at or datetime.now(tz=timezone.utc)),
        )
        with self.session() as session:
            session.add(row)
        return self._memory_record(row)

    def list_memories(self, agent_id: str, limit: int = 50) -> List[MemoryRecord]:
        if limit <= 0:
            return []
        stmt: Select[tuple[Memory]] = (
            select(Memory)
            .where(Memory.agent_id == agent_id)
            .order_by(Memory.created_at.desc())
            .limit(limit)
        )
        with self.session() as session:
            rows = session.execute(stmt).scalars().all()
        return [self._memory_record(row) for row in reversed(rows)]

    def close(self) -> None:
        """Dispose of the underlying engine and connection pool."""

        self._engine.dispose()

    # mapping ----------------------------------------------------------------

    @staticmethod
    def _close_position_row(session: Session, position_id: str, update: PositionCloseUpdate) -> Position:
        row = session.get(Position, position_id)
        if row is None:
            raise PositionNotFoundError(f'Position {position_id} not found')
        if row.status != PositionStatus.OPEN.value:
            raise PositionNotFoundError(f'Position {position_id} is already {row.status}')
        row.status = PositionStatus.CLOSED.value
        row.exit_price = update.exit_price
        row.realized_pnl_usd = update.realized_pnl_usd
        row.closed_at = _as_utc(update.closed_at)
        return row

    @staticmethod
    def _assignment_record(
        assignment: StrategyAssignment,
        strategy: TradingStrategy,
    ) -> StrategyAssignmentRecord:
        return StrategyAssignmentRecord(
            id=assignment.id,
            agent_id=assignment.agent_id,
            strategy_id=strategy.id,
            strategy_title=strategy.title,
            strategy_type=StrategyType(strategy.type),
            config=dict(assignment.config or {}),
            is_active=assignment.is_active,
            is_paper_trading=assignment.is_paper_trading,
            start_date=_as_utc(assignment.start_date),
            end_date=_as_utc_or_none(assignment.end_date),
        )

    @staticmethod
    def _position_row(position: PositionRecord) -> Position:
        return Position(
            id=position.id or _new_id(),
            strategy_assignment_id=position.strategy_assignment_id,
            status=PositionStatus(position.status).value,
            base_token_address=position.base_token_address,
            base_token_symbol=position.base_token_symbol,
            base_token_decimals=position.base_token_decimals,
            base_token_logo_uri=position.base_token_logo_uri,
            quote_token_address=position.quote_token_address,
            quote_token_symbol=position.quote_token_symbol,
            quote_token_decimals=position.quote_token_decimals,
            quote_token_logo_uri=position.quote_token_logo_uri,
            entry_price=position.entry_price,
            exit_price=position.exit_price,
            total_base_amount=position.total_base_amount,
            average_entry_price=position.average_entry_price,
            realized_pnl_usd=position.realized_pnl_usd,
            total_fees_usd=position.total_fees_usd,
            opened_at=_as_utc(position.opened_at),
            closed_at=_as_utc_or_none(position.closed_at),
        )

    @staticmethod
    def _position_record(row: Position) -> PositionRecord:
        return PositionRecord(
            id=row.id,
            strategy_assignment_id=row.strategy_assignment_id,
            status=PositionStatus(row.status),
            base_token_address=row.base_token_address,
            base_token_symbol=row.base_token_symbol,
            base_token_decimals=row.base_token_decimals,
            base_token_logo_uri=row.base_token_logo_uri,
            quote_token_address=row.quote_token_address,
            quote_token_symbol=row.quote_token_symbol,
            quote_token_decimals=row.quote_token_decimals,
            quote_token_logo_uri=row.quote_token_logo_uri,
            entry_price=row.entry_price,
            exit_price=row.exit_price,
            total_base_amount=row.total_base_amount,
            average_entry_price=row.average_entry_price,
            realized_pnl_usd=row.realized_pnl_usd,
            total_fees_usd=row.total_fees_usd,
            opened_at=_as_utc(row.opened_at),
            closed_at=_as_utc_or_none(row.closed_at),
        )

    @staticmethod
    def _transaction_row(transaction: TransactionRecord) -> Transaction:
        return Transaction(
            id=transaction.id or _new_id(),
            strategy_assignment_id=transaction.strategy_assignment_id,
            position_id=transaction.position_id,
            side=TradeSide(transaction.side).value,
            status=TransactionStatus(transaction.status).value,
            timestamp=_as_utc(transaction.timestamp),
            token_from_address=transaction.token_from_address,
            token_from_symbol=transaction.token_from_symbol,
            token_from_decimals=transaction.token_from_decimals,
            token_from_logo_uri=transaction.token_from_logo_uri,
            token_to_address=transaction.token_to_address,
            token_to_symbol=transaction.token_to_symbol,
            token_to_decimals=transaction.token_to_decimals,
            token_to_logo_uri=transaction.token_to_logo_uri,
            token_from_amount=transaction.token_from_amount,
            token_to_amount=transaction.token_to_amount,
            token_from_price=transaction.token_from_price,
            token_to_price=transaction.token_to_price,
            fees_in_usd=transaction.fees_in_usd,
            profit_loss_usd=transaction.profit_loss_usd,
            profit_loss_percentage=transaction.profit_loss_percentage,
            transaction_hash=transaction.transaction_hash,
            failure_reason=transaction.failure_reason,
        )

    @staticmethod
    def _transaction_record(row: Transaction) -> TransactionRecord:
        return TransactionRecord(
            id=row.id,
            strategy_assignment_id=row.strategy_assignment_id,
            position_id=row.position_id,
            side=TradeSide(row.side),
            status=TransactionStatus(row.status),
            timestamp=_as_utc(row.timestamp),
            token_from_address=row.token_from_address,
            token_from_symbol=row.token_from_symbol,
            token_from_decimals=row.token_from_decimals,
            token_from_logo_uri=row.token_from_logo_uri,
            token_to_address=row.token_to_address,
            token_to_symbol=row.token_to_symbol,
            token_to_decimals=row.token_to_decimals,
            token_to_logo_uri=row.token_to_logo_uri,
            token_from_amount=row.token_from_amount,
            token_to_amount=row.token_to_amount,
            token_from_price=row.token_from_price,
            token_to_price=row.token_to_price,
            fees_in_usd=row.fees_in_usd,
            profit_loss_usd=row.profit_loss_usd,
            profit_loss_percentage=row.profit_loss_percentage,
            transaction_hash=row.transaction_hash,
            failure_reason=row.failure_reason,
        )

    @staticmethod
    def _memory_record(row: Memory) -> MemoryRecord:
        return MemoryRecord(
            id=row.id,
            agent_id=row.agent_id,
            memory_type=MemoryType(row.memory_type),
            message=row.message,
            content=dict(row.content or {}),
            created_at=_as_utc(row.created_at),
        )


__all__ = ['DatabaseManager']
