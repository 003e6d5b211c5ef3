"""SQLAlchemy ORM models and typed records for persistence."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

PAPER_TRANSACTION_HASH = '0' * 64


class PositionStatus(str, enum.Enum):
    OPEN = 'OPEN'
    CLOSED = 'CLOSED'


class TransactionStatus(str, enum.Enum):
    OPEN = 'OPEN'
    CLOSED = 'CLOSED'
    FAILED = 'FAILED'


class TradeSide(str, enum.Enum):
    BUY = 'BUY'
    SELL = 'SELL'


class MemoryType(str, enum.Enum):
    TRADE = 'TRADE'
    IDLE = 'IDLE'
    ERROR = 'ERROR'


class StrategyType(str, enum.Enum):
    RSI = 'RSI'


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class TradingStrategy(Base):
    """A named strategy definition that agents can be assigned to."""

    __tablename__ = 'trading_strategies'

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(128))
    type: Mapped[str] = mapped_column(String(24))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


class StrategyAssignment(Base):
    """Binds one agent wallet to a strategy configuration and trading mode."""

    __tablename__ = 'strategy_assignments'
    __table_args__ = (
        Index('ix_strategy_assignments_agent_active', 'agent_id', 'is_active'),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    agent_id: Mapped[str] = mapped_column(String(64))
    strategy_id: Mapped[str] = mapped_column(ForeignKey('trading_strategies.id'))
    config: Mapped[Dict[str, Any]] = mapped_column(JSON)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    is_paper_trading: Mapped[bool] = mapped_column(Boolean, default=True)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class Position(Base):
    """An open or closed holding of a pair's base token."""

    __tablename__ = 'positions'
    __table_args__ = (
        Index('ix_positions_assignment_status', 'strategy_assignment_id', 'status'),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    strategy_assignment_id: Mapped[str] = mapped_column(ForeignKey('strategy_assignments.id'))
    status: Mapped[str] = mapped_column(String(12))
    base_token_address: Mapped[str] = mapped_column(String(64))
    base_token_symbol: Mapped[str] = mapped_column(String(32))
    base_token_decimals: Mapped[int] = mapped_column(Integer)
    base_token_logo_uri: Mapped[str | None] = mapped_column(Text, nullable=True)
    quote_token_address: Mapped[str] = mapped_column(String(64))
    quote_token_symbol: Mapped[str] = mapped_column(String(32))
    quote_token_decimals: Mapped[int] = mapped_column(Integer)
    quote_token_logo_uri: Mapped[str | None] = mapped_column(Text, nullable=True)
    entry_price: Mapped[float] = mapped_column(Float)
    exit_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    total_base_amount: Mapped[str] = mapped_column(String(64))
    average_entry_price: Mapped[float] = mapped_column(Float)
    realized_pnl_usd: Mapped[float | None] = mapped_column(Float, nullable=True)
    total_fees_usd: Mapped[float] = mapped_column(Float, default=0.0)
    opened_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    closed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class Transaction(Base):
    """An immutable record of one swap attempt."""

    __tablename__ = 'transactions'

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    strategy_assignment_id: Mapped[str] = mapped_column(
        ForeignKey('strategy_assignments.id'), index=True
    )
    position_id: Mapped[str | None] = mapped_column(ForeignKey('positions.id'), nullable=True)
    side: Mapped[str] = mapped_column(String(8))
    status: Mapped[str] = mapped_column(String(12))
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    token_from_address: Mapped[str] = mapped_column(String(64))
    token_from_symbol: Mapped[str] = mapped_column(String(32))
    token_from_decimals: Mapped[int] = mapped_column(Integer)
    token_from_logo_uri: Mapped[str | None] = mapped_column(Text, nullable=True)
    token_to_address: Mapped[str] = mapped_column(String(64))
    token_to_symbol: Mapped[str] = mapped_column(String(32))
    token_to_decimals: Mapped[int] = mapped_column(Integer)
    token_to_logo_uri: Mapped[str | None] = mapped_column(Text, nullable=True)
    token_from_amount: Mapped[str] = mapped_column(String(64))
    token_to_amount: Mapped[str] = mapped_column(String(64))
    token_from_price: Mapped[float] = mapped_column(Float)
    token_to_price: Mapped[float] = mapped_column(Float)
    fees_in_usd: Mapped[float] = mapped_column(Float, default=0.0)
    profit_loss_usd: Mapped[float | None] = mapped_column(Float, nullable=True)
    profit_loss_percentage: Mapped[float | None] = mapped_column(Float, nullable=True)
    transaction_hash: Mapped[str | None] = mapped_column(String(128), nullable=True)
    failure_reason: Mapped[str | None] = mapped_column(Text, nullable=True)


class Memory(Base):
    """Narrative log entry written once per cycle."""

    __tablename__ = 'memories'

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    agent_id: Mapped[str] = mapped_column(String(64), index=True)
    memory_type: Mapped[str] = mapped_column(String(12))
    message: Mapped[str] = mapped_column(Text)
    content: Mapped[Dict[str, Any]] = mapped_column(JSON)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)


@dataclass(slots=True)
class StrategyAssignmentRecord:
    """Active assignment joined with its strategy definition."""

    id: str
    agent_id: str
    strategy_id: str
    strategy_title: str
    strategy_type: StrategyType
    config: Dict[str, Any]
    is_active: bool
    is_paper_trading: bool
    start_date: datetime
    end_date: Optional[datetime] = None


@dataclass(slots=True)
class PositionRecord:
    """Typed container for position persistence."""

    strategy_assignment_id: str
    status: PositionStatus
    base_token_address: str
    base_token_symbol: str
    base_token_decimals: int
    quote_token_address: str
    quote_token_symbol: str
    quote_token_decimals: int
    entry_price: float
    total_base_amount: str
    average_entry_price: float
    opened_at: datetime
    base_token_logo_uri: Optional[str] = None
    quote_token_logo_uri: Optional[str] = None
    exit_price: Optional[float] = None
    realized_pnl_usd: Optional[float] = None
    total_fees_usd: float = 0.0
    closed_at: Optional[datetime] = None
    id: Optional[str] = None

    @property
    def pair_key(self) -> tuple[str, str]:
        return (self.base_token_address, self.quote_token_address)


@dataclass(slots=True)
class TransactionRecord:
    """Typed container for transaction persistence."""

    strategy_assignment_id: str
    side: TradeSide
    status: TransactionStatus
    timestamp: datetime
    token_from_address: str
    token_from_symbol: str
    token_from_decimals: int
    token_to_address: str
    token_to_symbol: str
    token_to_decimals: int
    token_from_amount: str
    token_to_amount: str
    token_from_price: float
    token_to_price: float
    token_from_logo_uri: Optional[str] = None
    token_to_logo_uri: Optional[str] = None
    fees_in_usd: float = 0.0
    profit_loss_usd: Optional[float] = None
    profit_loss_percentage: Optional[float] = None
    transaction_hash: Optional[str] = None
    failure_reason: Optional[str] = None
    position_id: Optional[str] = None
    id: Optional[str] = None


@dataclass(slots=True)
class PositionCloseUpdate:
    """Fields written when a position transitions OPEN -> CLOSED."""

    exit_price: float
    realized_pnl_usd: float
    closed_at: datetime


@dataclass(slots=True)
class MemoryRecord:
    agent_id: str
    memory_type: MemoryType
    message: str
    content: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    id: Optional[str] = None


__all__ = [
    'PAPER_TRANSACTION_HASH',
    'PositionStatus',
    'TransactionStatus',
    'TradeSide',
    'MemoryType',
    'StrategyType',
    'Base',
    'TradingStrategy',
    'StrategyAssignment',
    'Position',
    'Transaction',
    'Memory',
    'StrategyAssignmentRecord',
    'PositionRecord',
    'TransactionRecord',
    'PositionCloseUpdate',
    'MemoryRecord',
]
