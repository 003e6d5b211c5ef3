"""Persistence layer exports."""

from .db_manager import DatabaseManager
from .models import (
    PAPER_TRANSACTION_HASH,
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

__all__ = [
    'DatabaseManager',
    'PAPER_TRANSACTION_HASH',
    'Base',
    'Memory',
    'MemoryRecord',
    'MemoryType',
    'Position',
    'PositionCloseUpdate',
    'PositionRecord',
    'PositionStatus',
    'StrategyAssignment',
    'StrategyAssignmentRecord',
    'StrategyType',
    'TradeSide',
    'TradingStrategy',
    'Transaction',
    'TransactionRecord',
    'TransactionStatus',
]
