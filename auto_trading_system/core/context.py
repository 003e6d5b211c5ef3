"""Per-cycle trading context."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..database.models import StrategyAssignmentRecord
from .models import PortfolioState, TokenPriceHistory, TradeDecision, TradeResult, TradingStrategyConfig


@dataclass(slots=True)
class AgentRuntime:
    """Identity and secrets of the agent running the loop."""

    agent_id: str
    name: str
    secrets: Dict[str, str] = field(default_factory=dict, repr=False)

    def get_secret(self, key: str) -> Optional[str]:
        value = self.secrets.get(key)
        return value or None


@dataclass(slots=True)
class TradingContext:
    """Mutable record threaded through one cycle; each stage fills its slice."""

    runtime: AgentRuntime
    cycle: int
    public_key: str
    private_key: str = field(repr=False)
    strategy_assignment: StrategyAssignmentRecord
    config: TradingStrategyConfig
    is_paper_trading: bool
    portfolio: Optional[PortfolioState] = None
    price_history: Optional[Dict[str, TokenPriceHistory]] = None
    trade_decisions: List[TradeDecision] = field(default_factory=list)
    trade_results: List[TradeResult] = field(default_factory=list)
    thought: Optional[str] = None
    log_message: Optional[str] = None

    @property
    def agent_id(self) -> str:
        return self.runtime.agent_id


@dataclass(slots=True)
class CycleOutcome:
    success: bool
    context: Optional[TradingContext] = None
    error: Optional[BaseException] = None


__all__ = ['AgentRuntime', 'TradingContext', 'CycleOutcome']
