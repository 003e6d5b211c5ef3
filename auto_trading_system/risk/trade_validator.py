"""Pre-trade guardrails."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..config.trading_limits import DEFAULT_TRADING_LIMITS, TradingLimits


@dataclass(frozen=True, slots=True)
class ValidationResult:
    is_valid: bool
    reason: Optional[str] = None


_OK = ValidationResult(True)


class TradeValidator:
    """Checks a proposed trade against :class:`TradingLimits`.

    Checks run in a fixed order and the first failure is reported.
    """

    def __init__(self, limits: TradingLimits | None = None) -> None:
        self.limits = limits or DEFAULT_TRADING_LIMITS

    def with_overrides(self, **overrides: float) -> 'TradeValidator':
        return TradeValidator(self.limits.with_overrides(**overrides))

    def validate_trade_parameters(
        self,
        amount_in_sol: float,
        token_liquidity_usd: float,
        token_daily_volume_usd: float,
        expected_slippage: float,
        trust_score: float | None = None,
    ) -> ValidationResult:
        limits = self.limits
        if amount_in_sol < limits.min_trade_amount_sol:
            return ValidationResult(
                False,
                f'Trade amount too small: {amount_in_sol} < {limits.min_trade_amount_sol} minimum',
            )
        if token_liquidity_usd < limits.min_liquidity_usd:
            return ValidationResult(
                False,
                f'Insufficient liquidity: ${token_liquidity_usd:,.2f} < ${limits.min_liquidity_usd:,.2f} minimum',
            )
        if token_daily_volume_usd < limits.min_daily_volume_usd:
            return ValidationResult(
                False,
                f'Insufficient 24h volume: ${token_daily_volume_usd:,.2f} < ${limits.min_daily_volume_usd:,.2f} minimum',
            )
        if expected_slippage > limits.max_slippage_percent:
            return ValidationResult(
                False,
                f'Slippage too high: {expected_slippage}% > {limits.max_slippage_percent}% maximum',
            )
        if trust_score is not None and trust_score < limits.min_trust_score:
            return ValidationResult(
                False,
                f'Trust score too low: {trust_score} < {limits.min_trust_score} minimum',
            )
        return _OK

    def validate_position_size(self, amount_usd: float, token_liquidity_usd: float) -> ValidationResult:
        if token_liquidity_usd <= 0:
            return ValidationResult(False, 'Position size cannot be checked without liquidity')
        share = amount_usd / token_liquidity_usd * 100
        if share > self.limits.max_position_size_percent:
            return ValidationResult(
                False,
                f'Position size too large: {share:.2f}% of liquidity > '
                f'{self.limits.max_position_size_percent}% maximum',
            )
        return _OK


__all__ = ['TradeValidator', 'ValidationResult']
