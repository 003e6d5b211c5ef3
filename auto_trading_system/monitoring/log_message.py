"""Human readable summary of one trading cycle."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from ..core.models import TradeResult, WalletPortfolioItem
from ..database.models import PositionRecord
from ..utils.formatters import format_currency

if TYPE_CHECKING:
    from ..core.context import TradingContext

SECTION_SEPARATOR = '\n--------------------------------\n'


def build_trading_context_log_message(ctx: 'TradingContext') -> str:
    sections = [
        _header_section(ctx),
        _portfolio_section(ctx),
        _open_positions_section(ctx),
        _trading_pairs_section(ctx),
        _trade_decisions_section(ctx),
        _transactions_section(ctx),
        _thought_section(ctx),
    ]
    return SECTION_SEPARATOR.join(sections)


def _header_section(ctx: 'TradingContext') -> str:
    assignment = ctx.strategy_assignment
    return '\n'.join(
        [
            'TRADING CONTEXT:',
            '--------------------------------',
            f'Agent:        {ctx.runtime.name}',
            f'AgentId:      {ctx.runtime.agent_id}',
            f'Cycle:        {ctx.cycle}',
            f'Wallet:       {ctx.public_key}',
            f'PaperTrading: {ctx.is_paper_trading}',
            f'Strategy:     {assignment.strategy_title} ({assignment.id})',
        ]
    )


def _format_portfolio_item(item: WalletPortfolioItem) -> str:
    return f'{item.symbol}: {item.ui_amount} @ ${item.price_usd:.4f} = {format_currency(item.value_usd)}'


def _portfolio_section(ctx: 'TradingContext') -> str:
    items = ctx.portfolio.wallet_portfolio_items if ctx.portfolio else []
    body = '\n'.join(_format_portfolio_item(item) for item in items) if items else 'None'
    return f'PORTFOLIO:\n{body}'


def _format_position(position: PositionRecord) -> str:
    return (
        f'{position.base_token_symbol}->{position.quote_token_symbol}: '
        f'Amount: {position.total_base_amount}, Entry: {position.entry_price}'
    )


def _open_positions_section(ctx: 'TradingContext') -> str:
    positions = ctx.portfolio.open_positions if ctx.portfolio else []
    body = '\n'.join(_format_position(position) for position in positions) if positions else 'None'
    return f'OPEN POSITIONS BEFORE:\n{body}'


def _trading_pairs_section(ctx: 'TradingContext') -> str:
    pairs = [
        f'{index}. {pair.to_token.symbol}/{pair.from_token.symbol}'
        for index, pair in enumerate(ctx.config.token_pairs, start=1)
    ]
    return 'TRADING PAIRS:\n' + ('\n'.join(pairs) if pairs else 'None')


def _trade_decisions_section(ctx: 'TradingContext') -> str:
    decisions = [
        f'{index}. {decision.description}'
        for index, decision in enumerate(ctx.trade_decisions, start=1)
    ]
    return 'TRADE DECISIONS:\n' + ('\n'.join(decisions) if decisions else 'None')


def _format_transaction(index: int, result: TradeResult) -> str:
    transaction = result.transaction
    lines: List[str] = [
        f'{index}. {transaction.token_from_symbol} -> {transaction.token_to_symbol}',
        f'   tokenFromAmount: {transaction.token_from_amount}',
        f'   tokenToAmount: {transaction.token_to_amount}',
        f'   Success: {result.success}',
        f'   TxId: {transaction.id}',
    ]
    if result.success:
        lines.append(f'   Hash: {transaction.transaction_hash}')
    else:
        lines.append(f'   Error: {result.error}')
    return '\n'.join(lines)


def _transactions_section(ctx: 'TradingContext') -> str:
    recorded = [result for result in ctx.trade_results if result.transaction is not None]
    body = (
        '\n'.join(_format_transaction(index, result) for index, result in enumerate(recorded, start=1))
        if recorded
        else 'None'
    )
    return f'TRANSACTIONS:\n{body}'


def _thought_section(ctx: 'TradingContext') -> str:
    return f'THOUGHT:\n{ctx.thought or "None"}'


__all__ = ['build_trading_context_log_message', 'SECTION_SEPARATOR']
