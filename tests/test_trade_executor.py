"""Integration-style tests for :mod:`auto_trading_system.execution.trade_executor`."""

from __future__ import annotations

import asyncio

import pytest

from auto_trading_system.core import ExecutionState, PortfolioState, PricedToken, TokenPair, TradeDecision
from auto_trading_system.database import (
    PAPER_TRANSACTION_HASH,
    PositionStatus,
    TradeSide,
    TransactionStatus,
)
from auto_trading_system.execution import TradeExecutor, TransactionRecorder
from auto_trading_system.utils import RetryPolicy

from factories import (
    BONK,
    DEEP_MARKET,
    SOL,
    USDC,
    StubSwapClient,
    confirmed_swap,
    history_for,
    make_context,
    no_sleep,
    strategy_config_dict,
)


def _assignment(database, *, paper: bool = True):
    return database.create_strategy_assignment(
        'agent-1',
        strategy_config_dict(),
        title='RSI test',
        is_paper_trading=paper,
    )


def _context(assignment, *, sol_price: float = 100.0, paper: bool = True, include_sol: bool = True):
    history = {USDC.address: history_for(USDC, [1.0])}
    if include_sol:
        history[SOL.address] = history_for(SOL, [sol_price])
    return make_context(
        assignment=assignment,
        portfolio=PortfolioState(),
        price_history=history,
        paper=paper,
    )


def _pair(sol_price: float = 100.0) -> TokenPair:
    return TokenPair(
        PricedToken.from_token(USDC, 1.0, DEEP_MARKET),
        PricedToken.from_token(SOL, sol_price, DEEP_MARKET),
    )


def _open_decision(assignment, amount: float = 50.0) -> TradeDecision:
    return TradeDecision(
        should_open=True,
        should_close=False,
        amount=amount,
        description='open SOL',
        token_pair=_pair(),
        strategy_assignment_id=assignment.id,
    )


def _executor(database, **kwargs) -> TradeExecutor:
    kwargs.setdefault('retry_policy', RetryPolicy(max_attempts=3, base_delay=1.0))
    kwargs.setdefault('sleep', no_sleep)
    return TradeExecutor(TransactionRecorder(database), **kwargs)


def test_paper_open_uses_zero_hash_and_creates_position(database) -> None:
    assignment = _assignment(database)
    swap_client = StubSwapClient()
    executor = _executor(database, swap_client=swap_client)

    result = asyncio.run(executor.execute(_context(assignment), _open_decision(assignment)))

    assert result.success is True
    assert result.state is ExecutionState.SUCCEEDED
    assert result.tx_hash == PAPER_TRANSACTION_HASH
    assert swap_client.trades == []

    transaction = result.transaction
    assert transaction.side is TradeSide.BUY
    assert transaction.status is TransactionStatus.OPEN
    assert transaction.transaction_hash == '0' * 64
    assert transaction.token_from_address == USDC.address
    assert transaction.token_to_address == SOL.address
    assert transaction.token_from_amount == '50'
    assert transaction.token_to_amount == '0.5'
    assert transaction.profit_loss_usd is None
    assert transaction.position_id == result.position.id

    [position] = database.find_open_positions(assignment.id)
    assert position.base_token_address == SOL.address
    assert position.quote_token_address == USDC.address
    assert position.entry_price == pytest.approx(100.0)
    assert position.total_base_amount == '0.5'


def test_close_computes_realized_profit_and_closes_position(database) -> None:
    assignment = _assignment(database)
    executor = _executor(database)
    opened = asyncio.run(executor.execute(_context(assignment), _open_decision(assignment)))

    close = TradeDecision(
        should_open=False,
        should_close=True,
        amount=0.5,
        description='close SOL',
        token_pair=_pair(sol_price=120.0),
        strategy_assignment_id=assignment.id,
        position=opened.position,
    )
    result = asyncio.run(executor.execute(_context(assignment, sol_price=120.0), close))

    assert result.success is True
    transaction = result.transaction
    assert transaction.side is TradeSide.SELL
    assert transaction.status is TransactionStatus.CLOSED
    assert transaction.token_from_address == SOL.address
    assert transaction.token_to_address == USDC.address
    assert transaction.profit_loss_usd == pytest.approx(0.5 * 120.0 - 0.5 * 100.0)
    assert transaction.profit_loss_percentage == pytest.approx(20.0)

    closed = result.position
    assert closed.id == opened.position.id
    assert closed.status is PositionStatus.CLOSED
    assert closed.exit_price == pytest.approx(120.0)
    assert closed.realized_pnl_usd == pytest.approx(10.0)
    assert closed.closed_at is not None
    assert database.find_open_positions(assignment.id) == []


def test_missing_token_pair_fails_without_rows(database) -> None:
    assignment = _assignment(database)
    decision = TradeDecision(
        should_open=True,
        should_close=False,
        amount=1.0,
        description='broken',
        strategy_assignment_id=assignment.id,
    )

    result = asyncio.run(_executor(database).execute(_context(assignment), decision))

    assert result.success is False
    assert result.state is ExecutionState.FAILED
    assert 'missing tokenPair' in result.error
    assert database.list_transactions(assignment.id) == []
    assert database.find_open_positions(assignment.id) == []


def test_one_validation_failure_does_not_block_others(database) -> None:
    assignment = _assignment(database)
    decisions = [
        _open_decision(assignment, amount=0.00001),
        _open_decision(assignment, amount=50.0),
        TradeDecision(False, False, 0.0, 'idle', token_pair=_pair(), strategy_assignment_id=assignment.id),
    ]

    results = asyncio.run(_executor(database).execute_all(_context(assignment), decisions))

    assert [result.success for result in results] == [False, True]
    assert results[0].failed_state is ExecutionState.VALIDATING
    assert results[0].error.startswith('Trade validation failed:')
    statuses = sorted(row.status.value for row in database.list_transactions(assignment.id))
    assert statuses == ['FAILED', 'OPEN']
    failed = next(row for row in database.list_transactions(assignment.id) if row.status is TransactionStatus.FAILED)
    assert failed.failure_reason.startswith('Trade validation failed:')
    assert failed.profit_loss_usd is None


def test_live_swap_retries_until_success(database) -> None:
    assignment = _assignment(database, paper=False)
    swap_client = StubSwapClient(confirmed_swap(USDC, 50.0, SOL, 0.49), failures=2)
    executor = _executor(database, swap_client=swap_client)

    result = asyncio.run(executor.execute(_context(assignment, paper=False), _open_decision(assignment)))

    assert result.success is True
    assert len(swap_client.trades) == 3
    assert result.tx_hash == 'hash-3'
    [transaction] = database.list_transactions(assignment.id)
    assert transaction.status is TransactionStatus.OPEN
    assert transaction.transaction_hash == 'hash-3'
    assert transaction.token_to_amount == '0.49'


def test_live_swap_reads_wallet_amounts_next_to_pool_vaults(database) -> None:
    assignment = _assignment(database, paper=False)
    swap_client = StubSwapClient(confirmed_swap(USDC, 50.0, SOL, 0.5))
    executor = _executor(database, swap_client=swap_client)

    result = asyncio.run(executor.execute(_context(assignment, paper=False), _open_decision(assignment)))

    assert result.success is True
    assert result.position.total_base_amount == '0.5'
    assert result.transaction.token_from_amount == '50'


def test_live_swap_with_unexpected_output_mint_fails(database) -> None:
    assignment = _assignment(database, paper=False)
    swap_client = StubSwapClient(confirmed_swap(USDC, 50.0, BONK, 1_000.0))
    executor = _executor(database, swap_client=swap_client)

    result = asyncio.run(executor.execute(_context(assignment, paper=False), _open_decision(assignment)))

    assert result.success is False
    assert result.tx_hash == 'hash-1'
    assert 'Unable to determine swap input and output amounts' in result.error
    assert database.find_open_positions(assignment.id) == []
    [transaction] = database.list_transactions(assignment.id)
    assert transaction.status is TransactionStatus.FAILED
    assert transaction.transaction_hash == 'hash-1'


def test_live_swap_exhaustion_records_failure(database) -> None:
    assignment = _assignment(database, paper=False)
    swap_client = StubSwapClient(confirmed_swap(USDC, 50.0, SOL, 0.5), failures=3)
    executor = _executor(database, swap_client=swap_client)

    result = asyncio.run(executor.execute(_context(assignment, paper=False), _open_decision(assignment)))

    assert result.success is False
    assert result.failed_state is ExecutionState.EXECUTING
    assert len(swap_client.trades) == 3
    [transaction] = database.list_transactions(assignment.id)
    assert transaction.status is TransactionStatus.FAILED
    assert 'swap attempt 3 failed' in transaction.failure_reason


def test_unconfirmed_transaction_is_retried_then_fails(database) -> None:
    assignment = _assignment(database, paper=False)
    swap_client = StubSwapClient(None)
    executor = _executor(database, swap_client=swap_client)

    result = asyncio.run(executor.execute(_context(assignment, paper=False), _open_decision(assignment)))

    assert result.success is False
    assert len(swap_client.trades) == 3
    assert 'not found' in result.error


def test_live_without_swap_client_fails(database) -> None:
    assignment = _assignment(database, paper=False)
    result = asyncio.run(_executor(database).execute(_context(assignment, paper=False), _open_decision(assignment)))

    assert result.success is False
    assert 'no swap client' in result.error
    assert [row.status for row in database.list_transactions(assignment.id)] == [TransactionStatus.FAILED]


def test_missing_price_history_is_reported(database) -> None:
    assignment = _assignment(database)
    result = asyncio.run(
        _executor(database).execute(_context(assignment, include_sol=False), _open_decision(assignment))
    )

    assert result.success is False
    assert result.failed_state is ExecutionState.RECORDING
    assert 'Missing price history for SOL' in result.error
    assert database.find_open_positions(assignment.id) == []


def test_close_without_position_fails(database) -> None:
    assignment = _assignment(database)
    decision = TradeDecision(
        should_open=False,
        should_close=True,
        amount=1.0,
        description='close nothing',
        token_pair=_pair(),
        strategy_assignment_id=assignment.id,
    )
    result = asyncio.run(_executor(database).execute(_context(assignment), decision))

    assert result.success is False
    assert result.failed_state is ExecutionState.VALIDATING
    [transaction] = database.list_transactions(assignment.id)
    assert transaction.side is TradeSide.SELL
    assert transaction.status is TransactionStatus.FAILED


def test_failure_to_record_failure_still_returns_result(database) -> None:
    class BrokenRecorder(TransactionRecorder):
        async def record_failure(self, decision, reason, tx_hash=None):
            raise RuntimeError('database unavailable')

    assignment = _assignment(database)
    executor = TradeExecutor(BrokenRecorder(database))
    result = asyncio.run(executor.execute(_context(assignment), _open_decision(assignment, amount=0.0)))

    assert result.success is False
    assert result.transaction is None
    assert result.error.startswith('Trade validation failed:')
