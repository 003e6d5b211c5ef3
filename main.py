"""Command line entry point for the RSI trading agent."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

from auto_trading_system.config import Settings, load_settings
from auto_trading_system.core import AgentRuntime, TradingStrategyConfig
from auto_trading_system.data import PortfolioProvider, PriceHistoryProvider
from auto_trading_system.database import DatabaseManager, StrategyAssignmentRecord, StrategyType
from auto_trading_system.errors import ConfigurationError, StrategyAssignmentNotFound
from auto_trading_system.exchanges import BirdeyeService, SwapClient
from auto_trading_system.execution import TradeExecutor, TransactionRecorder
from auto_trading_system.monitoring import MemoryRecorder, configure_logging
from auto_trading_system.risk import TradeValidator
from auto_trading_system.security import WalletDetailsProvider
from auto_trading_system.trading import TradingCycle
from auto_trading_system.utils import RetryPolicy, format_currency


logger = logging.getLogger(__name__)


def _require_agent_id(settings: Settings) -> str:
    if not settings.agent_id:
        raise ConfigurationError('AGENT_ID must be set')
    return settings.agent_id


def seed(settings: Settings, config_path: Path, live: bool) -> None:
    configure_logging(settings.log_level)
    agent_id = _require_agent_id(settings)
    raw = json.loads(config_path.read_text())
    config = TradingStrategyConfig.from_dict(raw)
    database = DatabaseManager(settings.database_url)
    try:
        assignment = database.create_strategy_assignment(
            agent_id,
            raw,
            title=config.title or config_path.stem,
            strategy_type=StrategyType(config.type.upper() or StrategyType.RSI.value),
            is_paper_trading=not live,
        )
    finally:
        database.close()
    logger.info(
        'Assigned strategy %s (%s) to agent %s with %d pair(s), paper=%s',
        assignment.strategy_title,
        assignment.id,
        agent_id,
        len(config.token_pairs),
        assignment.is_paper_trading,
    )


def live_trading_warning(
    settings: Settings,
    assignment: StrategyAssignmentRecord,
    swap_client: Optional[SwapClient],
) -> Optional[str]:
    """Explain why a live assignment cannot trade, or ``None`` when it can."""
    if swap_client is not None or settings.force_paper_trading or assignment.is_paper_trading:
        return None
    return (
        f'Assignment {assignment.strategy_title} ({assignment.id}) is live but no swap client is configured; '
        'every trade will fail. Set FORCE_PAPER_TRADING=true or provide a swap client.'
    )


async def run(
    settings: Settings,
    cycles: Optional[int],
    interval: Optional[float],
    *,
    swap_client: Optional[SwapClient] = None,
) -> int:
    configure_logging(settings.log_level)
    runtime = AgentRuntime(
        agent_id=_require_agent_id(settings),
        name=settings.agent_name,
        secrets=dict(settings.wallet_secrets),
    )
    if not settings.birdeye.is_configured:
        logger.warning('BIRDEYE_API_KEY is not configured; price and wallet requests will fail.')

    database = DatabaseManager(settings.database_url)
    try:
        warning = live_trading_warning(settings, database.find_active_assignment(runtime.agent_id), swap_client)
    except StrategyAssignmentNotFound:
        warning = None
    if warning:
        logger.warning(warning)
    birdeye = BirdeyeService(settings.birdeye)
    executor = TradeExecutor(
        TransactionRecorder(database),
        TradeValidator(settings.trading_limits),
        swap_client=swap_client,
        retry_policy=RetryPolicy(
            max_attempts=settings.swap_max_attempts,
            base_delay=settings.swap_backoff_seconds,
            attempt_timeout=settings.swap_attempt_timeout,
        ),
        expected_slippage_percent=settings.expected_slippage_percent,
    )
    cycle = TradingCycle(
        settings=settings,
        database=database,
        wallet_provider=WalletDetailsProvider(),
        portfolio_provider=PortfolioProvider(database, birdeye),
        price_history_provider=PriceHistoryProvider(
            birdeye,
            bars=settings.price_history_bars,
            fetch_market_data=settings.fetch_market_data,
        ),
        executor=executor,
        memory=MemoryRecorder(database),
    )
    try:
        succeeded = await cycle.run_loop(runtime, cycles=cycles, interval_seconds=interval)
    finally:
        await birdeye.close()
        database.close()
    logger.info('Completed %d successful cycle(s)', succeeded)
    return succeeded


def positions(settings: Settings) -> None:
    configure_logging(settings.log_level)
    agent_id = _require_agent_id(settings)
    database = DatabaseManager(settings.database_url)
    try:
        assignment = database.find_active_assignment(agent_id)
        open_positions = database.find_open_positions(assignment.id)
    finally:
        database.close()
    if not open_positions:
        print(f'No open positions for {assignment.strategy_title} ({assignment.id})')
        return
    for position in open_positions:
        cost = float(position.total_base_amount) * position.entry_price
        print(
            f'{position.id}  {position.base_token_symbol}/{position.quote_token_symbol}  '
            f'amount={position.total_base_amount}  entry={position.entry_price}  '
            f'cost={format_currency(cost)}  opened={position.opened_at.isoformat()}'
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='RSI trading agent CLI')
    sub = parser.add_subparsers(dest='command', required=True)

    seed_parser = sub.add_parser('seed', help='Assign a strategy configuration to AGENT_ID')
    seed_parser.add_argument('--config', type=Path, required=True, help='Strategy config JSON file')
    seed_parser.add_argument('--live', action='store_true', help='Disable paper trading for the assignment')

    run_parser = sub.add_parser('run', help='Run trading cycles')
    run_parser.add_argument('--cycles', type=int, help='Stop after N cycles (default: run forever)')
    run_parser.add_argument('--interval', type=float, help='Seconds between cycles (default: UPDATE_INTERVAL)')

    sub.add_parser('positions', help='List open positions of the active assignment')

    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    settings = load_settings()
    if args.command == 'seed':
        seed(settings, args.config, args.live)
    elif args.command == 'run':
        asyncio.run(run(settings, args.cycles, args.interval))
    elif args.command == 'positions':
        positions(settings)
    else:  # pragma: no cover
        raise ValueError(f'Unknown command {args.command}')


if __name__ == '__main__':
    main()
