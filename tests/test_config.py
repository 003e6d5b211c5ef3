"""Tests for :mod:`auto_trading_system.config`."""

from __future__ import annotations

import pytest

from auto_trading_system.config import BirdeyeConfig, Settings, TradingLimits
from auto_trading_system.core import TradingStrategyConfig
from auto_trading_system.errors import ConfigurationError

from factories import strategy_config_dict


def test_settings_merge_env_file_and_process_environment(tmp_path, monkeypatch) -> None:
    env_file = tmp_path / '.env'
    env_file.write_text(
        '\n'.join(
            [
                '# trading agent',
                'AGENT_ID=agent-42',
                'FORCE_PAPER_TRADING=true',
                'MAX_SLIPPAGE_PERCENT=5',
                'BIRDEYE_API_KEY="abc"',
                'SOLANA_WALLET_PUBLIC_KEY=pub',
                f'DATA_DIRECTORY={tmp_path / "data"}',
            ]
        )
    )
    monkeypatch.setenv('AGENT_ID', 'agent-from-env')
    monkeypatch.setenv('SWAP_MAX_ATTEMPTS', '5')

    settings = Settings.from_env(env_file)

    assert settings.agent_id == 'agent-from-env'
    assert settings.force_paper_trading is True
    assert settings.swap_max_attempts == 5
    assert settings.trading_limits.max_slippage_percent == 5.0
    assert settings.trading_limits.min_liquidity_usd == 1_000.0
    assert settings.birdeye.api_key == 'abc'
    assert settings.birdeye.headers['x-chain'] == 'solana'
    assert settings.wallet_secrets.get('SOLANA_WALLET_PUBLIC_KEY') == 'pub'
    assert (tmp_path / 'data').is_dir()


def test_trading_limits_from_env_ignores_blank_values() -> None:
    limits = TradingLimits.from_env({'MIN_TRUST_SCORE': '0.7', 'MIN_LIQUIDITY_USD': ''})
    assert limits.min_trust_score == 0.7
    assert limits.min_liquidity_usd == 1_000.0


def test_birdeye_config_validation() -> None:
    with pytest.raises(ValueError):
        BirdeyeConfig(api_key='k', chain='dogechain')
    config = BirdeyeConfig(api_key='', base_url='https://example.test/')
    assert config.base_url == 'https://example.test'
    assert config.is_configured is False


def test_strategy_config_parses_camel_case() -> None:
    config = TradingStrategyConfig.from_dict(strategy_config_dict(length=14, allocation=25, interval='1H'))

    assert config.time_interval == '1H'
    assert config.max_portfolio_allocation == 25
    assert config.rsi_config.length == 14
    assert config.rsi_config.over_sold == 30
    assert config.token_pairs[0].from_token.symbol == 'USDC'
    assert config.token_pairs[0].to_token.decimals == 9


@pytest.mark.parametrize(
    'changes',
    [
        {'tokenPairs': None},
        {'maxPortfolioAllocation': 150},
        {'rsiConfig': {'length': 14, 'overBought': 30, 'overSold': 70}},
        {'tokenPairs': [{'from': {'address': 'x', 'symbol': 'X', 'decimals': 6}}]},
    ],
)
def test_strategy_config_rejects_invalid_shapes(changes) -> None:
    with pytest.raises(ConfigurationError):
        TradingStrategyConfig.from_dict({**strategy_config_dict(), **changes})
