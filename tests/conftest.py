"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from auto_trading_system.database import DatabaseManager  # noqa: E402


@pytest.fixture
def database(tmp_path: Path):
    manager = DatabaseManager(f'sqlite:///{tmp_path / "trading.db"}')
    yield manager
    manager.close()
