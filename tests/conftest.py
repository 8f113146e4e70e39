"""
Pytest configuration and shared fixtures.
"""

import logging

import pytest
from unittest.mock import MagicMock

from src.exporter.config import ExporterConfig
from src.utils.tick_context import clear_tick_id


class FakeRewardDatabase:
    """In-memory stand-in for RewardDatabase: account -> reward or exception."""

    def __init__(self, rewards):
        self.rewards = dict(rewards)
        self.queries = []

    def daily_reward(self, account):
        self.queries.append(account)
        value = self.rewards.get(account, 0.0)
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture
def exporter_config():
    """Configuration for two accounts."""
    return ExporterConfig(
        accounts=("alice", "bob"),
        interval=30,
        pushgateway="http://pushgateway:9091",
        job="reward_exporter",
        metric_name="aleo_daily_reward",
        instance="pool-1",
        dsn="postgres://exporter@localhost:5432/rewards"
    )


@pytest.fixture
def fake_database():
    """Factory for FakeRewardDatabase."""
    return FakeRewardDatabase


@pytest.fixture
def mock_connection():
    """Mock psycopg2 connection whose cursor is available as .cursor_mock."""
    conn = MagicMock()
    conn.closed = 0
    cursor = MagicMock()
    conn.cursor.return_value.__enter__.return_value = cursor
    conn.cursor_mock = cursor
    return conn


@pytest.fixture(autouse=True)
def reset_tick_id():
    """Make sure no tick ID leaks between tests."""
    clear_tick_id()
    yield
    clear_tick_id()


@pytest.fixture(autouse=True)
def reset_exporter_logger():
    """Undo configure_logging() so caplog keeps receiving records."""
    yield
    exporter_logger = logging.getLogger("src")
    for handler in list(exporter_logger.handlers):
        exporter_logger.removeHandler(handler)
    exporter_logger.propagate = True
    exporter_logger.setLevel(logging.NOTSET)
