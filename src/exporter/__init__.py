"""
Daily Reward Exporter

Periodically sums today's rewards per account from PostgreSQL and pushes
them as gauges to a Prometheus Pushgateway.

Main components:
- config: startup parameters
- database: daily reward query
- loop: scrape-aggregate-push cycle

Usage:
    from src.exporter import RewardDatabase, ScrapePushLoop, load_config

    config = load_config(["--account", "alice,bob", "--metrics", "aleo_daily_reward",
                          "--job", "rewards", "--dsn", "postgres://..."])
    database = RewardDatabase(config.dsn)
    database.ping()
    ScrapePushLoop(config, database).run(stop_event)
"""

from src.exporter.config import ExporterConfig, load_config, parse_accounts
from src.exporter.database import RewardDatabase
from src.exporter.errors import ConfigurationError, DatabaseUnavailableError, ExporterError
from src.exporter.loop import ScrapePushLoop, TickResult

__all__ = [
    "ExporterConfig",
    "load_config",
    "parse_accounts",
    "RewardDatabase",
    "ScrapePushLoop",
    "TickResult",
    "ExporterError",
    "ConfigurationError",
    "DatabaseUnavailableError",
]

__version__ = "1.0.0"
