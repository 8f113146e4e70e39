"""
Monitoring Module for the Daily Reward Exporter

Builds the per-tick Prometheus registry of daily reward gauges and pushes it
to a Pushgateway.

Usage:
    from src.monitoring import RewardMetricsBatch

    batch = RewardMetricsBatch("aleo_daily_reward")
    batch.add_sample("alice", 5.0)
    batch.push("http://localhost:9091", "rewards", {"instance": "pool-1"})
"""

from src.monitoring.metrics import RewardMetricsBatch, RegistrationConflictError

__all__ = [
    "RewardMetricsBatch",
    "RegistrationConflictError",
]

__version__ = "1.0.0"
