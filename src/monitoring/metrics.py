"""
Prometheus Metrics for the Daily Reward Exporter

Each tick builds a RewardMetricsBatch: a fresh CollectorRegistry holding one
gauge sample per account, pushed to the Pushgateway in a single replace
operation and then discarded.
"""

import logging
import re
from typing import Dict, List, Optional

from prometheus_client import CollectorRegistry, Gauge, push_to_gateway

logger = logging.getLogger(__name__)

ACCOUNT_LABEL = "account"
DEFAULT_DOCUMENTATION = "Reward distributed to the account today"

# classic exposition names; newer clients accept UTF-8 names and rewrite them on push
METRIC_NAME_RE = re.compile(r"[a-zA-Z_:][a-zA-Z0-9_:]*")


class RegistrationConflictError(ValueError):
    """Raised when a sample cannot be added to the batch."""
    pass


class RewardMetricsBatch:
    """
    Per-tick collection of daily reward gauges.

    Samples share one gauge family named metric_name and are distinguished
    by the account label. At most one sample is kept per account.
    """

    def __init__(
        self,
        metric_name: str,
        documentation: str = DEFAULT_DOCUMENTATION,
        registry: Optional[CollectorRegistry] = None
    ):
        """
        Initialize an empty batch.

        Args:
            metric_name: Name of the published gauge
            documentation: Gauge help text
            registry: Registry to collect into (a new one if not provided)
        """
        self.metric_name = metric_name
        self.documentation = documentation
        self.registry = registry or CollectorRegistry()
        self._gauge: Optional[Gauge] = None
        self._samples: Dict[str, float] = {}

    @property
    def accounts(self) -> List[str]:
        """Accounts that have a sample in this batch, in insertion order."""
        return list(self._samples)

    def __len__(self) -> int:
        return len(self._samples)

    def _get_gauge(self) -> Gauge:
        """
        Create and register the gauge family on first use.

        Raises:
            RegistrationConflictError: If the metric name is rejected
        """
        if self._gauge is None:
            if not METRIC_NAME_RE.fullmatch(self.metric_name):
                raise RegistrationConflictError(
                    f"Cannot register gauge {self.metric_name!r}: invalid metric name"
                )

            try:
                self._gauge = Gauge(
                    self.metric_name,
                    self.documentation,
                    labelnames=[ACCOUNT_LABEL],
                    registry=self.registry
                )
            except ValueError as e:
                raise RegistrationConflictError(
                    f"Cannot register gauge {self.metric_name!r}: {e}"
                )
            logger.debug(f"Created gauge: {self.metric_name}")

        return self._gauge

    def add_sample(self, account: str, value: float) -> None:
        """
        Set the gauge for an account.

        Args:
            account: Account name, used as the account label value
            value: Daily reward

        Raises:
            RegistrationConflictError: If the account already has a sample
                or the gauge cannot be registered
        """
        if account in self._samples:
            raise RegistrationConflictError(
                f"Duplicate sample for {self.metric_name}{{{ACCOUNT_LABEL}={account!r}}}"
            )

        gauge = self._get_gauge()
        gauge.labels(**{ACCOUNT_LABEL: account}).set(value)
        self._samples[account] = value

        logger.debug(f"Set gauge {self.metric_name}{{{ACCOUNT_LABEL}={account}}} to {value}")

    def get_value(self, account: str) -> Optional[float]:
        """Value collected for an account, or None."""
        if account not in self._samples:
            return None
        return self.registry.get_sample_value(self.metric_name, {ACCOUNT_LABEL: account})

    def push(
        self,
        gateway_url: str,
        job_name: str,
        grouping_key: Optional[Dict[str, str]] = None
    ) -> None:
        """
        Push the batch to the Pushgateway, replacing the group's metrics.

        Args:
            gateway_url: Pushgateway URL
            job_name: Job name for metrics
            grouping_key: Grouping key labels

        Raises:
            Exception: If push fails
        """
        try:
            push_to_gateway(
                gateway_url,
                job=job_name,
                registry=self.registry,
                grouping_key=grouping_key or {}
            )
            logger.info(f"Pushed {len(self)} samples to gateway: {gateway_url}")
        except Exception as e:
            logger.error(f"Could not push to Pushgateway: {e}")
            raise
