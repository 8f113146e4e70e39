"""
Scrape-and-Push Loop

Every interval, queries the daily reward of each configured account,
collects the results into a fresh RewardMetricsBatch and pushes it to the
Pushgateway. Per-account and push failures are logged and never stop the
loop.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from src.exporter.config import ExporterConfig
from src.exporter.database import RewardDatabase
from src.monitoring.metrics import RegistrationConflictError, RewardMetricsBatch
from src.utils.tick_context import TickContext

logger = logging.getLogger(__name__)


@dataclass
class TickResult:
    """
    Outcome of one tick.

    Attributes:
        tick_id: ID used in this tick's log lines
        published: Accounts with a sample in the push
        failed: Accounts whose query raised
        dropped: Accounts whose sample could not be registered
        pushed: Whether the push succeeded
        duration_seconds: Wall time of the tick
    """

    tick_id: str
    published: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    dropped: List[str] = field(default_factory=list)
    pushed: bool = False
    duration_seconds: float = 0.0


class ScrapePushLoop:
    """
    Periodic scrape-aggregate-push cycle.

    Ticks run on a fixed-rate schedule anchored at run(); the first tick
    fires one interval after that. A tick that overruns its interval causes
    the missed deadlines to be skipped, never queued, so ticks never overlap.
    """

    def __init__(
        self,
        config: ExporterConfig,
        database: RewardDatabase,
        batch_factory: Optional[Callable[[str], RewardMetricsBatch]] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize the loop.

        Args:
            config: Exporter configuration
            database: Connected reward database
            batch_factory: Builds an empty batch from a metric name
            clock: Monotonic time source
        """
        self.config = config
        self.database = database
        self.batch_factory = batch_factory or RewardMetricsBatch
        self.clock = clock
        self.ticks = 0

    def tick(self) -> TickResult:
        """
        Run one scrape-aggregate-push cycle.

        Always ends with exactly one push attempt, even when no account
        succeeded.

        Returns:
            TickResult for this cycle
        """
        with TickContext() as tick_id:
            result = TickResult(tick_id=tick_id)
            start_time = self.clock()

            batch = self.batch_factory(self.config.metric_name)

            for account in self.config.accounts:
                try:
                    reward = self.database.daily_reward(account)
                except Exception as e:
                    logger.error(
                        f"Daily reward query error for account={account}: {e}",
                        extra={"account": account}
                    )
                    result.failed.append(account)
                    continue

                try:
                    batch.add_sample(account, reward)
                except RegistrationConflictError as e:
                    logger.warning(f"Register gauge error: {e}", extra={"account": account})
                    result.dropped.append(account)
                    continue

                result.published.append(account)

            try:
                batch.push(
                    self.config.pushgateway,
                    self.config.job,
                    grouping_key=self.config.grouping_key
                )
                result.pushed = True
            except Exception:
                # logged by the batch; next tick retries with fresh data
                result.pushed = False

            result.duration_seconds = self.clock() - start_time
            self.ticks += 1

            logger.info(
                f"Tick finished: published={len(result.published)}, "
                f"failed={len(result.failed)}, dropped={len(result.dropped)}, "
                f"pushed={result.pushed}, duration={result.duration_seconds:.3f}s",
                extra={"duration": result.duration_seconds, "samples": len(result.published)}
            )

            return result

    def run(self, stop_event: Optional[threading.Event] = None) -> None:
        """
        Run ticks until stop_event is set.

        Args:
            stop_event: Cancellation signal; the loop never ends without one
        """
        stop_event = stop_event or threading.Event()
        interval = self.config.interval
        next_tick = self.clock() + interval

        logger.info(
            f"Start monitoring with interval={interval}s, "
            f"pushgateway={self.config.pushgateway}, job={self.config.job}, "
            f"metrics={self.config.metric_name}, instance={self.config.instance}"
        )

        while not stop_event.wait(max(0.0, next_tick - self.clock())):
            self.tick()

            next_tick += interval
            now = self.clock()
            if next_tick < now:
                missed = int((now - next_tick) // interval) + 1
                next_tick += missed * interval
                logger.warning(f"Tick overran the {interval}s interval, skipped {missed} tick(s)")

        logger.info(f"Monitoring stopped after {self.ticks} ticks")
