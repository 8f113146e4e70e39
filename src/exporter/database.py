"""
Reward Database Accessor

Owns a single PostgreSQL connection and runs the daily reward aggregation
for one account at a time.
"""

import logging
from typing import Optional

import psycopg2

from src.exporter.errors import DatabaseUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_PROJECT = "ALEO"
DEFAULT_TIMEZONE = "Asia/Shanghai"

# reward is stored in micro-units; the day boundary is taken in %(tz)s for both sides
DAILY_REWARD_QUERY = """
    SELECT COALESCE(SUM(reward)/1e6, 0)
    FROM epoch_distributor
    WHERE project = %(project)s
      AND miner_account_id IN (
          SELECT id FROM miner_account WHERE name = %(account)s
      )
      AND DATE(epoch_time AT TIME ZONE %(tz)s) = DATE(NOW() AT TIME ZONE %(tz)s)
"""


class RewardDatabase:
    """
    Read-only access to the reward distribution tables.

    The connection runs in autocommit mode, so a failed query for one
    account does not leave an aborted transaction behind for the next.
    """

    def __init__(
        self,
        dsn: str,
        project: str = DEFAULT_PROJECT,
        timezone: str = DEFAULT_TIMEZONE
    ):
        """
        Initialize the accessor. No connection is opened yet.

        Args:
            dsn: PostgreSQL connection string or URI
            project: Project identifier the rewards are filtered on
            timezone: Time zone defining the calendar day
        """
        self.dsn = dsn
        self.project = project
        self.timezone = timezone
        self._conn = None

    @property
    def connected(self) -> bool:
        """True if a usable connection is open."""
        return self._conn is not None and not self._conn.closed

    def connect(self):
        """
        Open the database connection.

        Returns:
            The psycopg2 connection

        Raises:
            psycopg2.Error: If the connection cannot be opened
        """
        logger.info("Connecting to PostgreSQL")
        self._conn = psycopg2.connect(self.dsn)
        self._conn.autocommit = True
        return self._conn

    def ping(self) -> None:
        """
        Check the database is reachable.

        Raises:
            DatabaseUnavailableError: If connecting or querying fails
        """
        try:
            if not self.connected:
                self.connect()

            with self._conn.cursor() as cursor:
                cursor.execute("SELECT 1")
                cursor.fetchone()

        except psycopg2.Error as e:
            logger.error(f"DB ping error: {e}")
            raise DatabaseUnavailableError(f"Database is unreachable: {e}")

        logger.debug("DB ping succeeded")

    def daily_reward(self, account: str) -> float:
        """
        Sum today's rewards for an account.

        An unknown account or a day without distributions yields 0.0.

        Args:
            account: Account name

        Returns:
            Reward in whole units

        Raises:
            psycopg2.Error: On connectivity or query failure
        """
        # reopen after a server-side disconnect
        if not self.connected:
            self.connect()

        params = {
            "project": self.project,
            "account": account,
            "tz": self.timezone
        }

        with self._conn.cursor() as cursor:
            cursor.execute(DAILY_REWARD_QUERY, params)
            row = cursor.fetchone()

        reward = self._to_float(row[0] if row else None)
        logger.debug(
            f"Daily reward for account={account}: {reward}",
            extra={"account": account, "reward": reward}
        )
        return reward

    @staticmethod
    def _to_float(value: Optional[object]) -> float:
        """Convert the aggregate (Decimal, int, float or NULL) to float."""
        if value is None:
            return 0.0
        return float(value)

    def close(self) -> None:
        """Close the connection if open."""
        if self._conn is not None:
            if not self._conn.closed:
                self._conn.close()
                logger.info("PostgreSQL connection closed")
            self._conn = None

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
