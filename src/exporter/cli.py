"""
Command line entry point for the Daily Reward Exporter.

Exit codes:
    0  stopped by SIGTERM or Ctrl-C
    1  reward database unreachable at startup
    2  invalid configuration (no accounts, bad interval, no DSN, Vault failure)
"""

import logging
import signal
import sys
import threading
from typing import List, Optional

from hvac.exceptions import VaultError

from src.exporter.config import load_config
from src.exporter.database import RewardDatabase
from src.exporter.errors import ConfigurationError, DatabaseUnavailableError
from src.exporter.loop import ScrapePushLoop
from src.utils.logging_config import configure_logging
from src.utils.vault_client import resolve_dsn

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_DATABASE_UNAVAILABLE = 1
EXIT_CONFIGURATION_ERROR = 2


def _resolve_dsn(config) -> str:
    if config.dsn:
        return config.dsn

    try:
        return resolve_dsn(config.vault_path, config.vault_key)
    except (VaultError, ValueError, KeyError) as e:
        raise ConfigurationError(f"Could not read DSN from Vault path {config.vault_path}: {e}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    configure_logging()

    try:
        config = load_config(argv)
        if config.verbose:
            configure_logging(verbose=True)
        dsn = _resolve_dsn(config)
    except ConfigurationError as e:
        logger.error(str(e))
        return EXIT_CONFIGURATION_ERROR

    database = RewardDatabase(dsn)
    try:
        database.ping()
    except DatabaseUnavailableError as e:
        logger.error(f"Failed to open DB: {e}")
        database.close()
        return EXIT_DATABASE_UNAVAILABLE

    stop_event = threading.Event()

    def handle_sigterm(signum, frame):
        logger.info("Received SIGTERM, stopping after the current tick")
        # the handler may run while the main thread holds the event's lock inside wait()
        threading.Thread(target=stop_event.set, name="sigterm-stop", daemon=True).start()

    previous_handler = signal.signal(signal.SIGTERM, handle_sigterm)

    try:
        ScrapePushLoop(config, database).run(stop_event)
    except KeyboardInterrupt:
        logger.info("Interrupted, stopping")
    finally:
        signal.signal(signal.SIGTERM, previous_handler)
        database.close()

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
