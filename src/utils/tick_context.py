"""
Tick ID Utility for the Daily Reward Exporter

Every tick gets a short ID stored in a context variable, so all log lines
emitted while the tick runs (queries, gauge registration, push) can be
grouped together.
"""

import contextvars
import logging
import uuid
from typing import Optional

logger = logging.getLogger(__name__)

_tick_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    'tick_id',
    default=None
)


def generate_tick_id() -> str:
    """
    Generate a new tick ID.

    Returns:
        First 8 hex characters of a UUID4
    """
    return uuid.uuid4().hex[:8]


def get_tick_id() -> Optional[str]:
    """Return the ID of the tick currently running, if any."""
    return _tick_id.get()


def set_tick_id(tick_id: str) -> None:
    """
    Set the tick ID in the current context.

    Raises:
        ValueError: If tick_id is empty or not a string
    """
    if not tick_id or not isinstance(tick_id, str):
        raise ValueError("Tick ID must be a non-empty string")

    _tick_id.set(tick_id)


def clear_tick_id() -> None:
    """Clear the tick ID from context."""
    _tick_id.set(None)


class TickContext:
    """
    Context manager scoping a tick ID.

    Restores whatever ID was set before on exit.
    """

    def __init__(self, tick_id: Optional[str] = None):
        self.tick_id = tick_id
        self.previous_id = None

    def __enter__(self) -> str:
        self.previous_id = get_tick_id()

        if not self.tick_id:
            self.tick_id = generate_tick_id()
        set_tick_id(self.tick_id)

        logger.debug(f"Entered tick context: {self.tick_id}")
        return self.tick_id

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.previous_id:
            set_tick_id(self.previous_id)
        else:
            clear_tick_id()


def tick_id_filter(record: logging.LogRecord) -> bool:
    """
    Logging filter adding the current tick ID to log records.

    Returns:
        True (always allow record)
    """
    record.tick_id = get_tick_id() or "-"
    return True
