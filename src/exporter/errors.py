"""
Exceptions for the Daily Reward Exporter.
"""


class ExporterError(Exception):
    """Base class for exporter errors."""
    pass


class ConfigurationError(ExporterError):
    """Raised when startup configuration is missing or invalid."""
    pass


class DatabaseUnavailableError(ExporterError):
    """Raised when the reward database cannot be reached at startup."""
    pass
