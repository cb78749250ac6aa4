"""Exceptions shared across mediacat modules."""


class ConfigError(Exception):
    """Raised when configuration data cannot be processed."""
