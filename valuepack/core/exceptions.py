"""Base exceptions shared by every valuepack subsystem."""


class ValuePackError(Exception):
    """Base class for valuepack errors."""


class NotFoundError(ValuePackError):
    """A requested document, release or revision does not exist."""


class ConfigError(ValuePackError, ValueError):
    """Invalid configuration value."""
