"""Change-set subsystem exceptions."""

from valuepack.core.exceptions import ValuePackError


class ChangeSetError(ValuePackError):
    """Base class for change-set errors."""


class ChangeSetValueError(ChangeSetError, TypeError):
    """A non-scalar value was stored in a change set."""


class ChangeSetWriteError(ChangeSetError, OSError):
    """Serialized change set could not be written to its destination."""
