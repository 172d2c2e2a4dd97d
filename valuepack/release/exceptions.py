"""Release source exceptions."""

from valuepack.core.exceptions import NotFoundError, ValuePackError


class ReleaseSourceError(ValuePackError):
    """Base class for release source failures."""


class ReleaseNotFoundError(ReleaseSourceError, NotFoundError):
    """Release or revision does not exist."""


class ReleaseConnectionError(ReleaseSourceError, ConnectionError):
    """Release source could not be reached."""
