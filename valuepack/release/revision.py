"""Revision selection policy for release comparisons."""

from __future__ import annotations

from valuepack.core.exceptions import ConfigError
from valuepack.release.exceptions import ReleaseNotFoundError

PREVIOUS_REVISION = 0


def resolve_revision(requested: int, current_version: int) -> int:
    """Pick the release revision to compare against.

    ``0`` selects the revision before ``current_version``. A first release
    has no previous revision, which is reported as not found.
    """
    if requested < 0:
        raise ConfigError(f"revision must be zero or positive, got {requested}")

    if requested == PREVIOUS_REVISION:
        previous = current_version - 1
        if previous < 1:
            raise ReleaseNotFoundError(
                f"release is at revision {current_version}; no previous revision to compare"
            )
        return previous

    if requested > current_version:
        raise ReleaseNotFoundError(
            f"revision {requested} does not exist (current revision is {current_version})"
        )
    return requested
