"""Release value sources and revision policy for valuepack."""

from valuepack.release.exceptions import (
    ReleaseConnectionError,
    ReleaseNotFoundError,
    ReleaseSourceError,
)
from valuepack.release.helm import HelmReleaseSource
from valuepack.release.revision import PREVIOUS_REVISION, resolve_revision
from valuepack.release.source import (
    ReleaseSource,
    ReleaseValues,
    StaticReleaseSource,
    fetch_release_values,
)

__all__ = [
    "ReleaseSourceError",
    "ReleaseNotFoundError",
    "ReleaseConnectionError",
    "HelmReleaseSource",
    "PREVIOUS_REVISION",
    "resolve_revision",
    "ReleaseSource",
    "ReleaseValues",
    "StaticReleaseSource",
    "fetch_release_values",
]
