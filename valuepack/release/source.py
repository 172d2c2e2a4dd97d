"""Release source protocol and release value fetching."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol

from valuepack.observability import get_logger
from valuepack.release.exceptions import ReleaseNotFoundError
from valuepack.release.revision import resolve_revision

_log = get_logger("release.source")


class ReleaseSource(Protocol):
    """Anything that can report release revisions and their values."""

    def current_revision(self, release: str) -> int: ...

    def get_values(self, release: str, revision: int) -> Mapping[str, Any]: ...


@dataclass(frozen=True, slots=True)
class ReleaseValues:
    """Values of one release revision."""

    release: str
    revision: int
    current_revision: int
    values: Mapping[str, Any]

    @property
    def source_name(self) -> str:
        return f"release:{self.release}@{self.revision}"


@dataclass(slots=True)
class StaticReleaseSource:
    """In-memory release history keyed by release name and revision."""

    releases: dict[str, dict[int, Mapping[str, Any]]] = field(default_factory=dict)

    def add_revision(self, release: str, revision: int, values: Mapping[str, Any]) -> None:
        self.releases.setdefault(release, {})[revision] = dict(values)

    def current_revision(self, release: str) -> int:
        history = self.releases.get(release)
        if not history:
            raise ReleaseNotFoundError(f"release: not found: {release}")
        return max(history)

    def get_values(self, release: str, revision: int) -> Mapping[str, Any]:
        history = self.releases.get(release)
        if not history:
            raise ReleaseNotFoundError(f"release: not found: {release}")
        if revision not in history:
            raise ReleaseNotFoundError(f"release {release} has no revision {revision}")
        return history[revision]


def fetch_release_values(source: ReleaseSource, release: str, revision: int = 0) -> ReleaseValues:
    """Resolve the requested revision and fetch its values."""
    current = source.current_revision(release)
    resolved = resolve_revision(revision, current)
    if revision == 0:
        _log.info("revision not specified, using previous", release=release, revision=resolved)
    values = source.get_values(release, resolved)
    _log.info(
        "release values fetched",
        release=release,
        revision=resolved,
        current_revision=current,
        keys=len(values),
    )
    return ReleaseValues(
        release=release,
        revision=resolved,
        current_revision=current,
        values=values,
    )
