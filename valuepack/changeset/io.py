"""YAML serialization and file output for change sets."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml

from valuepack.changeset.exceptions import ChangeSetError, ChangeSetWriteError
from valuepack.changeset.models import ChangeSet
from valuepack.changeset.schema import validate_changeset_payload
from valuepack.observability import get_logger

_log = get_logger("changeset.io")


def serialize_changeset(changes: ChangeSet, *, nested: bool = False) -> bytes:
    """Render a change set as a YAML mapping in insertion order.

    An empty change set renders as ``{}``.
    """
    payload = changes.to_nested() if nested else changes.to_dict()
    return serialize_values(payload)


def serialize_values(values: Mapping[str, Any]) -> bytes:
    text = yaml.safe_dump(
        dict(values),
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )
    return text.encode("utf-8")


def parse_changeset(data: bytes | str) -> ChangeSet:
    """Parse a flat YAML change set produced by ``serialize_changeset``."""
    try:
        loaded = yaml.safe_load(data)
    except yaml.YAMLError as error:
        raise ChangeSetError(f"Change set is not valid YAML: {error}") from error

    if loaded is None:
        return ChangeSet()
    validate_changeset_payload(loaded)
    return ChangeSet(loaded)


def write_output(data: bytes, destination: str | Path) -> Path:
    """Write serialized output to a file, creating parent directories."""
    target = Path(destination)
    _log.info("creating file", path=str(target), bytes=len(data))
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("wb") as handle:
            handle.write(data)
    except OSError as error:
        raise ChangeSetWriteError(
            f"Unable to write {target}: {error.strerror or error}"
        ) from error
    return target
