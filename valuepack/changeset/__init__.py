"""Change-set model and serialization for valuepack."""

from valuepack.changeset.exceptions import (
    ChangeSetError,
    ChangeSetValueError,
    ChangeSetWriteError,
)
from valuepack.changeset.io import (
    parse_changeset,
    serialize_changeset,
    serialize_values,
    write_output,
)
from valuepack.changeset.models import ChangeSet
from valuepack.changeset.schema import CHANGESET_SCHEMA, validate_changeset_payload

__all__ = [
    "CHANGESET_SCHEMA",
    "ChangeSet",
    "ChangeSetError",
    "ChangeSetValueError",
    "ChangeSetWriteError",
    "parse_changeset",
    "serialize_changeset",
    "serialize_values",
    "validate_changeset_payload",
    "write_output",
]
