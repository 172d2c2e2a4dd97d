"""JSON schema and validation for flat change-set files."""

from __future__ import annotations

from typing import Any

from jsonschema import Draft202012Validator

from valuepack.changeset.exceptions import ChangeSetError

CHANGESET_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "valuediff change set",
    "type": "object",
    "propertyNames": {"type": "string"},
    "additionalProperties": {
        "type": ["string", "number", "boolean", "null"],
        "description": "Previous value of the dotted key",
    },
}

_VALIDATOR = Draft202012Validator(CHANGESET_SCHEMA)


def validate_changeset_payload(payload: Any) -> None:
    """Validate a decoded change set: a mapping of dotted keys to scalars."""
    errors = sorted(_VALIDATOR.iter_errors(payload), key=lambda err: [str(p) for p in err.path])
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.path) or "$"
        raise ChangeSetError(f"Invalid change set at {location}: {first.message}")
