"""Flat dotted-key change set model."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable, Iterator

from valuepack.changeset.exceptions import ChangeSetValueError
from valuepack.core.types import SCALAR_TYPES, Scalar


class ChangeSet(Mapping[str, Scalar]):
    """Ordered mapping from dotted path to a scalar value.

    Setting an existing key replaces its value and keeps its original
    position (last write wins).
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[tuple[str, Scalar]] | Mapping[str, Scalar] = ()) -> None:
        self._entries: dict[str, Scalar] = {}
        items = entries.items() if isinstance(entries, Mapping) else entries
        for key, value in items:
            self.set(key, value)

    def set(self, key: str, value: Scalar) -> None:
        if not isinstance(key, str):
            raise ChangeSetValueError(f"Change set keys must be strings, got {type(key).__name__}")
        if not isinstance(value, SCALAR_TYPES):
            raise ChangeSetValueError(
                f"Change set value for '{key}' must be a scalar, got {type(value).__name__}"
            )
        self._entries[key] = value

    def __getitem__(self, key: str) -> Scalar:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ChangeSet({self._entries!r})"

    def to_dict(self) -> dict[str, Scalar]:
        return dict(self._entries)

    def to_nested(self) -> dict[str, Any]:
        """Expand dotted keys back into nested mappings.

        A later key that needs a mapping where a scalar was stored replaces
        the scalar.
        """
        nested: dict[str, Any] = {}
        for dotted, value in self._entries.items():
            parts = dotted.split(".") if dotted else [dotted]
            cursor = nested
            for part in parts[:-1]:
                child = cursor.get(part)
                if not isinstance(child, dict):
                    child = {}
                    cursor[part] = child
                cursor = child
            cursor[parts[-1]] = value
        return nested
