"""Data models for structural document differences."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

from valuepack.core.models import DocumentPath
from valuepack.core.types import DIFFERENCE_KINDS, DifferenceKind
from valuepack.diff.exceptions import DiffError


class _Absent:
    """Marker for the missing side of an addition or removal."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<ABSENT>"

    def __bool__(self) -> bool:
        return False


ABSENT: Any = _Absent()

# kind -> (needs from side, needs to side)
_DETAIL_SHAPES: dict[str, tuple[bool, bool]] = {
    "value-changed": (True, True),
    "type-changed": (True, True),
    "key-added": (False, True),
    "key-removed": (True, False),
}


@dataclass(frozen=True, slots=True)
class Detail:
    """A single from/to value pair."""

    from_value: Any = ABSENT
    to_value: Any = ABSENT

    @property
    def has_from(self) -> bool:
        return self.from_value is not ABSENT

    @property
    def has_to(self) -> bool:
        return self.to_value is not ABSENT

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.from_value if self.has_from else "<ABSENT>",
            "to": self.to_value if self.has_to else "<ABSENT>",
        }


@dataclass(frozen=True, slots=True)
class Difference:
    """One discrepancy between two documents at a path."""

    path: DocumentPath
    kind: DifferenceKind
    details: tuple[Detail, ...]
    left_line: int | None = None
    right_line: int | None = None

    def __post_init__(self) -> None:
        if self.kind not in DIFFERENCE_KINDS:
            raise DiffError(f"Unsupported difference kind: {self.kind}")
        if not self.details:
            raise DiffError(f"{self.kind} difference at '{self.path}' has no details")

        shape = _DETAIL_SHAPES.get(self.kind)
        if shape is None:
            return
        if len(self.details) != 1:
            raise DiffError(
                f"{self.kind} difference at '{self.path}' requires exactly one detail, "
                f"got {len(self.details)}"
            )
        detail = self.details[0]
        if (detail.has_from, detail.has_to) != shape:
            raise DiffError(
                f"{self.kind} difference at '{self.path}' has an invalid detail: {detail!r}"
            )

    @property
    def dotted_path(self) -> str:
        return self.path.dotted()

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path.dotted(),
            "pointer": self.path.pointer(),
            "kind": self.kind,
            "details": [detail.to_dict() for detail in self.details],
            "left_line": self.left_line,
            "right_line": self.right_line,
        }


@dataclass(slots=True)
class DocumentDiff:
    """Ordered structural diff between two documents."""

    left_source: str
    right_source: str
    differences: list[Difference] = field(default_factory=list)

    @property
    def identical(self) -> bool:
        return not self.differences

    def summary(self) -> dict[str, int]:
        counts = {kind: 0 for kind in DIFFERENCE_KINDS}
        for difference in self.differences:
            counts[difference.kind] += 1
        return counts

    def __iter__(self) -> Iterator[Difference]:
        return iter(self.differences)

    def __len__(self) -> int:
        return len(self.differences)

    def to_dict(self) -> dict[str, Any]:
        return {
            "left_source": self.left_source,
            "right_source": self.right_source,
            "identical": self.identical,
            "summary": self.summary(),
            "differences": [difference.to_dict() for difference in self.differences],
        }
