"""Core data models for parsed documents and node paths."""

from __future__ import annotations

from dataclasses import dataclass, field
import math
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Sequence

from valuepack.core.types import NODE_KINDS, SCALAR_TYPES, Scalar


@dataclass(frozen=True, slots=True)
class Node:
    """A single node of a parsed document tree.

    Mapping values are read-only ``key -> Node`` proxies, sequence values are
    tuples of nodes and scalar values are plain Python scalars.
    """

    kind: str
    value: Any
    line: int | None = None
    column: int | None = None

    def __post_init__(self) -> None:
        if self.kind not in NODE_KINDS:
            raise ValueError(f"Unsupported node kind: {self.kind}")
        if self.kind == "scalar" and not isinstance(self.value, SCALAR_TYPES):
            raise ValueError(f"Unsupported scalar type: {type(self.value).__name__}")

    @classmethod
    def mapping(
        cls,
        items: Mapping[str, Node],
        *,
        line: int | None = None,
        column: int | None = None,
    ) -> Node:
        return cls("mapping", MappingProxyType(dict(items)), line, column)

    @classmethod
    def sequence(
        cls,
        items: Sequence[Node],
        *,
        line: int | None = None,
        column: int | None = None,
    ) -> Node:
        return cls("sequence", tuple(items), line, column)

    @classmethod
    def scalar(cls, value: Scalar, *, line: int | None = None, column: int | None = None) -> Node:
        return cls("scalar", value, line, column)

    @classmethod
    def from_value(cls, value: Any) -> Node:
        """Build a node tree from decoded JSON-compatible Python data."""
        if isinstance(value, Mapping):
            return cls.mapping({render_key(key): cls.from_value(item) for key, item in value.items()})
        if isinstance(value, (list, tuple)):
            return cls.sequence([cls.from_value(item) for item in value])
        if isinstance(value, SCALAR_TYPES):
            return cls.scalar(value)
        raise TypeError(f"Unsupported value type: {type(value).__name__}")

    def to_python(self) -> Any:
        """Return the node as plain dict/list/scalar data."""
        if self.kind == "mapping":
            return {key: child.to_python() for key, child in self.value.items()}
        if self.kind == "sequence":
            return [child.to_python() for child in self.value]
        return self.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.kind == other.kind and _values_equal(self.to_python(), other.to_python())


@dataclass(frozen=True, slots=True)
class Document:
    """Parsed tree form of one input document."""

    source: str
    root: Node = field(default_factory=lambda: Node.mapping({}))

    @property
    def is_empty(self) -> bool:
        return self.root.kind in {"mapping", "sequence"} and not self.root.value

    def to_python(self) -> Any:
        return self.root.to_python()


@dataclass(frozen=True, slots=True)
class PathElement:
    """One step into a document: a mapping key or a sequence index."""

    key: str | None = None
    index: int | None = None

    def __post_init__(self) -> None:
        if (self.key is None) == (self.index is None):
            raise ValueError("PathElement requires exactly one of key or index")

    @property
    def name(self) -> str:
        if self.key is not None:
            return self.key
        return str(self.index)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class DocumentPath:
    """Ordered path elements from the document root to a node."""

    elements: tuple[PathElement, ...] = ()

    def child_key(self, key: str) -> DocumentPath:
        return DocumentPath(self.elements + (PathElement(key=key),))

    def child_index(self, index: int) -> DocumentPath:
        return DocumentPath(self.elements + (PathElement(index=index),))

    @property
    def is_root(self) -> bool:
        return not self.elements

    def dotted(self) -> str:
        return ".".join(element.name for element in self.elements)

    def pointer(self) -> str:
        if not self.elements:
            return "/"
        return "".join(f"/{_escape_json_pointer(element.name)}" for element in self.elements)

    def __iter__(self) -> Iterator[PathElement]:
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)

    def __str__(self) -> str:
        return self.dotted()

    @classmethod
    def parse(cls, dotted: str) -> DocumentPath:
        """Parse a dotted path; all-digit segments become sequence indexes."""
        if not dotted:
            return cls()
        elements = []
        for part in dotted.split("."):
            if part.isdigit():
                elements.append(PathElement(index=int(part)))
            else:
                elements.append(PathElement(key=part))
        return cls(tuple(elements))


def render_key(key: Any) -> str:
    """Render a mapping key the way it appears in a dotted path."""
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    return str(key)


def scalars_equal(left: Scalar, right: Scalar) -> bool:
    """Type-aware scalar equality.

    Booleans never equal numbers, ints equal floats of the same value and
    NaN equals NaN.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        if isinstance(left, float) and isinstance(right, float):
            if math.isnan(left) and math.isnan(right):
                return True
        return left == right
    if type(left) is not type(right):
        return False
    return left == right


def _values_equal(left: Any, right: Any) -> bool:
    if isinstance(left, dict) and isinstance(right, dict):
        return left.keys() == right.keys() and all(
            _values_equal(left[key], right[key]) for key in left
        )
    if isinstance(left, list) and isinstance(right, list):
        return len(left) == len(right) and all(
            _values_equal(a, b) for a, b in zip(left, right)
        )
    if isinstance(left, (dict, list)) or isinstance(right, (dict, list)):
        return False
    return scalars_equal(left, right)


def _escape_json_pointer(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")
