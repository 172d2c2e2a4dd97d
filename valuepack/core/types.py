"""Type definitions for valuepack core models."""

from typing import Literal, Union

Scalar = Union[str, int, float, bool, None]

NodeKind = Literal["mapping", "sequence", "scalar"]

NODE_KINDS: tuple[str, ...] = ("mapping", "sequence", "scalar")

DifferenceKind = Literal[
    "value-changed",
    "key-added",
    "key-removed",
    "type-changed",
    "order-changed",
]

DIFFERENCE_KINDS: tuple[str, ...] = (
    "value-changed",
    "key-added",
    "key-removed",
    "type-changed",
    "order-changed",
)

SCALAR_TYPES: tuple[type, ...] = (str, int, float, bool, type(None))
