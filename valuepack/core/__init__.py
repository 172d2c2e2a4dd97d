"""Core models and primitives for valuepack."""

from valuepack.core.exceptions import ConfigError, NotFoundError, ValuePackError
from valuepack.core.models import (
    Document,
    DocumentPath,
    Node,
    PathElement,
    render_key,
    scalars_equal,
)
from valuepack.core.types import DIFFERENCE_KINDS, NODE_KINDS, DifferenceKind, NodeKind, Scalar

__all__ = [
    "ValuePackError",
    "NotFoundError",
    "ConfigError",
    "Document",
    "DocumentPath",
    "Node",
    "PathElement",
    "render_key",
    "scalars_equal",
    "DIFFERENCE_KINDS",
    "NODE_KINDS",
    "DifferenceKind",
    "NodeKind",
    "Scalar",
]
