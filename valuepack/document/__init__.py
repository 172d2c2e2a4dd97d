"""Document loading subsystem for valuepack."""

from valuepack.document.exceptions import (
    DocumentError,
    DocumentNotFoundError,
    DocumentParseError,
)
from valuepack.document.loader import (
    DOCUMENT_FORMATS,
    DocumentFormat,
    document_from_values,
    load_document,
)

__all__ = [
    "DocumentError",
    "DocumentNotFoundError",
    "DocumentParseError",
    "DOCUMENT_FORMATS",
    "DocumentFormat",
    "document_from_values",
    "load_document",
]
