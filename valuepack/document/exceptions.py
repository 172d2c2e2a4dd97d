"""Document subsystem exceptions."""

from __future__ import annotations

from valuepack.core.exceptions import NotFoundError, ValuePackError


class DocumentError(ValuePackError):
    """Base class for document loading errors."""


class DocumentParseError(DocumentError):
    """Input document is malformed."""

    def __init__(
        self,
        source: str,
        reason: str,
        *,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        self.source = source
        self.reason = reason
        self.line = line
        self.column = column
        super().__init__(self._render())

    def _render(self) -> str:
        location = self.source
        if self.line is not None:
            location = f"{location}:{self.line}"
            if self.column is not None:
                location = f"{location}:{self.column}"
        return f"{location}: {self.reason}"


class DocumentNotFoundError(DocumentError, NotFoundError):
    """Input document does not exist or cannot be read."""

    def __init__(self, source: str, reason: str = "document not found") -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"{source}: {reason}")
