"""Diff subsystem exceptions."""

from valuepack.core.exceptions import ValuePackError


class DiffError(ValuePackError):
    """Difference record does not match the shape its kind requires."""
