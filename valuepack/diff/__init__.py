"""Diff subsystem for valuepack."""

from valuepack.diff.engine import diff_documents
from valuepack.diff.exceptions import DiffError
from valuepack.diff.flatten import FLATTENED_KINDS, flatten_differences
from valuepack.diff.formatting import render_changeset, render_diff_summary, render_differences
from valuepack.diff.models import ABSENT, Detail, Difference, DocumentDiff

__all__ = [
    "ABSENT",
    "Detail",
    "Difference",
    "DocumentDiff",
    "DiffError",
    "diff_documents",
    "FLATTENED_KINDS",
    "flatten_differences",
    "render_changeset",
    "render_diff_summary",
    "render_differences",
]
