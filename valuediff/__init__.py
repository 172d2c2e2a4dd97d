"""Stable public API surface for valuediff.

This module is the supported import path for library users.
"""

from __future__ import annotations

from pathlib import Path

from valuepack.changeset import (
    ChangeSet,
    parse_changeset,
    serialize_changeset,
    write_output,
)
from valuepack.config import DEFAULT_OUTPUT_PATH, RunConfig, load_helm_settings
from valuepack.core.exceptions import ConfigError, NotFoundError, ValuePackError
from valuepack.core.models import Document, DocumentPath, PathElement
from valuepack.diff import (
    DiffError,
    Difference,
    DocumentDiff,
    diff_documents,
    flatten_differences,
)
from valuepack.document import (
    DocumentNotFoundError,
    DocumentParseError,
    document_from_values,
    load_document,
)
from valuepack.pipeline import PipelineResult, compare_documents, compare_files, run_release_diff
from valuepack.release import (
    HelmReleaseSource,
    ReleaseConnectionError,
    ReleaseNotFoundError,
    ReleaseSource,
    StaticReleaseSource,
    resolve_revision,
)

__version__ = "0.1.0"


def diff(left: str | Path, right: str | Path) -> DocumentDiff:
    """Diff two values files and return the ordered differences.

    Args:
        left: Path of the document holding the previous values.
        right: Path of the document to compare against.

    Returns:
        Structured document diff.
    """
    return diff_documents(load_document(left), load_document(right))


def changeset(left: str | Path, right: str | Path) -> ChangeSet:
    """Return the flattened change set between two values files.

    Args:
        left: Path of the document holding the previous values.
        right: Path of the document to compare against.

    Returns:
        Dotted-key change set of the left-hand values that changed.
    """
    return flatten_differences(diff(left, right))


def compare(
    left: str | Path,
    right: str | Path,
    *,
    out: str | Path | None = None,
    nested: bool = False,
) -> PipelineResult:
    """Compare two values files and optionally write the change set.

    Args:
        left: Path of the document holding the previous values.
        right: Path of the document to compare against.
        out: Destination YAML file. Nothing is written when omitted.
        nested: Write nested mappings instead of dotted keys.

    Returns:
        Pipeline result with diff, change set and output path.
    """
    if out is None:
        return compare_files(left, right)
    return compare_files(left, right, output="yaml", output_path=out, nested=nested)


def release_diff(
    release: str,
    values: str | Path,
    *,
    revision: int = 0,
    out: str | Path | None = None,
    nested: bool = False,
    source: ReleaseSource | None = None,
    kubeconfig: str | None = None,
    kube_context: str | None = None,
    namespace: str | None = None,
) -> PipelineResult:
    """Compare a release's historical values with a local values file.

    Args:
        release: Helm release name.
        values: Local values file compared against the release values.
        revision: Release revision; 0 selects the one before the current revision.
        out: Destination YAML file. Nothing is written when omitted.
        nested: Write nested mappings instead of dotted keys.
        source: Release source override; defaults to the helm executable.
        kubeconfig: Kubeconfig path for helm.
        kube_context: Kubeconfig context for helm.
        namespace: Namespace of the release.

    Returns:
        Pipeline result including the resolved release revision.
    """
    config = RunConfig(
        release=release,
        values_path=Path(values),
        revision=revision,
        output="yaml" if out is not None else "stdout",
        output_path=Path(out) if out is not None else DEFAULT_OUTPUT_PATH,
        nested=nested,
        helm=load_helm_settings(
            kubeconfig=kubeconfig,
            kube_context=kube_context,
            namespace=namespace,
        ),
    )
    return run_release_diff(config, source=source)


__all__ = [
    "__version__",
    "ChangeSet",
    "ConfigError",
    "DiffError",
    "Difference",
    "Document",
    "DocumentDiff",
    "DocumentNotFoundError",
    "DocumentParseError",
    "DocumentPath",
    "HelmReleaseSource",
    "NotFoundError",
    "PathElement",
    "PipelineResult",
    "ReleaseConnectionError",
    "ReleaseNotFoundError",
    "ReleaseSource",
    "RunConfig",
    "StaticReleaseSource",
    "ValuePackError",
    "changeset",
    "compare",
    "compare_documents",
    "diff",
    "diff_documents",
    "document_from_values",
    "flatten_differences",
    "load_document",
    "parse_changeset",
    "release_diff",
    "resolve_revision",
    "serialize_changeset",
    "write_output",
]
