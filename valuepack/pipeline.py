"""End-to-end diff-to-change-set runs."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from valuepack.changeset import (
    ChangeSet,
    serialize_changeset,
    serialize_values,
    write_output,
)
from valuepack.config import DEFAULT_OUTPUT_PATH, OUTPUT_MODE_YAML, RunConfig
from valuepack.core.models import Document
from valuepack.diff import DocumentDiff, diff_documents, flatten_differences
from valuepack.document import document_from_values, load_document
from valuepack.observability import get_logger
from valuepack.release import (
    HelmReleaseSource,
    ReleaseSource,
    ReleaseValues,
    fetch_release_values,
)

_log = get_logger("pipeline")


@dataclass(slots=True)
class PipelineResult:
    """Diff, change set and output location of one run."""

    diff: DocumentDiff
    changes: ChangeSet
    output_path: Path | None = None
    release: ReleaseValues | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "diff": self.diff.to_dict(),
            "changes": self.changes.to_dict(),
            "output_path": str(self.output_path) if self.output_path is not None else None,
        }
        if self.release is not None:
            payload["release"] = {
                "name": self.release.release,
                "revision": self.release.revision,
                "current_revision": self.release.current_revision,
            }
        return payload


def compare_documents(left: Document, right: Document) -> PipelineResult:
    """Diff two loaded documents and flatten the result."""
    diff = diff_documents(left, right)
    changes = flatten_differences(diff)
    return PipelineResult(diff=diff, changes=changes)


def compare_files(
    left: str | Path,
    right: str | Path,
    *,
    output: str = "stdout",
    output_path: str | Path = DEFAULT_OUTPUT_PATH,
    nested: bool = False,
) -> PipelineResult:
    """Compare two values files; ``output="yaml"`` writes the change set."""
    left_document = load_document(left)
    right_document = load_document(right)
    result = compare_documents(left_document, right_document)
    _emit(result, output=output, output_path=Path(output_path), nested=nested)
    return result


def run_release_diff(config: RunConfig, source: ReleaseSource | None = None) -> PipelineResult:
    """Compare a release's historical values with a local values file.

    The release values are the "from" side, so the change set records the
    values the release used where the local file differs.
    """
    release_source = source if source is not None else HelmReleaseSource(config.helm)
    release_values = fetch_release_values(release_source, config.release, config.revision)

    left = document_from_values(release_values.values, source=release_values.source_name)
    right = load_document(config.values_path)

    result = compare_documents(left, right)
    result.release = release_values

    if config.save_release_values is not None:
        write_output(serialize_values(release_values.values), config.save_release_values)

    _emit(
        result,
        output=config.output,
        output_path=config.output_path,
        nested=config.nested,
    )
    return result


def _emit(result: PipelineResult, *, output: str, output_path: Path, nested: bool) -> None:
    _log.info("diff detected", changes=result.changes.to_dict())
    if output != OUTPUT_MODE_YAML:
        return
    data = serialize_changeset(result.changes, nested=nested)
    result.output_path = write_output(data, output_path)
