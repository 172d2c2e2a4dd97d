"""CLI-friendly rendering for document diffs and change sets."""

from __future__ import annotations

from typing import Any

from valuepack.changeset.models import ChangeSet
from valuepack.diff.models import ABSENT, DocumentDiff


def render_diff_summary(diff: DocumentDiff) -> str:
    summary = diff.summary()
    return (
        f"left={diff.left_source} right={diff.right_source} "
        f"changed={summary['value-changed']} added={summary['key-added']} "
        f"removed={summary['key-removed']} type_changed={summary['type-changed']}"
    )


def render_differences(diff: DocumentDiff, *, max_changes: int = 20) -> str:
    if diff.identical:
        return "no differences detected"

    lines: list[str] = ["differences:"]
    for difference in diff.differences[:max_changes]:
        detail = difference.details[0]
        lines.append(
            f"  [{difference.kind}] {difference.path.dotted() or '<root>'}: "
            f"{_render_value(detail.from_value)} -> {_render_value(detail.to_value)}"
        )
    if len(diff.differences) > max_changes:
        lines.append("  ... additional differences omitted")
    return "\n".join(lines)


def render_changeset(changes: ChangeSet) -> str:
    if not changes:
        return "change set: empty"
    lines = [f"change set: {len(changes)} key(s)"]
    for key, value in changes.items():
        lines.append(f"  {key}={_render_value(value)}")
    return "\n".join(lines)


def _render_value(value: Any) -> str:
    if value is ABSENT:
        return "<absent>"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return repr(value) if isinstance(value, str) else str(value)
