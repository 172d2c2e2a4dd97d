"""Depth-first structural diff engine for parsed documents."""

from __future__ import annotations

from valuepack.core.models import Document, DocumentPath, Node, scalars_equal
from valuepack.diff.models import ABSENT, Detail, Difference, DocumentDiff
from valuepack.observability import get_logger

_log = get_logger("diff.engine")


def diff_documents(left: Document, right: Document) -> DocumentDiff:
    """Diff two documents node by node.

    Mapping keys are visited in left order, then right-only keys in right
    order. Sequences are compared by index only, so an element inserted in
    the middle shows up as changes at every later index.
    """
    differences: list[Difference] = []
    _collect(left.root, right.root, path=DocumentPath(), out=differences)

    result = DocumentDiff(
        left_source=left.source,
        right_source=right.source,
        differences=differences,
    )
    _log.info(
        "diff computed",
        left=left.source,
        right=right.source,
        differences=len(differences),
        summary=result.summary(),
    )
    return result


def _collect(left: Node, right: Node, *, path: DocumentPath, out: list[Difference]) -> None:
    if left.kind != right.kind:
        out.append(
            Difference(
                path=path,
                kind="type-changed",
                details=(Detail(left.to_python(), right.to_python()),),
                left_line=left.line,
                right_line=right.line,
            )
        )
        return

    if left.kind == "mapping":
        _collect_mapping(left, right, path=path, out=out)
        return

    if left.kind == "sequence":
        _collect_sequence(left, right, path=path, out=out)
        return

    if not scalars_equal(left.value, right.value):
        out.append(
            Difference(
                path=path,
                kind="value-changed",
                details=(Detail(left.value, right.value),),
                left_line=left.line,
                right_line=right.line,
            )
        )


def _collect_mapping(left: Node, right: Node, *, path: DocumentPath, out: list[Difference]) -> None:
    left_items = left.value
    right_items = right.value

    for key, left_child in left_items.items():
        child_path = path.child_key(key)
        right_child = right_items.get(key)
        if right_child is None:
            out.append(_removed(child_path, left_child))
        else:
            _collect(left_child, right_child, path=child_path, out=out)

    for key, right_child in right_items.items():
        if key not in left_items:
            out.append(_added(path.child_key(key), right_child))


def _collect_sequence(left: Node, right: Node, *, path: DocumentPath, out: list[Difference]) -> None:
    left_items = left.value
    right_items = right.value
    shared = min(len(left_items), len(right_items))

    for idx in range(shared):
        _collect(left_items[idx], right_items[idx], path=path.child_index(idx), out=out)

    for idx in range(shared, len(left_items)):
        out.append(_removed(path.child_index(idx), left_items[idx]))

    for idx in range(shared, len(right_items)):
        out.append(_added(path.child_index(idx), right_items[idx]))


def _removed(path: DocumentPath, node: Node) -> Difference:
    return Difference(
        path=path,
        kind="key-removed",
        details=(Detail(from_value=node.to_python(), to_value=ABSENT),),
        left_line=node.line,
    )


def _added(path: DocumentPath, node: Node) -> Difference:
    return Difference(
        path=path,
        kind="key-added",
        details=(Detail(from_value=ABSENT, to_value=node.to_python()),),
        right_line=node.line,
    )
