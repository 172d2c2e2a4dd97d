"""YAML/JSON document loading into position-annotated node trees."""

from __future__ import annotations

import json
from pathlib import Path
from typing import IO, Any, Literal, Mapping

import yaml

from valuepack.core.exceptions import ConfigError
from valuepack.core.models import Document, Node, render_key
from valuepack.core.types import SCALAR_TYPES
from valuepack.document.exceptions import DocumentNotFoundError, DocumentParseError
from valuepack.observability import get_logger

DocumentFormat = Literal["yaml", "json"]
DOCUMENT_FORMATS: tuple[str, ...] = ("yaml", "json")

_JSON_SUFFIXES = frozenset({".json"})
_YAML_SUFFIXES = frozenset({".yaml", ".yml"})
_MERGE_TAG = "tag:yaml.org,2002:merge"
_NULL_TAG = "tag:yaml.org,2002:null"
_TOO_DEEP = "document nesting too deep"

DocumentSource = str | Path | bytes | IO[bytes] | IO[str]

_log = get_logger("document.loader")


def load_document(
    source: DocumentSource,
    *,
    name: str | None = None,
    format: DocumentFormat | None = None,
) -> Document:
    """Load a YAML or JSON document from a path, bytes or a stream.

    Strings are treated as file paths. The format is taken from ``format``
    when given, then from the file suffix, then sniffed from the content.
    """
    if format is not None and format not in DOCUMENT_FORMATS:
        raise ConfigError(f"Unsupported document format: {format}")

    raw, source_name, suffix = _read_source(source, name)
    text = _decode(raw, source_name)
    resolved_format = format or _detect_format(text, suffix)

    if resolved_format == "json":
        root = _parse_json(text, source_name)
    else:
        root = _parse_yaml(text, source_name)

    document = Document(source=source_name, root=root)
    _log.debug(
        "document loaded",
        source=source_name,
        format=resolved_format,
        root_kind=root.kind,
    )
    return document


def document_from_values(values: Mapping[str, Any] | None, *, source: str) -> Document:
    """Wrap already decoded values (for example release values) as a Document."""
    if values is None:
        return Document(source=source)
    try:
        root = Node.from_value(values)
    except TypeError as error:
        raise DocumentParseError(source, str(error)) from error
    return Document(source=source, root=root)


def _read_source(source: DocumentSource, name: str | None) -> tuple[bytes | str, str, str]:
    if isinstance(source, (str, Path)):
        target = Path(source)
        source_name = name or str(target)
        try:
            raw = target.read_bytes()
        except FileNotFoundError as error:
            raise DocumentNotFoundError(source_name) from error
        except IsADirectoryError as error:
            raise DocumentNotFoundError(source_name, "is a directory") from error
        except OSError as error:
            raise DocumentNotFoundError(
                source_name, f"unreadable ({error.strerror or error})"
            ) from error
        return raw, source_name, target.suffix.lower()

    if isinstance(source, (bytes, bytearray)):
        return bytes(source), name or "<bytes>", ""

    if hasattr(source, "read"):
        stream_name = name or str(getattr(source, "name", "<stream>"))
        try:
            raw = source.read()
        except OSError as error:
            raise DocumentNotFoundError(
                stream_name, f"unreadable ({error.strerror or error})"
            ) from error
        return raw, stream_name, Path(stream_name).suffix.lower()

    raise TypeError(f"Unsupported document source: {type(source).__name__}")


def _decode(raw: bytes | str, source_name: str) -> str:
    if isinstance(raw, str):
        return raw
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as error:
        raise DocumentParseError(source_name, "document is not valid UTF-8 text") from error


def _detect_format(text: str, suffix: str) -> DocumentFormat:
    if suffix in _JSON_SUFFIXES:
        return "json"
    if suffix in _YAML_SUFFIXES:
        return "yaml"

    stripped = text.lstrip()
    if stripped[:1] in {"{", "["}:
        try:
            json.loads(text)
        except json.JSONDecodeError:
            return "yaml"
        except RecursionError:
            return "json"
        return "json"
    return "yaml"


class _DuplicateJsonKey(Exception):
    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key


def _parse_json(text: str, source_name: str) -> Node:
    if not text.strip():
        return Node.mapping({})
    try:
        value = json.loads(text, object_pairs_hook=_unique_pairs)
        if value is None:
            return Node.mapping({})
        return Node.from_value(value)
    except json.JSONDecodeError as error:
        raise DocumentParseError(
            source_name,
            error.msg,
            line=error.lineno,
            column=error.colno,
        ) from error
    except _DuplicateJsonKey as error:
        raise _locate_duplicate_json_key(text, source_name, error.key) from error
    except RecursionError as error:
        raise DocumentParseError(source_name, _TOO_DEEP) from error


def _unique_pairs(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise _DuplicateJsonKey(key)
        result[key] = value
    return result


def _locate_duplicate_json_key(text: str, source_name: str, key: str) -> DocumentParseError:
    # json hooks carry no positions; the YAML composer re-reads JSON with marks
    loader: yaml.SafeLoader | None = None
    try:
        loader = yaml.SafeLoader(text)
        node = loader.get_single_node()
        if node is not None:
            _check_duplicate_keys(loader, node, source_name)
    except DocumentParseError as located:
        return located
    except (yaml.YAMLError, ValueError, RecursionError):
        pass
    finally:
        if loader is not None:
            loader.dispose()
    return DocumentParseError(source_name, f"duplicate key '{key}'")


def _parse_yaml(text: str, source_name: str) -> Node:
    loader: yaml.SafeLoader | None = None
    try:
        loader = yaml.SafeLoader(text)
        node = loader.get_single_node()
        if node is None or _is_null_scalar(node):
            return Node.mapping({})
        _check_duplicate_keys(loader, node, source_name)
        return _convert(loader, node, source_name, active=set(), memo={})
    except yaml.MarkedYAMLError as error:
        mark = error.problem_mark or error.context_mark
        raise DocumentParseError(
            source_name,
            error.problem or str(error),
            line=mark.line + 1 if mark is not None else None,
            column=mark.column + 1 if mark is not None else None,
        ) from error
    except yaml.YAMLError as error:
        raise DocumentParseError(source_name, str(error)) from error
    except ValueError as error:
        raise DocumentParseError(source_name, f"invalid scalar: {error}") from error
    except RecursionError as error:
        raise DocumentParseError(source_name, _TOO_DEEP) from error
    finally:
        if loader is not None:
            loader.dispose()


def _is_null_scalar(node: yaml.Node) -> bool:
    return isinstance(node, yaml.ScalarNode) and node.tag == _NULL_TAG


def _check_duplicate_keys(loader: yaml.SafeLoader, root: yaml.Node, source_name: str) -> None:
    """Reject repeated keys in every mapping of the composed tree.

    Must run before any merge key is flattened: flattening rewrites the key
    lists of merge sources in place.
    """
    seen_nodes: set[int] = set()
    pending = [root]
    while pending:
        node = pending.pop()
        if id(node) in seen_nodes:
            continue
        seen_nodes.add(id(node))

        if isinstance(node, yaml.SequenceNode):
            pending.extend(reversed(node.value))
            continue
        if not isinstance(node, yaml.MappingNode):
            continue

        keys: set[str] = set()
        for key_node, value_node in node.value:
            pending.append(value_node)
            if key_node.tag == _MERGE_TAG:
                continue
            key = _construct_key(loader, key_node, source_name)
            if key in keys:
                raise DocumentParseError(
                    source_name,
                    f"duplicate key '{key}'",
                    line=key_node.start_mark.line + 1,
                    column=key_node.start_mark.column + 1,
                )
            keys.add(key)


def _convert(
    loader: yaml.SafeLoader,
    node: yaml.Node,
    source_name: str,
    *,
    active: set[int],
    memo: dict[int, Node],
) -> Node:
    line = node.start_mark.line + 1
    column = node.start_mark.column + 1

    if id(node) in memo:
        return memo[id(node)]
    if id(node) in active:
        raise DocumentParseError(source_name, "recursive alias", line=line, column=column)

    if isinstance(node, yaml.ScalarNode):
        value = loader.construct_object(node, deep=True)
        if not isinstance(value, SCALAR_TYPES):
            # timestamps and binary stay as written
            value = node.value
        return Node.scalar(value, line=line, column=column)

    if not isinstance(node, (yaml.SequenceNode, yaml.MappingNode)):
        raise DocumentParseError(
            source_name, f"unsupported YAML node: {type(node).__name__}", line=line, column=column
        )

    active.add(id(node))
    try:
        if isinstance(node, yaml.SequenceNode):
            items = [
                _convert(loader, child, source_name, active=active, memo=memo)
                for child in node.value
            ]
            converted = Node.sequence(items, line=line, column=column)
        else:
            converted = _convert_mapping(loader, node, source_name, active=active, memo=memo)
    finally:
        active.discard(id(node))

    memo[id(node)] = converted
    return converted


def _convert_mapping(
    loader: yaml.SafeLoader,
    node: yaml.MappingNode,
    source_name: str,
    *,
    active: set[int],
    memo: dict[int, Node],
) -> Node:
    # merged pairs come first, so explicit keys override them
    loader.flatten_mapping(node)

    items: dict[str, Node] = {}
    for key_node, value_node in node.value:
        key = _construct_key(loader, key_node, source_name)
        items[key] = _convert(loader, value_node, source_name, active=active, memo=memo)

    return Node.mapping(
        items,
        line=node.start_mark.line + 1,
        column=node.start_mark.column + 1,
    )


def _construct_key(loader: yaml.SafeLoader, key_node: yaml.Node, source_name: str) -> str:
    if not isinstance(key_node, yaml.ScalarNode):
        raise DocumentParseError(
            source_name,
            "mapping keys must be scalars",
            line=key_node.start_mark.line + 1,
            column=key_node.start_mark.column + 1,
        )
    key = loader.construct_object(key_node, deep=True)
    if not isinstance(key, SCALAR_TYPES):
        key = key_node.value
    return render_key(key)
