from pathlib import Path

import pytest
import yaml

from valuepack.changeset import (
    ChangeSet,
    ChangeSetError,
    ChangeSetWriteError,
    parse_changeset,
    serialize_changeset,
    serialize_values,
    validate_changeset_payload,
    write_output,
)


@pytest.fixture()
def sample_changes() -> ChangeSet:
    return ChangeSet(
        [
            ("image.tag", "1.25.3"),
            ("replicaCount", 2),
            ("ingress.enabled", True),
            ("resources.limits.cpu", None),
            ("ratio", 0.5),
            ("version", "2024-01-15"),
            ("flag", "true"),
        ]
    )


def test_serialize_preserves_insertion_order(sample_changes: ChangeSet) -> None:
    text = serialize_changeset(sample_changes).decode("utf-8")

    keys = [line.split(":", 1)[0].strip("'\"") for line in text.splitlines()]
    assert keys == list(sample_changes.keys())


def test_serialize_round_trip_keeps_keys_and_scalar_values(sample_changes: ChangeSet) -> None:
    data = serialize_changeset(sample_changes)

    assert yaml.safe_load(data) == sample_changes.to_dict()
    parsed = parse_changeset(data)
    assert list(parsed.items()) == list(sample_changes.items())


def test_empty_changeset_serializes_to_empty_mapping() -> None:
    data = serialize_changeset(ChangeSet())

    assert data == b"{}\n"
    assert yaml.safe_load(data) == {}
    assert len(parse_changeset(data)) == 0


def test_serialize_nested_output() -> None:
    changes = ChangeSet([("a.b", 1), ("a.c", "x")])

    assert yaml.safe_load(serialize_changeset(changes, nested=True)) == {"a": {"b": 1, "c": "x"}}


def test_serialize_values_keeps_nested_structure() -> None:
    data = serialize_values({"image": {"tag": "1.0"}, "ports": [80, 443]})

    assert yaml.safe_load(data) == {"image": {"tag": "1.0"}, "ports": [80, 443]}


def test_parse_changeset_rejects_non_mapping() -> None:
    with pytest.raises(ChangeSetError):
        parse_changeset(b"- a\n- b\n")
    with pytest.raises(ChangeSetError):
        parse_changeset(b"a: [unclosed\n")


def test_parse_changeset_rejects_nested_values_with_location() -> None:
    with pytest.raises(ChangeSetError) as excinfo:
        parse_changeset(b"app.replicas: 2\napp.image:\n  tag: \"1.0\"\n")

    assert "Invalid change set at app.image" in str(excinfo.value)


def test_validate_changeset_payload_accepts_scalar_values() -> None:
    validate_changeset_payload({"a": "x", "b": 1, "c": 1.5, "d": True, "e": None})

    with pytest.raises(ChangeSetError):
        validate_changeset_payload({"a": [1, 2]})


def test_write_output_creates_parent_directories(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "dir" / "generated-values.yaml"

    written = write_output(b"a.b: 1\n", target)

    assert written == target
    assert target.read_bytes() == b"a.b: 1\n"


def test_write_output_failure_raises_write_error(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(ChangeSetWriteError) as excinfo:
        write_output(b"{}\n", blocker / "out.yaml")

    assert isinstance(excinfo.value, OSError)
