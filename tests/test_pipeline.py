from pathlib import Path

import pytest
import yaml

from valuepack.changeset import ChangeSetWriteError
from valuepack.config import RunConfig
from valuepack.core.models import Document, Node
from valuepack.document import DocumentNotFoundError
from valuepack.pipeline import compare_documents, compare_files, run_release_diff
from valuepack.release import ReleaseNotFoundError, StaticReleaseSource


def _doc(values: object) -> Document:
    return Document(source="doc", root=Node.from_value(values))


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_scenario_nested_value_change() -> None:
    result = compare_documents(_doc({"a": {"b": 1}}), _doc({"a": {"b": 2}}))

    assert dict(result.changes) == {"a.b": 1}


def test_scenario_removed_key_is_not_flattened() -> None:
    result = compare_documents(_doc({"x": 1, "y": 2}), _doc({"x": 1}))

    assert [(d.path.dotted(), d.kind) for d in result.diff] == [("y", "key-removed")]
    assert dict(result.changes) == {}


def test_scenario_sequence_index_change() -> None:
    result = compare_documents(_doc({"list": [1, 2, 3]}), _doc({"list": [1, 2, 4]}))

    (difference,) = result.diff.differences
    assert difference.path.dotted() == "list.2"
    assert (difference.details[0].from_value, difference.details[0].to_value) == (3, 4)
    assert dict(result.changes) == {"list.2": 3}


def test_scenario_empty_documents_write_empty_mapping(tmp_path: Path) -> None:
    left = _write(tmp_path / "left.yaml", "{}\n")
    right = _write(tmp_path / "right.yaml", "{}\n")
    out = tmp_path / "generated-values.yaml"

    result = compare_files(left, right, output="yaml", output_path=out)

    assert result.diff.identical is True
    assert len(result.changes) == 0
    assert result.output_path == out
    assert yaml.safe_load(out.read_text(encoding="utf-8")) == {}


def test_compare_files_console_mode_writes_nothing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    left = _write(tmp_path / "left.yaml", "a: 1\n")
    right = _write(tmp_path / "right.yaml", "a: 2\n")

    result = compare_files(left, right, output="stdout")

    assert dict(result.changes) == {"a": 1}
    assert result.output_path is None
    assert not (tmp_path / "generated-values.yaml").exists()


def test_compare_files_missing_input_writes_nothing(tmp_path: Path) -> None:
    left = _write(tmp_path / "left.yaml", "a: 1\n")
    out = tmp_path / "out.yaml"

    with pytest.raises(DocumentNotFoundError):
        compare_files(left, tmp_path / "missing.yaml", output="yaml", output_path=out)

    assert not out.exists()


def test_compare_files_write_failure_surfaces(tmp_path: Path) -> None:
    left = _write(tmp_path / "left.yaml", "a: 1\n")
    right = _write(tmp_path / "right.yaml", "a: 2\n")
    blocker = _write(tmp_path / "blocker", "file")

    with pytest.raises(ChangeSetWriteError):
        compare_files(left, right, output="yaml", output_path=blocker / "out.yaml")


def test_run_release_diff_uses_previous_revision(tmp_path: Path) -> None:
    source = StaticReleaseSource()
    source.add_revision("web", 1, {"image": {"tag": "1.0"}, "replicas": 1})
    source.add_revision("web", 2, {"image": {"tag": "1.1"}, "replicas": 2})
    values = _write(tmp_path / "values.yaml", "image:\n  tag: '1.3'\nreplicas: 2\n")
    out = tmp_path / "generated-values.yaml"
    saved = tmp_path / "release-values.yaml"
    config = RunConfig(
        release="web",
        values_path=values,
        output="yaml",
        output_path=out,
        save_release_values=saved,
    )

    result = run_release_diff(config, source=source)

    assert result.release is not None
    assert result.release.revision == 1
    assert dict(result.changes) == {"image.tag": "1.0", "replicas": 1}
    assert yaml.safe_load(out.read_text(encoding="utf-8")) == {"image.tag": "1.0", "replicas": 1}
    assert yaml.safe_load(saved.read_text(encoding="utf-8")) == {
        "image": {"tag": "1.0"},
        "replicas": 1,
    }
    assert result.to_dict()["release"] == {"name": "web", "revision": 1, "current_revision": 2}


def test_run_release_diff_nested_output(tmp_path: Path) -> None:
    source = StaticReleaseSource()
    source.add_revision("web", 4, {"image": {"tag": "1.0"}})
    source.add_revision("web", 5, {"image": {"tag": "2.0"}})
    values = _write(tmp_path / "values.yaml", "image:\n  tag: '2.0'\n")
    out = tmp_path / "nested.yaml"
    config = RunConfig(
        release="web",
        values_path=values,
        revision=4,
        output="yaml",
        output_path=out,
        nested=True,
    )

    run_release_diff(config, source=source)

    assert yaml.safe_load(out.read_text(encoding="utf-8")) == {"image": {"tag": "1.0"}}


def test_run_release_diff_first_revision_fails_without_output(tmp_path: Path) -> None:
    source = StaticReleaseSource()
    source.add_revision("web", 1, {"a": 1})
    values = _write(tmp_path / "values.yaml", "a: 2\n")
    out = tmp_path / "out.yaml"
    config = RunConfig(release="web", values_path=values, output="yaml", output_path=out)

    with pytest.raises(ReleaseNotFoundError):
        run_release_diff(config, source=source)

    assert not out.exists()
