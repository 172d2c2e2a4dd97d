import json
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

import valuepack.pipeline
from valuepack.cli.app import app
from valuepack.config import HelmSettings
from valuepack.release import StaticReleaseSource


@pytest.fixture()
def static_source(monkeypatch: pytest.MonkeyPatch) -> dict[str, object]:
    source = StaticReleaseSource()
    source.add_revision("web", 1, {"image": {"tag": "1.0"}, "replicas": 1})
    source.add_revision("web", 2, {"image": {"tag": "1.1"}, "replicas": 1})
    seen: dict[str, object] = {}

    def _factory(settings: HelmSettings) -> StaticReleaseSource:
        seen["settings"] = settings
        return source

    monkeypatch.setattr(valuepack.pipeline, "HelmReleaseSource", _factory)
    return seen


def test_cli_release_yaml_output(tmp_path: Path, static_source: dict[str, object]) -> None:
    values = tmp_path / "values.yaml"
    values.write_text("image:\n  tag: '2.0'\nreplicas: 1\n", encoding="utf-8")
    out = tmp_path / "generated-values.yaml"

    runner = CliRunner()
    result = runner.invoke(
        app,
        [
            "--log-level",
            "error",
            "release",
            "web",
            "--values",
            str(values),
            "--output",
            "yaml",
            "--output-file",
            str(out),
            "--kube-context",
            "staging",
            "--namespace",
            "apps",
        ],
    )

    assert result.exit_code == 0
    assert yaml.safe_load(out.read_text(encoding="utf-8")) == {"image.tag": "1.0"}
    settings = static_source["settings"]
    assert isinstance(settings, HelmSettings)
    assert settings.kube_context == "staging"
    assert settings.namespace == "apps"


def test_cli_release_json_reports_resolved_revision(tmp_path: Path, static_source: dict[str, object]) -> None:
    values = tmp_path / "values.yaml"
    values.write_text("image:\n  tag: '2.0'\nreplicas: 3\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(
        app,
        ["--log-level", "error", "release", "web", "-f", str(values), "--revision", "2", "--json"],
    )

    assert result.exit_code == 0
    payload = json.loads(result.stdout.strip())
    assert payload["release"] == {"name": "web", "revision": 2, "current_revision": 2}
    assert payload["release_name"] == "web"
    assert payload["status"] == "ok"
    assert payload["changes"] == {"image.tag": "1.1", "replicas": 1}


def test_cli_release_unknown_revision_fails(tmp_path: Path, static_source: dict[str, object]) -> None:
    values = tmp_path / "values.yaml"
    values.write_text("a: 1\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(
        app,
        ["--log-level", "error", "release", "web", "-f", str(values), "--revision", "9"],
    )

    assert result.exit_code == 1
    assert "release failed: revision 9 does not exist" in result.output


def test_cli_release_negative_revision_is_config_error(tmp_path: Path, static_source: dict[str, object]) -> None:
    values = tmp_path / "values.yaml"
    values.write_text("a: 1\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(
        app,
        ["--log-level", "error", "release", "web", "-f", str(values), "--revision=-1"],
    )

    assert result.exit_code == 1
    assert "revision must be zero or positive" in result.output


def test_cli_release_requires_values_option() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["release", "web"])

    assert result.exit_code == 2
