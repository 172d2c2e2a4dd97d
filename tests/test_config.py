from pathlib import Path

import pytest

from valuepack.config import (
    DEFAULT_OUTPUT_PATH,
    HelmSettings,
    RunConfig,
    default_kubeconfig_path,
    load_helm_settings,
    validate_log_level,
)
from valuepack.core.exceptions import ConfigError


def test_default_kubeconfig_prefers_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KUBECONFIG", "/etc/kube/config")

    assert default_kubeconfig_path() == "/etc/kube/config"


def test_default_kubeconfig_falls_back_to_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("KUBECONFIG", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))

    assert default_kubeconfig_path() == str(tmp_path / ".kube" / "config")


def test_load_helm_settings_reads_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VALUEDIFF_KUBECONFIG", "/opt/kubeconfig")
    monkeypatch.setenv("VALUEDIFF_KUBE_CONTEXT", "prod")
    monkeypatch.setenv("VALUEDIFF_NAMESPACE", "apps")
    monkeypatch.setenv("VALUEDIFF_HELM_TIMEOUT", "12.5")
    monkeypatch.setenv("HELM_DRIVER", "secret")

    settings = load_helm_settings()

    assert settings == HelmSettings(
        kubeconfig="/opt/kubeconfig",
        kube_context="prod",
        namespace="apps",
        helm_driver="secret",
        helm_executable="helm",
        timeout_seconds=12.5,
    )


def test_explicit_helm_settings_override_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VALUEDIFF_KUBE_CONTEXT", "prod")

    settings = load_helm_settings(kube_context="dev", timeout_seconds=5)

    assert settings.kube_context == "dev"
    assert settings.timeout_seconds == 5


def test_invalid_timeout_environment_is_a_config_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VALUEDIFF_HELM_TIMEOUT", "soon")

    with pytest.raises(ConfigError, match="VALUEDIFF_HELM_TIMEOUT"):
        load_helm_settings()


def test_helm_settings_reject_non_positive_timeout() -> None:
    with pytest.raises(ConfigError):
        HelmSettings(timeout_seconds=0)


def test_run_config_defaults_and_output_mode() -> None:
    config = RunConfig(release="web", values_path=Path("values.yaml"))

    assert config.revision == 0
    assert config.output_path == DEFAULT_OUTPUT_PATH
    assert config.writes_file is False
    assert RunConfig(release="web", values_path=Path("v.yaml"), output="yaml").writes_file is True


def test_run_config_validation() -> None:
    with pytest.raises(ConfigError):
        RunConfig(release=" ", values_path=Path("values.yaml"))
    with pytest.raises(ConfigError):
        RunConfig(release="web", values_path=Path("values.yaml"), revision=-2)


def test_validate_log_level() -> None:
    assert validate_log_level("INFO") == "info"
    with pytest.raises(ConfigError):
        validate_log_level("verbose")
