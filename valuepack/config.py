"""Run configuration built from CLI options and environment variables."""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path

from valuepack.core.exceptions import ConfigError
from valuepack.observability.logging import LOG_LEVELS

ENV_PREFIX = "VALUEDIFF_"
OUTPUT_MODE_YAML = "yaml"
DEFAULT_OUTPUT_PATH = Path("generated-values.yaml")
DEFAULT_HELM_TIMEOUT_SECONDS = 30.0


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"{ENV_PREFIX}{key}", default)


def _env_float(key: str, default: float) -> float:
    raw = _env(key, str(default))
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{ENV_PREFIX}{key} must be a number, got {raw!r}") from exc


def default_kubeconfig_path() -> str:
    """Return ``$KUBECONFIG`` if set, otherwise ``~/.kube/config``."""
    env = os.environ.get("KUBECONFIG", "")
    if env:
        return env
    return str(Path("~/.kube/config").expanduser())


def validate_log_level(value: str) -> str:
    if value.lower() not in LOG_LEVELS:
        raise ConfigError(f"Invalid log level: {value}. Must be one of {', '.join(LOG_LEVELS)}")
    return value.lower()


@dataclass(frozen=True, slots=True)
class HelmSettings:
    """Connection settings handed to the helm release source."""

    kubeconfig: str | None = None
    kube_context: str | None = None
    namespace: str | None = None
    helm_driver: str | None = None
    helm_executable: str = "helm"
    timeout_seconds: float = DEFAULT_HELM_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        if not self.helm_executable:
            raise ConfigError("helm_executable must be non-empty")
        if self.timeout_seconds <= 0:
            raise ConfigError("timeout_seconds must be greater than zero")


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Parameters for one release-versus-values diff run."""

    release: str
    values_path: Path
    revision: int = 0
    output: str = "stdout"
    output_path: Path = DEFAULT_OUTPUT_PATH
    nested: bool = False
    save_release_values: Path | None = None
    helm: HelmSettings = field(default_factory=HelmSettings)

    def __post_init__(self) -> None:
        if not self.release.strip():
            raise ConfigError("release must be non-empty")
        if self.revision < 0:
            raise ConfigError(f"revision must be zero or positive, got {self.revision}")

    @property
    def writes_file(self) -> bool:
        return self.output == OUTPUT_MODE_YAML


def load_helm_settings(
    *,
    kubeconfig: str | None = None,
    kube_context: str | None = None,
    namespace: str | None = None,
    timeout_seconds: float | None = None,
) -> HelmSettings:
    """Build helm settings; explicit arguments win over VALUEDIFF_* variables."""
    return HelmSettings(
        kubeconfig=kubeconfig or _env("KUBECONFIG") or default_kubeconfig_path(),
        kube_context=kube_context or _env("KUBE_CONTEXT") or None,
        namespace=namespace or _env("NAMESPACE") or None,
        helm_driver=os.environ.get("HELM_DRIVER") or None,
        helm_executable=_env("HELM_EXECUTABLE", "helm"),
        timeout_seconds=(
            timeout_seconds
            if timeout_seconds is not None
            else _env_float("HELM_TIMEOUT", DEFAULT_HELM_TIMEOUT_SECONDS)
        ),
    )
