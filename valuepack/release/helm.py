"""Release source backed by the ``helm`` executable."""

from __future__ import annotations

import json
import os
import subprocess
from typing import Any, Mapping

from valuepack.config import HelmSettings
from valuepack.observability import get_logger
from valuepack.release.exceptions import (
    ReleaseConnectionError,
    ReleaseNotFoundError,
    ReleaseSourceError,
)

_NOT_FOUND_MARKERS = ("not found", "no revision for release")
_CONNECTION_MARKERS = (
    "kubernetes cluster unreachable",
    "connection refused",
    "no such host",
    "i/o timeout",
    "dial tcp",
    "tls handshake timeout",
)

_log = get_logger("release.helm")


class HelmReleaseSource:
    """Reads release history and values through ``helm status`` and ``helm get values``."""

    def __init__(self, settings: HelmSettings | None = None) -> None:
        self.settings = settings or HelmSettings()

    def current_revision(self, release: str) -> int:
        payload = self._run_json(["status", release, "--output", "json"])
        version = payload.get("version") if isinstance(payload, dict) else None
        if not isinstance(version, int) or isinstance(version, bool):
            raise ReleaseSourceError(f"helm status for {release} did not report a version")
        return version

    def get_values(self, release: str, revision: int) -> Mapping[str, Any]:
        payload = self._run_json(
            [
                "get",
                "values",
                release,
                "--all",
                "--revision",
                str(revision),
                "--output",
                "json",
            ]
        )
        if payload is None:
            return {}
        if not isinstance(payload, dict):
            raise ReleaseSourceError(
                f"helm values for {release}@{revision} are not a mapping"
            )
        return payload

    def build_command(self, args: list[str]) -> list[str]:
        command = [self.settings.helm_executable, *args]
        if self.settings.kubeconfig:
            command.extend(["--kubeconfig", self.settings.kubeconfig])
        if self.settings.kube_context:
            command.extend(["--kube-context", self.settings.kube_context])
        if self.settings.namespace:
            command.extend(["--namespace", self.settings.namespace])
        return command

    def _run_json(self, args: list[str]) -> Any:
        stdout = self._run(args)
        try:
            return json.loads(stdout) if stdout.strip() else None
        except json.JSONDecodeError as error:
            raise ReleaseSourceError(
                f"helm {' '.join(args[:2])} returned invalid JSON: {error}"
            ) from error

    def _run(self, args: list[str]) -> str:
        command = self.build_command(args)
        env = dict(os.environ)
        if self.settings.helm_driver:
            env["HELM_DRIVER"] = self.settings.helm_driver

        _log.debug("running helm", command=command)
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=self.settings.timeout_seconds,
                env=env,
                check=False,
            )
        except FileNotFoundError as error:
            raise ReleaseSourceError(
                f"'{self.settings.helm_executable}' command not found; "
                "ensure Helm is installed and on PATH"
            ) from error
        except subprocess.TimeoutExpired as error:
            raise ReleaseConnectionError(
                f"helm {' '.join(args[:2])} timed out after {self.settings.timeout_seconds}s"
            ) from error

        if completed.returncode != 0:
            raise _classify_failure(args, completed.returncode, completed.stderr or "")
        return completed.stdout or ""


def _classify_failure(args: list[str], returncode: int, stderr: str) -> ReleaseSourceError:
    message = stderr.strip() or f"exit code {returncode}"
    summary = f"helm {' '.join(args[:2])} failed: {message}"
    lowered = message.lower()

    if any(marker in lowered for marker in _CONNECTION_MARKERS):
        return ReleaseConnectionError(summary)
    if any(marker in lowered for marker in _NOT_FOUND_MARKERS):
        return ReleaseNotFoundError(summary)
    return ReleaseSourceError(summary)
