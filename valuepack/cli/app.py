from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version as package_version
import json
from pathlib import Path
from typing import Any

import typer

from valuepack.config import (
    DEFAULT_OUTPUT_PATH,
    RunConfig,
    load_helm_settings,
    validate_log_level,
)
from valuepack.core.exceptions import ConfigError, ValuePackError
from valuepack.diff import render_changeset, render_diff_summary, render_differences
from valuepack.observability import setup_logging
from valuepack.pipeline import PipelineResult, compare_files, run_release_diff

app = typer.Typer(help="valuediff CLI")


@dataclass(slots=True)
class _OutputOptions:
    quiet: bool = False


_OUTPUT_OPTIONS = _OutputOptions()


def _resolve_cli_version() -> str:
    try:
        return package_version("valuediff")
    except PackageNotFoundError:
        from valuediff import __version__ as local_version

        return local_version


def _version_callback(value: bool) -> None:
    if not value:
        return
    typer.echo(_resolve_cli_version(), color=False)
    raise typer.Exit()


@app.callback()
def app_options(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show valuediff version and exit.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        help="Suppress non-error text output.",
    ),
    log_level: str = typer.Option(
        "info",
        "--log-level",
        envvar="VALUEDIFF_LOG_LEVEL",
        help="Log level: debug, info, warning or error.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Emit logs as JSON lines instead of console text.",
    ),
) -> None:
    """Diff Helm release values against a values file and emit a change set."""
    try:
        level = validate_log_level(log_level)
    except ConfigError as error:
        raise typer.BadParameter(str(error), param_hint="--log-level") from error
    _OUTPUT_OPTIONS.quiet = quiet
    setup_logging(level, json_logs=json_logs)


def _echo(message: str, *, err: bool = False, force: bool = False) -> None:
    if _OUTPUT_OPTIONS.quiet and not err and not force:
        return
    typer.echo(message, err=err)


def _echo_json(payload: dict[str, Any], *, err: bool = False) -> None:
    rendered = json.dumps(
        payload,
        ensure_ascii=True,
        sort_keys=True,
        separators=(",", ":"),
    )
    typer.echo(rendered, err=err)


def _fail(command: str, error: Exception, *, json_output: bool, context: dict[str, Any]) -> None:
    message = f"{command} failed: {error}"
    if json_output:
        _echo_json(
            {
                "status": "error",
                "exit_code": 1,
                "message": message,
                "error_type": error.__class__.__name__,
                **context,
            }
        )
    else:
        _echo(message, err=True)
    raise typer.Exit(code=1) from error


def _report(result: PipelineResult, *, json_output: bool, max_changes: int, context: dict[str, Any]) -> None:
    if json_output:
        _echo_json(
            {
                **result.to_dict(),
                "status": "ok",
                "exit_code": 0,
                "message": "diff completed",
                **context,
            }
        )
        return

    _echo(render_diff_summary(result.diff))
    _echo(render_differences(result.diff, max_changes=max(1, max_changes)))
    _echo(render_changeset(result.changes))
    if result.output_path is not None:
        _echo(f"change set written: {result.output_path}")


@app.command()
def compare(
    left: Path = typer.Argument(..., help="Values file holding the previous (from) values."),
    right: Path = typer.Argument(..., help="Values file to compare against."),
    output: str = typer.Option(
        "stdout",
        "--output",
        help="Output mode. 'yaml' writes the change set to --output-file; anything else prints a summary.",
    ),
    output_file: Path = typer.Option(
        DEFAULT_OUTPUT_PATH,
        "--output-file",
        help="Destination for the change set when --output yaml is used.",
    ),
    nested: bool = typer.Option(
        False,
        "--nested",
        help="Write the change set as nested mappings instead of dotted keys.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable output.",
    ),
    max_changes: int = typer.Option(
        20,
        "--max-changes",
        help="Maximum number of differences to print in text mode.",
    ),
) -> None:
    """Diff two values files and flatten the changed keys."""
    context = {"left_path": str(left), "right_path": str(right)}
    try:
        result = compare_files(
            left,
            right,
            output=output,
            output_path=output_file,
            nested=nested,
        )
    except ValuePackError as error:
        _fail("compare", error, json_output=json_output, context=context)
        return

    _report(result, json_output=json_output, max_changes=max_changes, context=context)


@app.command()
def release(
    name: str = typer.Argument(..., help="Name of the Helm release to read values from."),
    values: Path = typer.Option(
        ...,
        "--values",
        "-f",
        help="Values file to compare the release values against.",
    ),
    revision: int = typer.Option(
        0,
        "--revision",
        help="Release revision to read. 0 selects the revision before the current one.",
    ),
    output: str = typer.Option(
        "stdout",
        "--output",
        help="Output mode. 'yaml' writes the change set to --output-file; anything else prints a summary.",
    ),
    output_file: Path = typer.Option(
        DEFAULT_OUTPUT_PATH,
        "--output-file",
        help="Destination for the change set when --output yaml is used.",
    ),
    nested: bool = typer.Option(
        False,
        "--nested",
        help="Write the change set as nested mappings instead of dotted keys.",
    ),
    save_release_values: Path | None = typer.Option(
        None,
        "--save-release-values",
        help="Also write the fetched release values to this YAML file.",
    ),
    kubeconfig: str | None = typer.Option(
        None,
        "--kubeconfig",
        help="Path to the kubeconfig file (defaults to $KUBECONFIG or ~/.kube/config).",
    ),
    kube_context: str | None = typer.Option(
        None,
        "--kube-context",
        help="Name of the kubeconfig context to use.",
    ),
    namespace: str | None = typer.Option(
        None,
        "--namespace",
        "-n",
        help="Namespace scope for this request.",
    ),
    helm_timeout: float | None = typer.Option(
        None,
        "--helm-timeout",
        help="Seconds to wait for each helm invocation.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable output.",
    ),
    max_changes: int = typer.Option(
        20,
        "--max-changes",
        help="Maximum number of differences to print in text mode.",
    ),
) -> None:
    """Diff a release's historical values against a values file."""
    context = {"release_name": name, "values_path": str(values)}
    try:
        config = RunConfig(
            release=name,
            values_path=values,
            revision=revision,
            output=output,
            output_path=output_file,
            nested=nested,
            save_release_values=save_release_values,
            helm=load_helm_settings(
                kubeconfig=kubeconfig,
                kube_context=kube_context,
                namespace=namespace,
                timeout_seconds=helm_timeout,
            ),
        )
        result = run_release_diff(config)
    except ValuePackError as error:
        _fail("release", error, json_output=json_output, context=context)
        return

    _report(result, json_output=json_output, max_changes=max_changes, context=context)


def main() -> None:
    app()
