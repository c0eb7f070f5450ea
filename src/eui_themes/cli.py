"""Typer CLI entrypoint for eui_themes."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer

from eui_themes.config import AppSettings, load_settings
from eui_themes.ingest.discover import DiscoveryError
from eui_themes.logging_utils import configure_logging
from eui_themes.pipeline import JobSuccess, ThemeBuildResult, run_build
from eui_themes.utils.paths import BootstrapError

USAGE = "Usage: eui-themes PACKAGE_NAME"

app = typer.Typer(
    add_completion=False,
    help="Compile EUI theme sources into CSS, minified CSS, variable JSON and type declarations.",
)


def _load_and_configure_logger(
    config_file: Path | None,
    overrides: dict[str, object],
) -> tuple[AppSettings, logging.Logger]:
    settings = load_settings(config_file=config_file, **overrides)
    logger = configure_logging(settings.paths.logs_root)
    return settings, logger


def _echo_results(result: ThemeBuildResult) -> None:
    for job in result.results:
        if isinstance(job, JobSuccess):
            outputs = ", ".join(typer.style(str(path), dim=True) for path in job.output_paths)
            typer.echo(f"{typer.style('✔', fg=typer.colors.GREEN)} Finished compiling {job.source_path} to {outputs}")
        else:
            typer.echo(
                f"{typer.style('✗', fg=typer.colors.RED)} Failed to compile {job.source_path} "
                f"with {job.error_type}: {job.error_message}"
            )
    typer.echo(f"files_succeeded: {len(result.succeeded)}")
    typer.echo(f"files_failed: {len(result.failed)}")
    if result.summary_path is not None:
        typer.echo(f"summary_path: {result.summary_path}")


@app.command()
def compile_themes(
    package_name: str | None = typer.Argument(
        None,
        metavar="PACKAGE_NAME",
        help="Package name used in the module path of generated type declarations.",
        show_default=False,
    ),
    target_theme: str | None = typer.Option(
        None,
        "--target-theme",
        help="Only build theme_<name> (overrides TARGET_THEME).",
    ),
    fail_on_error: bool = typer.Option(
        False,
        "--fail-on-error",
        help="Exit with status 1 when any theme file fails to compile.",
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config-file",
        help="Optional settings YAML path.",
        exists=False,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
) -> None:
    """Compile every theme family once."""

    if not package_name:
        typer.echo(USAGE)
        raise typer.Exit(code=1)

    overrides: dict[str, object] = {}
    if target_theme is not None:
        overrides["target_theme"] = target_theme
    if fail_on_error:
        overrides["build"] = {"fail_on_error": True}

    settings, logger = _load_and_configure_logger(config_file, overrides)
    try:
        result = asyncio.run(run_build(settings, package_name, logger=logger))
    except (BootstrapError, DiscoveryError) as exc:
        logger.error("theme_build.aborted error_type=%s error=%s", type(exc).__name__, exc)
        typer.echo(f"{typer.style('✗', fg=typer.colors.RED)} Build aborted: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    _echo_results(result)
    raise typer.Exit(code=result.exit_code(settings.build.fail_on_error))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
