"""relbuild command line.

    relbuild --version 1.2.3 --commit abc123 [--output_dir DIR] [--rpm]

Flags are parsed once into ``ReleaseFlags`` and handed to the pipeline.
"""

from __future__ import annotations

from pathlib import Path

import typer

from relbuild.core.config import DEFAULT_CONFIG_NAME, ProjectConfig, load_config, load_config_or_default
from relbuild.core.errors import ErrorCode
from relbuild.core.result import Err, Ok
from relbuild.output.console import ConsoleProtocol, RichConsole
from relbuild.output.errors import print_release_error, release_error_exit_code
from relbuild.services.pipeline import ReleasePipeline
from relbuild.services.settings import ReleaseFlags

app = typer.Typer(
    add_completion=False,
    rich_markup_mode="rich",
    help="Hermetic release build: binaries, tarball, .deb and optional .rpm.",
)


def build_console() -> ConsoleProtocol:
    return RichConsole()


def build_pipeline(project: ProjectConfig, console: ConsoleProtocol) -> ReleasePipeline:
    return ReleasePipeline(project=project, console=console)


@app.command()
def release(
    version: str = typer.Option("", "--version", help="Version number of the release."),
    commit: str = typer.Option("", "--commit", help="Commit at which to build."),
    output_dir: str | None = typer.Option(
        None, "--output_dir", help="Where to write outputs (default: current directory).", show_default=False
    ),
    rpm: bool = typer.Option(False, "--rpm", help="Build .rpm in addition to .deb."),
    config: Path | None = typer.Option(
        None,
        "--config",
        help=f"Project config (default: ./{DEFAULT_CONFIG_NAME} if present).",
        show_default=False,
    ),
) -> None:
    """Build release binaries and packages for the host platform."""
    console = build_console()

    loaded = load_config(config) if config is not None else load_config_or_default(Path(DEFAULT_CONFIG_NAME))
    if isinstance(loaded, Err):
        console.error(loaded.error.message)
        raise typer.Exit(code=int(ErrorCode.FAILURE))

    pipeline = build_pipeline(loaded.value, console)
    result = pipeline.run(ReleaseFlags(version=version, commit=commit, output_dir=output_dir, rpm=rpm))

    match result:
        case Ok(report):
            for artifact in report.artifacts:
                console.success(str(artifact))
        case Err(error):
            print_release_error(error, console)
            raise typer.Exit(code=release_error_exit_code(error))


def main() -> None:
    app()
