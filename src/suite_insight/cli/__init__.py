"""CLI entry point -- registers all subcommands."""

from pathlib import Path
from typing import Optional

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="suite-insight",
    help="Suite Insight - E2E test-suite coverage and health diagnostics",
    add_completion=False,
    rich_markup_mode="rich",
)


@app.callback(invoke_without_command=True, no_args_is_help=True)
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write logs to this file"),
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
):
    """
    Mine requirements and correctness properties from design documents,
    correlate them with the e2e test tree and probe the health of the suite.

    [bold cyan]Examples:[/bold cyan]

      suite-insight coverage --test-dir test/e2e

      suite-insight health --offline

      suite-insight report --format text --fail-under 80
    """
    if version:
        console.print(f"[bold cyan]Suite Insight[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)

    ctx.ensure_object(dict)
    ctx.obj.update(config=config, verbose=verbose, quiet=quiet, log_file=log_file)


# Import subcommands to register them
from .coverage import coverage as _coverage  # noqa: F401, E402
from .health import health as _health  # noqa: F401, E402
from .report import report as _report  # noqa: F401, E402
from .check_logs import check_logs as _check_logs  # noqa: F401, E402
