"""check-logs CLI command -- validate captured controller logs or metrics."""

from pathlib import Path
from typing import List, Optional

import typer

from ..content_checks import (
    check_log_lines,
    check_metric_lines,
    check_sensitive_information,
    validate_content,
)
from ..exceptions import DocumentReadError
from . import app
from ._common import console, handle_errors, init_logging


@app.command("check-logs")
def check_logs(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Captured log or metrics text", dir_okay=False),
    expect: Optional[List[str]] = typer.Option(
        None, "--expect", "-e", help="Regex that must appear (repeatable)"
    ),
    metrics: bool = typer.Option(
        False, "--metrics", help="Treat the file as Prometheus exposition text"
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Fail on lines that do not match the expected shape"
    ),
):
    """
    Check captured output for expected patterns and leaked credentials.

    [bold cyan]Examples:[/bold cyan]

      suite-insight check-logs controller.log -e "reconcil" -e "OptimizationPolicy"

      suite-insight check-logs metrics.txt --metrics --strict
    """
    init_logging(ctx)
    with handle_errors(ctx):
        try:
            text = file.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise DocumentReadError(file, "log", str(e))

        validate_content(text, expect or [], source=str(file))
        check_sensitive_information(text)

        bad_lines = check_metric_lines(text) if metrics else check_log_lines(text)
        shape = "metric" if metrics else "log"
        if bad_lines:
            console.print(f"[yellow]{len(bad_lines)} lines do not look like {shape} lines[/yellow]")
            for line in bad_lines[:10]:
                console.print(f"  {line}", highlight=False, markup=False)
            if strict:
                raise typer.Exit(1)

        console.print(f"[green]OK[/green] {file}")
