"""Shared CLI helpers."""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import click
import typer
from rich.console import Console
from rich.markup import escape

from ..config import AnalysisConfig, load_config
from ..exceptions import SuiteInsightError
from ..formatters import BaseFormatter, JsonFormatter, RichFormatter, TextFormatter
from ..logging_config import get_logger, setup_logging

console = Console()

FORMAT_CHOICE = click.Choice(["rich", "text", "json"], case_sensitive=False)

logger = get_logger(__name__)


def resolve_config(ctx: typer.Context, **overrides) -> AnalysisConfig:
    """Build config from the global options stored on ``ctx`` plus command flags."""
    obj = ctx.ensure_object(dict)
    return load_config(
        config_file=obj.get("config"),
        verbose=obj.get("verbose", False),
        quiet=obj.get("quiet", False),
        **overrides,
    )


def make_formatter(name: str, config: AnalysisConfig) -> BaseFormatter:
    name = name.lower()
    if name == "json":
        return JsonFormatter()
    if name == "text":
        return TextFormatter()
    return RichFormatter(console=console, coverage_target=config.thresholds.coverage_target_percent)


@contextmanager
def handle_errors(ctx: typer.Context) -> Iterator[None]:
    """Map library errors to a red message and a non-zero exit code."""
    verbose = ctx.ensure_object(dict).get("verbose", False)
    try:
        yield
    except typer.Exit:
        raise
    except SuiteInsightError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(1)
    except KeyboardInterrupt:
        logger.info("Analysis interrupted by user")
        console.print("\n[yellow]Analysis interrupted[/yellow]")
        raise typer.Exit(130)
    except Exception as e:
        logger.exception("Unexpected error during analysis")
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}", highlight=False)
        if verbose:
            console.print_exception()
        raise typer.Exit(1)


def init_logging(ctx: typer.Context) -> None:
    obj = ctx.ensure_object(dict)
    log_file: Optional[Path] = obj.get("log_file")
    setup_logging(
        verbose=obj.get("verbose", False),
        quiet=obj.get("quiet", False),
        log_file=str(log_file) if log_file else None,
    )
