"""Health CLI command -- probe the test suite and its cluster dependencies."""

from typing import Optional

import typer

from ..engine import SuiteAnalyzer
from ..models import HealthStatus
from . import app
from ._common import FORMAT_CHOICE, handle_errors, init_logging, make_formatter, resolve_config


@app.command()
def health(
    ctx: typer.Context,
    test_dir: Optional[str] = typer.Option(
        None, "--test-dir", "-t", help="Test source tree (default: test/e2e)"
    ),
    offline: bool = typer.Option(
        False, "--offline", "--no-cluster", help="Skip cluster connectivity and resource probes"
    ),
    kubeconfig: Optional[str] = typer.Option(None, "--kubeconfig", help="Path to kubeconfig"),
    kube_context: Optional[str] = typer.Option(None, "--context", help="Kubeconfig context"),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Seconds allowed for all probes (default: 30)", min=0.1
    ),
    workers: Optional[int] = typer.Option(
        None, "-w", "--workers", help="Parallel probe workers (default: auto)", min=1, max=32
    ),
    output_format: str = typer.Option(
        "rich", "--format", "-f", help="Output format: rich | text | json", click_type=FORMAT_CHOICE
    ),
):
    """
    Probe test-suite health and print one overall verdict.

    Exits 1 when the verdict is unhealthy.

    [bold cyan]Examples:[/bold cyan]

      suite-insight health

      suite-insight health --offline --format text
    """
    init_logging(ctx)
    with handle_errors(ctx):
        config = resolve_config(
            ctx,
            test_dir=test_dir,
            cluster_probes=False if offline else None,
            kubeconfig=kubeconfig,
            kube_context=kube_context,
            probe_timeout_seconds=timeout,
            workers=workers,
        )
        report = SuiteAnalyzer(config).analyze_health()
        make_formatter(output_format, config).render(report)

        if report.overall_health == HealthStatus.UNHEALTHY:
            raise typer.Exit(1)
