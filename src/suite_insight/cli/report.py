"""Report CLI command -- coverage and health in one run."""

from typing import Optional

import typer

from ..engine import SuiteAnalyzer
from ..models import HealthStatus
from . import app
from ._common import (
    FORMAT_CHOICE,
    console,
    handle_errors,
    init_logging,
    make_formatter,
    resolve_config,
)


@app.command()
def report(
    ctx: typer.Context,
    requirements: Optional[str] = typer.Option(
        None, "--requirements", "-r", help="Requirements document (default: requirements.md)"
    ),
    design: Optional[str] = typer.Option(
        None, "--design", "-d", help="Design document (default: design.md)"
    ),
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
    fail_under: Optional[float] = typer.Option(
        None, "--fail-under", help="Exit 1 if overall coverage is below this percent", min=0, max=100
    ),
):
    """
    Full diagnostic: coverage, component health, quality metrics and
    prioritized recommendations.

    Exits 1 when the verdict is unhealthy or coverage is below --fail-under.

    [bold cyan]Examples:[/bold cyan]

      suite-insight report --offline

      suite-insight report --format json > suite-report.json
    """
    init_logging(ctx)
    with handle_errors(ctx):
        config = resolve_config(
            ctx,
            requirements_file=requirements,
            design_file=design,
            test_dir=test_dir,
            cluster_probes=False if offline else None,
            kubeconfig=kubeconfig,
            kube_context=kube_context,
            probe_timeout_seconds=timeout,
            workers=workers,
        )
        result = SuiteAnalyzer(config).analyze()
        make_formatter(output_format, config).render(result)

        failed = result.overall_health == HealthStatus.UNHEALTHY
        if fail_under is not None and result.coverage is not None:
            if result.coverage.coverage_percent < fail_under:
                console.print(
                    f"[red]Coverage {result.coverage.coverage_percent:.1f}% "
                    f"is below {fail_under:g}%[/red]"
                )
                failed = True
        if failed:
            raise typer.Exit(1)
