"""Coverage CLI command -- requirement and property coverage of the test tree."""

from typing import Optional

import typer

from ..engine import SuiteAnalyzer
from . import app
from ._common import FORMAT_CHOICE, console, handle_errors, init_logging, make_formatter, resolve_config


@app.command()
def coverage(
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
    output_format: str = typer.Option(
        "rich", "--format", "-f", help="Output format: rich | text | json", click_type=FORMAT_CHOICE
    ),
    fail_under: Optional[float] = typer.Option(
        None, "--fail-under", help="Exit 1 if overall coverage is below this percent", min=0, max=100
    ),
):
    """
    Report which requirements and correctness properties the tests exercise.

    [bold cyan]Examples:[/bold cyan]

      suite-insight coverage

      suite-insight coverage -r docs/requirements.md -d docs/design.md --fail-under 80
    """
    init_logging(ctx)
    with handle_errors(ctx):
        config = resolve_config(
            ctx, requirements_file=requirements, design_file=design, test_dir=test_dir
        )
        report = SuiteAnalyzer(config).analyze_coverage()
        make_formatter(output_format, config).render_coverage(report)

        if fail_under is not None and report.coverage_percent < fail_under:
            console.print(
                f"[red]Coverage {report.coverage_percent:.1f}% is below {fail_under:g}%[/red]"
            )
            raise typer.Exit(1)
