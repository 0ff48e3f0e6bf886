"""Rich terminal formatter for Suite Insight."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..models import CoverageReport, HealthStatus, IssueSeverity, Report
from .base import BaseFormatter
from .text_formatter import METRIC_LABELS

_STATUS_STYLE = {
    HealthStatus.HEALTHY: "[green]healthy[/green]",
    HealthStatus.DEGRADED: "[yellow]degraded[/yellow]",
    HealthStatus.UNHEALTHY: "[red bold]unhealthy[/red bold]",
}

_SEVERITY_STYLE = {
    IssueSeverity.CRITICAL: "[red bold]critical[/red bold]",
    IssueSeverity.MAJOR: "[red]major[/red]",
    IssueSeverity.MINOR: "[yellow]minor[/yellow]",
    IssueSeverity.INFO: "[dim]info[/dim]",
}


def _percent_label(value: float, target: float) -> str:
    color = "green" if value >= target else "yellow" if value >= target / 2 else "red"
    return f"[{color}]{value:.1f}%[/{color}]"


def _yes_no(ok: bool) -> str:
    return "[green]yes[/green]" if ok else "[red]no[/red]"


class RichFormatter(BaseFormatter):
    """Rich terminal output: summary panel followed by one table per section."""

    def __init__(self, console: Optional[Console] = None, coverage_target: float = 80.0) -> None:
        self.console = console or Console()
        self.coverage_target = coverage_target

    def render(self, report: Report) -> None:
        if report.coverage is not None:
            self.render_coverage(report.coverage)
        self._print_health(report)

    def render_coverage(self, coverage: CoverageReport) -> None:
        self._print_coverage(coverage)

    def format(self, report: Report) -> str:
        with self.console.capture() as capture:
            self.render(report)
        return capture.get()

    def format_coverage(self, coverage: CoverageReport) -> str:
        with self.console.capture() as capture:
            self.render_coverage(coverage)
        return capture.get()

    def _print_coverage(self, coverage: CoverageReport) -> None:
        console = self.console
        covered = len(coverage.requirements) - len(coverage.uncovered_requirements)
        implemented = len(coverage.properties) - len(coverage.unimplemented_properties)
        console.print(
            Panel(
                f"Overall coverage: {_percent_label(coverage.coverage_percent, self.coverage_target)}\n"
                f"Requirements covered: {covered}/{len(coverage.requirements)}\n"
                f"Properties implemented: {implemented}/{len(coverage.properties)}\n"
                f"Test files: {len(coverage.test_files)}",
                title="[bold cyan]E2E Test Coverage[/bold cyan]",
                expand=False,
            )
        )

        if coverage.requirements:
            table = Table(title="Requirements", show_lines=False)
            table.add_column("ID", style="bold")
            table.add_column("Covered")
            table.add_column("Test files", justify="right")
            for req in coverage.requirements:
                table.add_row(req.id or "-", _yes_no(req.covered), str(len(req.evidence)))
            console.print(table)

        if coverage.properties:
            table = Table(title="Properties")
            table.add_column("ID", style="bold")
            table.add_column("Implemented")
            table.add_column("Test file")
            table.add_column("Test function")
            for prop in coverage.properties:
                evidence = prop.evidence
                table.add_row(
                    prop.id or "-",
                    _yes_no(prop.implemented),
                    evidence.source_file if evidence else "",
                    (evidence.test_function or "") if evidence else "",
                )
            console.print(table)

        if coverage.missing_coverage:
            console.print("[bold]Missing coverage:[/bold]")
            for missing in coverage.missing_coverage:
                console.print(f"  [red]-[/red] {escape(missing)}", highlight=False)

        if coverage.recommendations:
            console.print("[bold]Recommendations:[/bold]")
            for rec in coverage.recommendations:
                console.print(f"  - {escape(rec)}", highlight=False)
        console.print()

    def _print_health(self, report: Report) -> None:
        console = self.console
        console.print(
            Panel(
                f"Overall health: {_STATUS_STYLE[report.overall_health]}\n"
                f"Components: {len(report.component_health)}  Issues: {len(report.issues)}\n"
                f"[dim]{report.timestamp.isoformat(timespec='seconds')}[/dim]",
                title="[bold cyan]Test Suite Health[/bold cyan]",
                expand=False,
            )
        )

        table = Table(title="Component health")
        table.add_column("Component", style="bold")
        table.add_column("Status")
        for component in sorted(report.component_health):
            table.add_row(component, _STATUS_STYLE[report.component_health[component]])
        console.print(table)

        metrics = Table(title="Quality metrics")
        metrics.add_column("Metric")
        metrics.add_column("Score", justify="right")
        for field_name, label in METRIC_LABELS:
            value = getattr(report.quality_metrics, field_name) * 100
            metrics.add_row(label, _percent_label(value, 80.0))
        console.print(metrics)

        if report.issues:
            issues = Table(title="Issues", show_lines=True)
            issues.add_column("#", justify="right")
            issues.add_column("Severity")
            issues.add_column("Component")
            issues.add_column("Description")
            issues.add_column("Suggestion", style="dim")
            for i, issue in enumerate(report.issues, start=1):
                issues.add_row(
                    str(i),
                    _SEVERITY_STYLE[issue.severity],
                    issue.component,
                    escape(issue.description),
                    escape(issue.suggestion),
                )
            console.print(issues)

        if report.recommendations:
            console.print("[bold]Recommendations:[/bold]")
            for i, rec in enumerate(report.recommendations, start=1):
                console.print(f"  {i}. {escape(rec)}", highlight=False)
