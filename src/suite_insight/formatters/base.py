"""Base formatter interface for Suite Insight output rendering."""

from abc import ABC, abstractmethod

from ..models import CoverageReport, Report


class BaseFormatter(ABC):
    """Abstract base class for output formatters.

    A formatter renders either a full :class:`Report` or, for the
    coverage-only command, a bare :class:`CoverageReport`.
    """

    @abstractmethod
    def format(self, report: Report) -> str:
        """Return formatted string representation of the report."""

    @abstractmethod
    def format_coverage(self, coverage: CoverageReport) -> str:
        """Return formatted string representation of a coverage report."""

    def render(self, report: Report) -> None:
        print(self.format(report), end="")

    def render_coverage(self, coverage: CoverageReport) -> None:
        print(self.format_coverage(coverage), end="")
