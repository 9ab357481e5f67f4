"""Console output for the CLI.

Provides a Console class that wraps rich for consistent, polished output.
All CLI output should go through this module.
"""

from typing import TYPE_CHECKING

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.panel import Panel

if TYPE_CHECKING:
    from artefact_mirror.domain.mirror.model import JobResult, RunOutcome
    from artefact_mirror.domain.validation.model import ValidationReport


class Console:
    """CLI output manager wrapping rich.

    Human-readable output goes to stdout, errors to stderr. Machine-readable
    output (the JSON matrix) is written with ``raw`` so rich never restyles it.
    """

    def __init__(
        self,
        *,
        force_terminal: bool | None = None,
        quiet: bool = False,
    ) -> None:
        self._console = RichConsole(force_terminal=force_terminal, stderr=False)
        self._err_console = RichConsole(force_terminal=force_terminal, stderr=True)
        self._quiet = quiet

    # -------------------------------------------------------------------------
    # Status messages
    # -------------------------------------------------------------------------

    def success(self, message: str) -> None:
        self._console.print(f"[green]✓[/green] {message}")

    def error(self, message: str, *, hint: str | None = None) -> None:
        """Print an error message to stderr."""
        self._err_console.print(f"[red]✗[/red] {message}")
        if hint:
            self._err_console.print(f"  [dim]{hint}[/dim]")

    def warning(self, message: str) -> None:
        self._console.print(f"[yellow]⚠[/yellow] {message}")

    def info(self, message: str) -> None:
        """Print an info message (suppressed in quiet mode)."""
        if not self._quiet:
            self._console.print(f"[dim]{message}[/dim]")

    # -------------------------------------------------------------------------
    # Structured output
    # -------------------------------------------------------------------------

    def raw(self, text: str) -> None:
        """Print text verbatim, without markup or highlighting."""
        self._console.print(text, markup=False, highlight=False, soft_wrap=True)

    def panel(
        self,
        content: str,
        *,
        title: str | None = None,
        border_style: str = "dim",
    ) -> None:
        self._console.print(Panel(content, title=title, border_style=border_style))

    # -------------------------------------------------------------------------
    # Mirroring output
    # -------------------------------------------------------------------------

    def validation_report(self, report: "ValidationReport") -> None:
        """Print totals for a valid report, otherwise every violation."""
        label = report.kind.label.lower()
        if report.valid:
            self.success(
                f"{report.kind.value}: {report.entity_count} {label}(s), "
                f"{report.version_count} version(s)"
            )
            return

        self.error(f"{report.kind.value}: {len(report.errors)} validation error(s)")
        for issue in report.errors:
            self._err_console.print(f"  [red]-[/red] {escape(str(issue))}", highlight=False)

    def job_result(self, result: "JobResult") -> None:
        """One line per completed job, printed as results arrive."""
        name = result.job.display_name
        if result.succeeded:
            counts = result.severity_counts
            suffix = ""
            if counts is not None:
                suffix = f" [dim](C:{counts.critical} H:{counts.high} M:{counts.medium})[/dim]"
            self.success(f"{name}{suffix}")
        else:
            self.error(f"{name}: {result.diagnostic}")

    def run_summary(self, outcome: "RunOutcome") -> None:
        summary = outcome.summary
        totals = summary.severity_totals
        lines = [
            f"Status:    {outcome.status.value}",
            f"Jobs:      {summary.total_jobs}",
            f"Succeeded: {summary.succeeded}",
            f"Failed:    {summary.failed}",
            f"Vulnerabilities: critical={totals.critical} high={totals.high} medium={totals.medium}",
        ]
        border = "red" if summary.failed else "green"
        self.panel("\n".join(lines), title=f"{outcome.kind.value} mirror run", border_style=border)


# Module-level default instance for convenience
_default: Console | None = None


def get_console() -> Console:
    """Get the default console instance."""
    global _default
    if _default is None:
        _default = Console()
    return _default
