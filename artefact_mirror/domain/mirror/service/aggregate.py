"""Result aggregation - folds job results into a run summary."""

from collections.abc import Iterable

from artefact_mirror.domain.mirror.model import JobResult, RunSummary


def aggregate(results: Iterable[JobResult]) -> RunSummary:
    """Summarise job results.

    Order does not matter, so results can be folded in as they arrive.
    """
    summary = RunSummary()
    for result in results:
        summary = add_result(summary, result)
    return summary


def add_result(summary: RunSummary, result: JobResult) -> RunSummary:
    """Return ``summary`` with one more result folded in."""
    severity_totals = summary.severity_totals
    if result.severity_counts is not None:
        severity_totals = severity_totals + result.severity_counts
    return RunSummary(
        total_jobs=summary.total_jobs + 1,
        succeeded=summary.succeeded + (1 if result.succeeded else 0),
        failed=summary.failed + (0 if result.succeeded else 1),
        severity_totals=severity_totals,
    )
