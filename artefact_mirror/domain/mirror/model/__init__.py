from artefact_mirror.domain.mirror.model.value import (
    Destination,
    JobOutcome,
    JobResult,
    RunOutcome,
    RunStatus,
    RunSummary,
    ScanReport,
    SeverityCounts,
)

__all__ = [
    "Destination",
    "JobOutcome",
    "JobResult",
    "RunOutcome",
    "RunStatus",
    "RunSummary",
    "ScanReport",
    "SeverityCounts",
]
