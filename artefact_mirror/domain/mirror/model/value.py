from enum import StrEnum

from pydantic import Field

from artefact_mirror.domain.artifact.model import ArtifactKind
from artefact_mirror.domain.matrix.model import ChartJob, ImageJob, JobSpec
from artefact_mirror.domain.shared.model.value import ValueObject
from artefact_mirror.domain.validation.model import ValidationReport


class JobOutcome(StrEnum):
    SUCCESS = "success"
    FAILURE = "failure"


class RunStatus(StrEnum):
    SKIPPED = "skipped"  # trigger gate said no; a successful no-op
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def exit_code(self) -> int:
        return 1 if self is RunStatus.FAILED else 0


class Destination(ValueObject):
    """Registry namespace that mirrored artifacts are pushed under."""

    registry: str = "ghcr.io"
    namespace: str = "scalevector-io"

    def image_ref(self, job: ImageJob) -> str:
        return f"{self.registry}/{self.namespace}/{job.name}:{job.version}"

    def chart_ref(self, job: ChartJob) -> str:
        # Charts are grouped under their source repository name.
        return f"oci://{self.registry}/{self.namespace}/{job.repo_name}"


class SeverityCounts(ValueObject):
    """Vulnerability counts by severity. Informational only."""

    critical: int = 0
    high: int = 0
    medium: int = 0

    def __add__(self, other: "SeverityCounts") -> "SeverityCounts":
        return SeverityCounts(
            critical=self.critical + other.critical,
            high=self.high + other.high,
            medium=self.medium + other.medium,
        )

    @property
    def total(self) -> int:
        return self.critical + self.high + self.medium


class ScanReport(ValueObject):
    """What a vulnerability scan of one image produced."""

    counts: SeverityCounts
    report_blob: bytes = b""  # raw scanner output, handed to the report sink


class JobResult(ValueObject):
    """Result of executing one job."""

    job: JobSpec
    outcome: JobOutcome
    diagnostic: str = ""
    severity_counts: SeverityCounts | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is JobOutcome.SUCCESS


class RunSummary(ValueObject):
    """Totals over every job of a run."""

    total_jobs: int = 0
    succeeded: int = 0
    failed: int = 0
    severity_totals: SeverityCounts = Field(default_factory=SeverityCounts)

    @property
    def status(self) -> RunStatus:
        return RunStatus.FAILED if self.failed else RunStatus.SUCCEEDED


class RunOutcome(ValueObject):
    """Everything one orchestrated run produced, for reporting."""

    kind: ArtifactKind
    status: RunStatus
    report: ValidationReport
    jobs: tuple[JobSpec, ...] = ()
    results: tuple[JobResult, ...] = ()
    summary: RunSummary = Field(default_factory=RunSummary)
