"""MirrorOrchestrator - one gated mirroring run for one artifact kind."""

import logging
from collections.abc import Callable
from contextlib import aclosing
from pathlib import Path

import logfire

from artefact_mirror.domain.artifact.model import ArtifactKind
from artefact_mirror.domain.artifact.service.loader import load_document, to_specs
from artefact_mirror.domain.matrix.service import expand
from artefact_mirror.domain.mirror.model import JobResult, RunOutcome, RunStatus, RunSummary
from artefact_mirror.domain.mirror.service.aggregate import add_result
from artefact_mirror.domain.mirror.service.executor import JobExecutor
from artefact_mirror.domain.shared.service import Service
from artefact_mirror.domain.trigger import Invocation, InvocationSource, Verdict, should_proceed
from artefact_mirror.domain.validation.service import validate

logger = logging.getLogger(__name__)


class MirrorOrchestrator(Service):
    """Runs load -> validate -> gate -> expand -> execute -> aggregate.

    This is the single entry point used by the CLI and by scheduled runs.
    Configuration errors propagate; job failures never do.
    """

    executor: JobExecutor
    images_path: Path
    charts_path: Path

    def path_for(self, kind: ArtifactKind) -> Path:
        return self.images_path if kind is ArtifactKind.IMAGES else self.charts_path

    async def run(
        self,
        kind: ArtifactKind,
        invocation: Invocation,
        on_result: Callable[[JobResult], None] | None = None,
    ) -> RunOutcome:
        """Execute one mirroring run.

        Args:
            kind: Which document to mirror.
            invocation: Trigger source, upstream verdict and name filter.
            on_result: Called with each job result as it completes.

        Returns:
            RunOutcome with the validation report, jobs, results and summary.

        Raises:
            ConfigError: If the document cannot be loaded. No job runs.
        """
        with logfire.span("MirrorRun {kind}", kind=kind.value, source=invocation.source.value):
            document = load_document(self.path_for(kind), kind)
            report = validate(document)

            verdict = invocation.verdict
            if invocation.source == InvocationSource.CONFIG_CHANGE and verdict is None:
                verdict = Verdict.SUCCESS if report.valid else Verdict.FAILURE

            if not should_proceed(invocation.source, verdict):
                cause = "Upstream validation" if report.valid else "Validation"
                logger.warning("%s failed, skipping %s mirroring", cause, kind.value)
                return RunOutcome(kind=kind, status=RunStatus.SKIPPED, report=report)

            if not report.valid:
                logger.warning(
                    "%s run proceeds despite %d validation error(s); invalid entries are skipped",
                    invocation.source.value,
                    len(report.errors),
                )

            jobs = expand(to_specs(document, report), invocation.target_filter)
            if not jobs:
                logger.warning("No matrix entries generated, nothing to mirror")
                return RunOutcome(kind=kind, status=RunStatus.SUCCEEDED, report=report)

            results: list[JobResult] = []
            summary = RunSummary()
            async with aclosing(self.executor.execute_all(jobs)) as stream:
                async for result in stream:
                    results.append(result)
                    summary = add_result(summary, result)
                    if on_result is not None:
                        on_result(result)

            logger.info(
                "Mirrored %d/%d %s jobs (%d failed)",
                summary.succeeded,
                summary.total_jobs,
                kind.value,
                summary.failed,
            )
            return RunOutcome(
                kind=kind,
                status=summary.status,
                report=report,
                jobs=tuple(jobs),
                results=tuple(results),
                summary=summary,
            )
