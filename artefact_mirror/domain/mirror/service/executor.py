"""Job executor - runs mirroring jobs with per-job fault isolation."""

import asyncio
import logging
from collections.abc import AsyncIterator, Sequence

import logfire

from artefact_mirror.domain.matrix.model import ChartJob, ImageJob, JobSpec
from artefact_mirror.domain.mirror.model import (
    Destination,
    JobOutcome,
    JobResult,
    SeverityCounts,
)
from artefact_mirror.domain.mirror.port import (
    ChartPublisher,
    ImageMirror,
    ReportSink,
    VulnerabilityScanner,
)
from artefact_mirror.domain.shared.service import Service

logger = logging.getLogger(__name__)


class JobExecutor(Service):
    """Executes jobs against the mirroring, scanning and storage ports.

    ``execute`` never raises for a failing job: every error, including a
    timeout, becomes a failed JobResult so sibling jobs are unaffected.
    """

    image_mirror: ImageMirror
    chart_publisher: ChartPublisher
    destination: Destination
    scanner: VulnerabilityScanner | None = None
    report_sink: ReportSink | None = None
    max_concurrency: int = 4
    job_timeout: float | None = None  # seconds; None disables

    async def execute(self, job: JobSpec) -> JobResult:
        """Run one job to completion and report its result."""
        with logfire.span("Mirror {job}", job=job.display_name, kind=job.kind.value):
            try:
                if self.job_timeout is None:
                    return await self._execute(job)
                return await asyncio.wait_for(self._execute(job), timeout=self.job_timeout)
            except asyncio.TimeoutError as e:
                if self.job_timeout is None:
                    diagnostic = str(e) or "timed out"
                else:
                    diagnostic = f"timed out after {self.job_timeout:g}s"
            except Exception as e:
                diagnostic = str(e) or e.__class__.__name__

        logger.error("Mirror failed for %s: %s", job.display_name, diagnostic)
        return JobResult(job=job, outcome=JobOutcome.FAILURE, diagnostic=diagnostic)

    async def execute_all(self, jobs: Sequence[JobSpec]) -> AsyncIterator[JobResult]:
        """Run jobs concurrently, at most ``max_concurrency`` at a time.

        Yields results in completion order. A failing job never cancels
        its siblings.
        """
        if not jobs:
            return

        semaphore = asyncio.Semaphore(max(1, self.max_concurrency))

        async def bounded(job: JobSpec) -> JobResult:
            async with semaphore:
                return await self.execute(job)

        tasks = [asyncio.create_task(bounded(job), name=f"mirror:{job.job_id}") for job in jobs]
        try:
            for next_done in asyncio.as_completed(tasks):
                yield await next_done
        finally:
            # Consumer stopped early or failed: do not leave jobs running.
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

    async def _execute(self, job: JobSpec) -> JobResult:
        if isinstance(job, ImageJob):
            return await self._mirror_image(job)
        if isinstance(job, ChartJob):
            return await self._mirror_chart(job)
        raise TypeError(f"Unsupported job type: {type(job).__name__}")

    async def _mirror_image(self, job: ImageJob) -> JobResult:
        dest_ref = self.destination.image_ref(job)
        logger.info("Mirroring %s -> %s (%s)", job.source_ref, dest_ref, ", ".join(job.platforms))
        await self.image_mirror.mirror(job.source_ref, dest_ref, job.platforms)

        notes = [f"mirrored to {dest_ref}"]
        counts: SeverityCounts | None = None

        if self.scanner is not None:
            # Scan problems are informational; the mirror itself succeeded.
            try:
                scan = await self.scanner.scan(dest_ref)
            except Exception as e:
                logger.warning("Scan failed for %s: %s", dest_ref, e)
                notes.append(f"scan failed: {e}")
            else:
                counts = scan.counts
                self._warn_on_severity(job, counts)
                if self.report_sink is not None:
                    try:
                        await self.report_sink.store(job.job_id, dest_ref, scan)
                    except Exception as e:
                        logger.warning("Storing scan report failed for %s: %s", job.job_id, e)
                        notes.append(f"report not stored: {e}")

        return JobResult(
            job=job,
            outcome=JobOutcome.SUCCESS,
            diagnostic="; ".join(notes),
            severity_counts=counts,
        )

    async def _mirror_chart(self, job: ChartJob) -> JobResult:
        dest_ref = self.destination.chart_ref(job)
        logger.info("Mirroring Helm chart %s to %s", job.display_name, dest_ref)
        await self.chart_publisher.fetch_and_push(
            job.repo_name, job.repo_url, job.name, job.version, dest_ref
        )
        return JobResult(
            job=job,
            outcome=JobOutcome.SUCCESS,
            diagnostic=f"pushed to {dest_ref}",
        )

    def _warn_on_severity(self, job: ImageJob, counts: SeverityCounts) -> None:
        if counts.critical:
            logfire.warn(
                "{image} contains {count} CRITICAL vulnerabilities",
                image=job.display_name,
                count=counts.critical,
            )
        if counts.high:
            logfire.warn(
                "{image} contains {count} HIGH vulnerabilities",
                image=job.display_name,
                count=counts.high,
            )
