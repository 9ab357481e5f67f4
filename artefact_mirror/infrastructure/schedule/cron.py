"""Cron-driven mirroring runs.

Scheduled runs bypass the validation gate: they always proceed, skipping
invalid entries, so a broken edit never silently stops weekly refreshes.
"""

import asyncio
import logging
from contextlib import AsyncExitStack

from apscheduler import AsyncScheduler
from apscheduler.triggers.cron import CronTrigger
from dishka import AsyncContainer

from artefact_mirror.config import ScheduleConfig
from artefact_mirror.domain.artifact.model import ArtifactKind
from artefact_mirror.domain.mirror.model import RunOutcome
from artefact_mirror.domain.mirror.service import MirrorOrchestrator
from artefact_mirror.domain.trigger import Invocation, InvocationSource

logger = logging.getLogger(__name__)


class MirrorScheduler:
    """Runs one mirroring run per artifact kind on its cron expression."""

    def __init__(self, container: AsyncContainer, schedule: ScheduleConfig) -> None:
        self._container = container
        self._schedule = schedule
        self._scheduler: AsyncScheduler | None = None
        self._exit_stack: AsyncExitStack | None = None
        self._failures: dict[ArtifactKind, int] = {}

    def crons(self) -> dict[ArtifactKind, str]:
        return {
            ArtifactKind.IMAGES: self._schedule.images_cron,
            ArtifactKind.CHARTS: self._schedule.charts_cron,
        }

    async def start(self) -> None:
        self._exit_stack = AsyncExitStack()
        await self._exit_stack.__aenter__()

        self._scheduler = AsyncScheduler()
        await self._exit_stack.enter_async_context(self._scheduler)

        for kind, cron in self.crons().items():
            await self._scheduler.add_schedule(
                self.run_once,
                CronTrigger.from_crontab(cron, timezone="UTC"),
                id=f"mirror-{kind.value}",
                kwargs={"kind": kind},
            )
            logger.info("Scheduled %s mirroring (cron=%s)", kind.value, cron)

        await self._scheduler.start_in_background()

    async def stop(self) -> None:
        if self._exit_stack is not None:
            await self._exit_stack.aclose()
            self._exit_stack = None
        self._scheduler = None

    async def run_once(self, kind: ArtifactKind) -> RunOutcome | None:
        """Run one scheduled mirroring run. Errors are logged, never raised."""
        try:
            async with self._container() as request:
                orchestrator = await request.get(MirrorOrchestrator)
                outcome = await orchestrator.run(
                    kind, Invocation(source=InvocationSource.SCHEDULED)
                )
        except (asyncio.CancelledError, SystemExit, KeyboardInterrupt):
            raise
        except Exception as e:
            failures = self._failures.get(kind, 0) + 1
            self._failures[kind] = failures
            logger.error("Scheduled %s run failed (failures: %d): %s", kind.value, failures, e)
            if failures >= 5:
                logger.critical("Scheduled %s run has failed %d consecutive times", kind.value, failures)
            return None

        self._failures.pop(kind, None)
        logger.info("Scheduled %s run finished: %s", kind.value, outcome.status.value)
        return outcome

    async def __aenter__(self) -> "MirrorScheduler":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        await self.stop()
