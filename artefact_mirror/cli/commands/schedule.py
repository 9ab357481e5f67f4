"""Run the cron scheduler in the foreground."""

import asyncio

import cyclopts

from artefact_mirror.application.di import create_container
from artefact_mirror.cli.console import get_console
from artefact_mirror.cli.runtime import bootstrap
from artefact_mirror.config import Config
from artefact_mirror.infrastructure.schedule import MirrorScheduler

app = cyclopts.App(name="schedule", help="Run scheduled mirroring in the foreground")


@app.default
def schedule() -> None:
    """Start the scheduler and block until interrupted."""
    config = bootstrap()
    console = get_console()

    console.info(
        f"Images: '{config.schedule.images_cron}', charts: '{config.schedule.charts_cron}' (UTC)"
    )
    try:
        asyncio.run(serve(config))
    except KeyboardInterrupt:
        console.info("Scheduler stopped")


async def serve(config: Config) -> None:
    container = create_container(config)
    try:
        async with MirrorScheduler(container, config.schedule):
            await asyncio.Event().wait()
    finally:
        await container.close()
