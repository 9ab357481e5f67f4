"""Run one mirroring run for one artifact kind."""

import asyncio
import sys
from pathlib import Path

import cyclopts

from artefact_mirror.application.di import create_container
from artefact_mirror.cli.console import Console, get_console
from artefact_mirror.cli.runtime import bootstrap
from artefact_mirror.config import Config
from artefact_mirror.domain.artifact.model import ArtifactKind
from artefact_mirror.domain.mirror.model import RunOutcome, RunStatus
from artefact_mirror.domain.mirror.service import MirrorOrchestrator
from artefact_mirror.domain.shared.error import ConfigError, ConfigurationError, ValidationError
from artefact_mirror.domain.trigger import Invocation, InvocationSource, Verdict

app = cyclopts.App(name="run", help="Mirror every job of one artifact kind")


@app.default
def run(
    kind: ArtifactKind,
    /,
    *,
    source: InvocationSource = InvocationSource.MANUAL,
    verdict: Verdict | None = None,
    filter: str = "",
    max_concurrency: int | None = None,
    job_timeout: float | None = None,
    summary_json: Path | None = None,
) -> None:
    """Load, validate, gate, expand and execute one run.

    Exits 0 when the run is skipped or every job succeeds, 1 otherwise.

    Args:
        kind: images or charts.
        source: What triggered the run: config-change, scheduled or manual.
        verdict: Upstream validation result (config-change only).
        filter: Mirror only the artifact with exactly this name.
        max_concurrency: Override execution.max_concurrency.
        job_timeout: Override execution.job_timeout_seconds.
        summary_json: Also write the run outcome as JSON to this file.
    """
    config = bootstrap()
    console = get_console()

    if max_concurrency is not None:
        config.execution.max_concurrency = max_concurrency
    if job_timeout is not None:
        config.execution.job_timeout_seconds = job_timeout

    try:
        invocation = Invocation(source=source, verdict=verdict, target_filter=filter)
    except ValidationError as e:
        console.error(e.message, hint="--verdict only applies to --source config-change")
        sys.exit(1)

    try:
        outcome = asyncio.run(execute_run(config, kind, invocation, console))
    except (ConfigError, ConfigurationError) as e:
        console.error(str(e))
        sys.exit(1)

    if not outcome.report.valid:
        console.validation_report(outcome.report)
    if outcome.status is RunStatus.SKIPPED:
        # A valid local report means the failure verdict came from upstream.
        cause = "Upstream validation" if outcome.report.valid else "Validation"
        console.warning(f"{cause} failed, skipping {kind.value} mirroring")
    else:
        console.run_summary(outcome)

    if summary_json is not None:
        summary_json.parent.mkdir(parents=True, exist_ok=True)
        summary_json.write_text(outcome.model_dump_json(indent=2))

    sys.exit(outcome.status.exit_code)


async def execute_run(
    config: Config,
    kind: ArtifactKind,
    invocation: Invocation,
    console: Console,
) -> RunOutcome:
    container = create_container(config)
    try:
        async with container() as request:
            orchestrator = await request.get(MirrorOrchestrator)
            return await orchestrator.run(kind, invocation, on_result=console.job_result)
    finally:
        await container.close()
