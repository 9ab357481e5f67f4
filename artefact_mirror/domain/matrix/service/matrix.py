"""Matrix expansion - one job per (artifact, version) pair."""

import logging
from collections.abc import Sequence
from typing import Any

from artefact_mirror.domain.artifact.model import DEFAULT_PLATFORMS, ArtifactSpec, ImageSpec
from artefact_mirror.domain.matrix.model import ChartJob, ImageJob, JobSpec

logger = logging.getLogger(__name__)


def expand(specs: Sequence[ArtifactSpec], target_filter: str = "") -> list[JobSpec]:
    """Expand artifact specs into a flat, ordered list of jobs.

    Args:
        specs: Validated image or chart specs, in document order.
        target_filter: Exact, case-sensitive artifact name to keep.
            Empty string keeps every artifact.

    Returns:
        One job per version, in entity order then version order. A filter
        matching nothing yields an empty list.
    """
    jobs: list[JobSpec] = []
    for spec in specs:
        if target_filter and spec.name != target_filter:
            continue
        for version in spec.versions:
            jobs.append(_job_for(spec, version))

    logger.info(
        "Generated matrix with %d entries (filter=%s)",
        len(jobs),
        target_filter or "all artifacts",
    )
    return jobs


def _job_for(spec: ArtifactSpec, version: str) -> JobSpec:
    if isinstance(spec, ImageSpec):
        return ImageJob(
            name=spec.name,
            version=version,
            source_registry=spec.source_registry,
            platforms=spec.platforms if spec.platforms is not None else DEFAULT_PLATFORMS,
        )
    return ChartJob(
        name=spec.name,
        version=version,
        repo_name=spec.repo_name,
        repo_url=spec.repo_url,
    )


def matrix_payload(jobs: Sequence[JobSpec]) -> list[dict[str, Any]]:
    """JSON-compatible matrix entries, without the internal ``kind`` tag."""
    return [job.model_dump(mode="json", exclude={"kind"}) for job in jobs]
