from artefact_mirror.domain.mirror.service.aggregate import add_result, aggregate
from artefact_mirror.domain.mirror.service.executor import JobExecutor
from artefact_mirror.domain.mirror.service.orchestrator import MirrorOrchestrator

__all__ = [
    "JobExecutor",
    "MirrorOrchestrator",
    "add_result",
    "aggregate",
]
