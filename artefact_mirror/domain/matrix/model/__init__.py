from artefact_mirror.domain.matrix.model.value import ChartJob, ImageJob, JobSpec, sanitize_key

__all__ = [
    "ChartJob",
    "ImageJob",
    "JobSpec",
    "sanitize_key",
]
