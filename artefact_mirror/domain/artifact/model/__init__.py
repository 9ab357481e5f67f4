from artefact_mirror.domain.artifact.model.value import (
    DEFAULT_PLATFORMS,
    ArtifactDocument,
    ArtifactKind,
    ArtifactSpec,
    ChartSpec,
    ImageSpec,
)

__all__ = [
    "DEFAULT_PLATFORMS",
    "ArtifactDocument",
    "ArtifactKind",
    "ArtifactSpec",
    "ChartSpec",
    "ImageSpec",
]
