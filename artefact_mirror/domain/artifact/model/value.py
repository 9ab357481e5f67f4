from enum import StrEnum
from pathlib import Path
from typing import Any

from pydantic import Field

from artefact_mirror.domain.shared.model.value import ValueObject

DEFAULT_PLATFORMS: tuple[str, ...] = ("linux/amd64", "linux/arm64")


class ArtifactKind(StrEnum):
    """Kind of artifact a configuration document describes.

    The value doubles as the document's root key.
    """

    IMAGES = "images"
    CHARTS = "charts"

    @property
    def label(self) -> str:
        """Singular, capitalised name used in diagnostics ("Image", "Chart")."""
        return "Image" if self is ArtifactKind.IMAGES else "Chart"


class ImageSpec(ValueObject):
    """A container image to mirror, with every version to copy."""

    name: str  # may contain a namespace segment, e.g. "bitnami/redis"
    versions: tuple[str, ...]
    source_registry: str  # e.g. "docker.io"
    platforms: tuple[str, ...] | None = None  # None -> DEFAULT_PLATFORMS at expansion


class ChartSpec(ValueObject):
    """A Helm chart to mirror from a classic chart repository."""

    name: str
    versions: tuple[str, ...]
    repo_name: str  # namespace token under the destination registry
    repo_url: str


ArtifactSpec = ImageSpec | ChartSpec


class ArtifactDocument(ValueObject):
    """Raw entries of one configuration document, in file order.

    Entries are kept untyped so that validation can report every problem
    in a single pass instead of failing on the first malformed entry.
    """

    kind: ArtifactKind
    path: Path
    entries: tuple[Any, ...] = Field(default_factory=tuple)
