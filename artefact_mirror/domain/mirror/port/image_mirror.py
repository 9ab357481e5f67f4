from abc import abstractmethod
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from artefact_mirror.domain.shared.port import Port


@runtime_checkable
class ImageMirror(Port, Protocol):
    """Copy a (multi-platform) image from a source to a destination registry."""

    @abstractmethod
    async def mirror(self, source_ref: str, dest_ref: str, platforms: Sequence[str]) -> None:
        """
        Mirror an image.

        Args:
            source_ref: Fully qualified source reference (e.g., docker.io/nginx:1.25.0)
            dest_ref: Fully qualified destination reference
            platforms: Platforms to keep in the destination manifest list

        Raises:
            ExternalServiceError: If the copy fails for any reason
        """
        ...
