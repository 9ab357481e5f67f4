import re
from typing import Annotated, Literal

from pydantic import Field

from artefact_mirror.domain.artifact.model import ArtifactKind
from artefact_mirror.domain.shared.model.value import ValueObject

# Characters that are not safe in cache keys, artifact names or file names.
_UNSAFE_KEY_CHARS = re.compile(r'[/:<>|*?"\\\x00-\x1f\x7f]')


def sanitize_key(value: str) -> str:
    """Replace path/ref separators and control characters with '-'."""
    return _UNSAFE_KEY_CHARS.sub("-", value)


class ImageJob(ValueObject):
    """Mirror one version of one image, for a fixed set of platforms."""

    kind: Literal[ArtifactKind.IMAGES] = ArtifactKind.IMAGES
    name: str
    version: str
    source_registry: str
    platforms: tuple[str, ...]

    @property
    def job_id(self) -> str:
        return sanitize_key(f"{self.name}-{self.version}")

    @property
    def display_name(self) -> str:
        return f"{self.name}:{self.version}"

    @property
    def source_ref(self) -> str:
        return f"{self.source_registry}/{self.name}:{self.version}"


class ChartJob(ValueObject):
    """Mirror one version of one Helm chart."""

    kind: Literal[ArtifactKind.CHARTS] = ArtifactKind.CHARTS
    name: str
    version: str
    repo_name: str
    repo_url: str

    @property
    def job_id(self) -> str:
        return sanitize_key(f"{self.name}-{self.version}")

    @property
    def display_name(self) -> str:
        return f"{self.name}:{self.version}"


JobSpec = Annotated[ImageJob | ChartJob, Field(discriminator="kind")]
