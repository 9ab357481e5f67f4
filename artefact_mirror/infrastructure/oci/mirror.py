"""ImageMirror adapter backed by crane."""

from collections.abc import Sequence

import logfire

from artefact_mirror.domain.mirror.port import ImageMirror
from artefact_mirror.infrastructure.oci.runner import OciToolRunner

DEFAULT_CRANE_IMAGE = "gcr.io/go-containerregistry/crane:latest"


class CraneImageMirror(ImageMirror):
    """Copies a multi-platform image, keeping only the requested platforms.

    Uses ``crane index filter`` so the destination receives a manifest list
    that references the original per-platform manifests by digest.
    """

    def __init__(self, runner: OciToolRunner, image: str = DEFAULT_CRANE_IMAGE):
        self._runner = runner
        self._image = image

    async def mirror(self, source_ref: str, dest_ref: str, platforms: Sequence[str]) -> None:
        cmd = ["index", "filter", source_ref]
        for platform in platforms:
            cmd.append(f"--platform={platform}")
        cmd.extend(["--tag", dest_ref])

        output = await self._runner.run(self._image, cmd)
        logfire.info(
            "Created multi-platform image",
            source=source_ref,
            destination=dest_ref,
            platforms=list(platforms),
            duration=output.duration,
        )
