from artefact_mirror.domain.artifact.service.loader import (
    load_charts,
    load_document,
    load_images,
    to_specs,
)

__all__ = [
    "load_charts",
    "load_document",
    "load_images",
    "to_specs",
]
