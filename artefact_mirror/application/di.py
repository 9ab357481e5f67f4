from dishka import AsyncContainer, make_async_container

from artefact_mirror.config import Config
from artefact_mirror.domain.mirror.util.di import MirrorProvider
from artefact_mirror.infrastructure.oci import OciProvider
from artefact_mirror.infrastructure.persistence import PersistenceProvider


def create_container(config: Config | None = None) -> AsyncContainer:
    config = config or Config()

    return make_async_container(
        PersistenceProvider(),
        OciProvider(),
        MirrorProvider(),
        context={Config: config},
    )
