from artefact_mirror.domain.mirror.util.di.provider import MirrorProvider

__all__ = ["MirrorProvider"]
