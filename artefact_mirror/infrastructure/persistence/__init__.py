from artefact_mirror.infrastructure.persistence.di import PersistenceProvider

__all__ = ["PersistenceProvider"]
