from artefact_mirror.domain.validation.service.validation import validate

__all__ = ["validate"]
