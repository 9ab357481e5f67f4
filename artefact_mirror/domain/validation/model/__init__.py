from artefact_mirror.domain.validation.model.value import ValidationIssue, ValidationReport

__all__ = [
    "ValidationIssue",
    "ValidationReport",
]
