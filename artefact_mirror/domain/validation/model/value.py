from pydantic import Field, computed_field

from artefact_mirror.domain.artifact.model import ArtifactKind
from artefact_mirror.domain.shared.model.value import ValueObject


class ValidationIssue(ValueObject):
    """A single violation, located by entry kind, 1-based index and field."""

    entity_kind: ArtifactKind
    index: int
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.entity_kind.label} entry #{self.index} {self.message}"


class ValidationReport(ValueObject):
    """Outcome of validating one configuration document.

    ``errors`` holds every violation found, in entry order.
    """

    kind: ArtifactKind
    errors: tuple[ValidationIssue, ...] = Field(default_factory=tuple)
    entity_count: int = 0
    version_count: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def valid(self) -> bool:
        return not self.errors

    def invalid_indexes(self) -> set[int]:
        """1-based indexes of entries with at least one violation."""
        return {issue.index for issue in self.errors}
