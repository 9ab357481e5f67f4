"""Error hierarchy for artefact-mirror.

Error layers:
- MirrorError: Base class for all artefact-mirror errors
- DomainError: Configuration and business rule violations (fatal to a run)
- InfrastructureError: Tool, container and registry failures (scoped to one job)

Job-level errors never escape the executor; they are converted into
failed JobResults at the job boundary.
"""

from pathlib import Path


class MirrorError(Exception):
    """Base class for all artefact-mirror errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


# =============================================================================
# Domain Errors (configuration problems - halt the run)
# =============================================================================


class DomainError(MirrorError):
    """Base class for domain errors."""


class ConfigError(DomainError):
    """A configuration document could not be loaded."""

    def __init__(self, message: str, path: Path | str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = Path(path)


class ParseError(ConfigError):
    """The document is not well-formed structured data."""


class RootKeyMissing(ConfigError):
    """The document has no top-level `images` / `charts` key."""

    def __init__(self, key: str, path: Path | str) -> None:
        super().__init__(f"must have '{key}' root key", path)
        self.key = key


class ValidationError(DomainError):
    """Input validation failed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


# =============================================================================
# Infrastructure Errors (system-level failures)
# =============================================================================


class InfrastructureError(MirrorError):
    """Base class for infrastructure/system errors."""


class ExternalServiceError(InfrastructureError):
    """External tool (registry client, chart client, scanner) failed."""


class ConfigurationError(InfrastructureError):
    """System misconfiguration detected."""
