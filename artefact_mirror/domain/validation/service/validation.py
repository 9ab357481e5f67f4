"""Schema validation for configuration documents.

Every entry is checked and every violation recorded; nothing stops at the
first problem, so one run reports everything that needs fixing.
"""

import logging
import re
from collections.abc import Iterator
from typing import Any

from artefact_mirror.domain.artifact.model import ArtifactDocument, ArtifactKind
from artefact_mirror.domain.validation.model import ValidationIssue, ValidationReport

logger = logging.getLogger(__name__)

REPO_URL_PATTERN = re.compile(r"^https?://")

REQUIRED_FIELDS: dict[ArtifactKind, tuple[str, ...]] = {
    ArtifactKind.IMAGES: ("name", "versions", "source_registry"),
    ArtifactKind.CHARTS: ("name", "versions", "repo_name", "repo_url"),
}


def validate(document: ArtifactDocument) -> ValidationReport:
    """Validate every entry of a document.

    Returns:
        ValidationReport listing all violations across all entries.
    """
    kind = document.kind
    errors: list[ValidationIssue] = []
    version_count = 0

    for index, entry in enumerate(document.entries, start=1):
        for field, message in _check_entry(kind, entry):
            errors.append(
                ValidationIssue(entity_kind=kind, index=index, field=field, message=message)
            )
        if isinstance(entry, dict) and isinstance(entry.get("versions"), list):
            version_count += len(entry["versions"])

    report = ValidationReport(
        kind=kind,
        errors=tuple(errors),
        entity_count=len(document.entries),
        version_count=version_count,
    )
    if report.valid:
        logger.info(
            "%s schema is valid (%d %s, %d versions)",
            document.path,
            report.entity_count,
            kind.value,
            report.version_count,
        )
    else:
        logger.info("%s has %d validation error(s)", document.path, len(report.errors))
    return report


def _check_entry(kind: ArtifactKind, entry: Any) -> Iterator[tuple[str, str]]:
    """Yield (field, message) for each violation in one entry."""
    if not isinstance(entry, dict):
        yield "<entry>", "must be a mapping"
        return

    for field in REQUIRED_FIELDS[kind]:
        if entry.get(field) is None:
            yield field, f"missing '{field}' field"
        elif field != "versions" and not _is_non_empty_str(entry[field]):
            yield field, f"'{field}' field must be a non-empty string"

    versions = entry.get("versions")
    if versions is not None:
        yield from _check_string_list("versions", versions)

    if kind is ArtifactKind.IMAGES and "platforms" in entry:
        yield from _check_string_list("platforms", entry["platforms"])

    if kind is ArtifactKind.CHARTS:
        repo_url = entry.get("repo_url")
        if _is_non_empty_str(repo_url) and not REPO_URL_PATTERN.match(repo_url):
            yield "repo_url", "'repo_url' must be a valid HTTP/HTTPS URL"


def _check_string_list(field: str, value: Any) -> Iterator[tuple[str, str]]:
    if not isinstance(value, list):
        yield field, f"'{field}' field must be a list"
        return
    if not value:
        yield field, f"'{field}' field must not be empty"
    for i, item in enumerate(value):
        if not _is_non_empty_str(item):
            hint = " (quote numeric values)" if isinstance(item, (int, float)) else ""
            yield f"{field}[{i}]", f"'{field}[{i}]' must be a non-empty string{hint}"


def _is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())
