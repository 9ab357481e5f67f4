"""Config loader - reads images/charts documents into ArtifactDocuments.

The loader only checks that a document is structured data with the expected
root key. Field-level checks belong to the validator, so a document with
many broken entries still loads and can be reported on in full.
"""

import logging
from pathlib import Path

import pydantic
import yaml

from artefact_mirror.domain.artifact.model import (
    ArtifactDocument,
    ArtifactKind,
    ArtifactSpec,
    ChartSpec,
    ImageSpec,
)
from artefact_mirror.domain.shared.error import ParseError, RootKeyMissing, ValidationError
from artefact_mirror.domain.validation.model import ValidationReport

logger = logging.getLogger(__name__)


def load_document(path: Path | str, kind: ArtifactKind) -> ArtifactDocument:
    """Parse a configuration document.

    Args:
        path: YAML file to read.
        kind: Which root key (``images`` or ``charts``) to look for.

    Returns:
        ArtifactDocument holding the raw entries in file order.

    Raises:
        ParseError: If the file cannot be read or is not well-formed YAML,
            or if the root key does not hold a list.
        RootKeyMissing: If the root key is absent.
    """
    path = Path(path)
    try:
        text = path.read_text()
    except OSError as e:
        raise ParseError(f"cannot read file: {e.strerror or e}", path) from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ParseError(f"invalid YAML: {e}", path) from e

    if not isinstance(data, dict) or kind.value not in data:
        raise RootKeyMissing(kind.value, path)

    entries = data[kind.value]
    if entries is None:
        entries = []
    if not isinstance(entries, list):
        raise ParseError(f"'{kind.value}' must be a list", path)

    logger.debug("Loaded %d %s entries from %s", len(entries), kind.value, path)
    return ArtifactDocument(kind=kind, path=path, entries=tuple(entries))


def load_images(path: Path | str) -> ArtifactDocument:
    return load_document(path, ArtifactKind.IMAGES)


def load_charts(path: Path | str) -> ArtifactDocument:
    return load_document(path, ArtifactKind.CHARTS)


def to_specs(
    document: ArtifactDocument,
    report: ValidationReport,
    *,
    strict: bool = False,
) -> list[ArtifactSpec]:
    """Convert the entries of a validated document into typed specs.

    Entries the report flags are skipped (and logged), so runs that bypass
    the validation gate still only ever expand well-formed entries.

    Raises:
        ValidationError: If ``strict`` and the report is not valid.
    """
    if strict and not report.valid:
        raise ValidationError(
            f"{document.path} has {len(report.errors)} validation error(s)",
        )

    invalid = report.invalid_indexes()
    model = ImageSpec if document.kind is ArtifactKind.IMAGES else ChartSpec

    specs: list[ArtifactSpec] = []
    for index, entry in enumerate(document.entries, start=1):
        if index in invalid:
            logger.warning(
                "Skipping invalid %s entry #%d in %s",
                document.kind.label.lower(),
                index,
                document.path,
            )
            continue
        try:
            specs.append(model.model_validate(entry))
        except pydantic.ValidationError as e:
            # The validator and the model disagree; treat the entry as invalid.
            logger.warning("Skipping %s entry #%d: %s", document.kind.label.lower(), index, e)
    return specs
