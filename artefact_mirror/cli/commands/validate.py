"""Validate the image and chart documents."""

import sys
from pathlib import Path

import cyclopts

from artefact_mirror.cli.console import get_console
from artefact_mirror.cli.runtime import bootstrap
from artefact_mirror.domain.artifact.model import ArtifactKind
from artefact_mirror.domain.artifact.service import load_document
from artefact_mirror.domain.shared.error import ConfigError
from artefact_mirror.domain.validation.model import ValidationReport
from artefact_mirror.domain.validation.service import validate as validate_document

app = cyclopts.App(name="validate", help="Validate mirroring configuration")


@app.default
def validate(images: Path | None = None, charts: Path | None = None) -> None:
    """Validate both documents and report every violation.

    Args:
        images: Image document. Defaults to configs.images from settings.
        charts: Chart document. Defaults to configs.charts from settings.
    """
    config = bootstrap()
    console = get_console()

    paths = {
        ArtifactKind.IMAGES: images or config.configs.images,
        ArtifactKind.CHARTS: charts or config.configs.charts,
    }

    failed = False
    reports: list[ValidationReport] = []
    for kind, path in paths.items():
        try:
            report = validate_document(load_document(path, kind))
        except ConfigError as e:
            console.error(str(e))
            failed = True
            continue
        console.validation_report(report)
        reports.append(report)
        failed = failed or not report.valid

    if failed:
        console.error("Configuration validation failed")
        sys.exit(1)

    artifacts = sum(r.entity_count for r in reports)
    versions = sum(r.version_count for r in reports)
    console.success(
        f"All configurations are valid: {artifacts} artifact(s), "
        f"{versions} version(s), {versions} mirroring job(s)"
    )
