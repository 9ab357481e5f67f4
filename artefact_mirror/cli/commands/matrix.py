"""Print the job matrix for one artifact kind."""

import json
import sys
from pathlib import Path

import cyclopts

from artefact_mirror.cli.console import get_console
from artefact_mirror.cli.runtime import bootstrap
from artefact_mirror.domain.artifact.model import ArtifactKind
from artefact_mirror.domain.artifact.service import load_document, to_specs
from artefact_mirror.domain.matrix.service import expand, matrix_payload
from artefact_mirror.domain.shared.error import ConfigError, ValidationError
from artefact_mirror.domain.validation.service import validate

app = cyclopts.App(name="matrix", help="Print the JSON job matrix")


@app.default
def matrix(
    kind: ArtifactKind,
    /,
    *,
    filter: str = "",
    config: Path | None = None,
    strict: bool = False,
) -> None:
    """Expand a document into its JSON job matrix on stdout.

    Invalid entries are left out of the matrix unless --strict is given,
    in which case any invalid entry fails the command.

    Args:
        kind: images or charts.
        filter: Keep only the artifact with exactly this name.
        config: Document to read. Defaults to the configured path for KIND.
        strict: Exit 1 instead of leaving invalid entries out.
    """
    settings = bootstrap()
    console = get_console()

    default = settings.configs.images if kind is ArtifactKind.IMAGES else settings.configs.charts
    try:
        document = load_document(config or default, kind)
    except ConfigError as e:
        console.error(str(e))
        sys.exit(1)

    report = validate(document)
    try:
        specs = to_specs(document, report, strict=strict)
    except ValidationError as e:
        console.validation_report(report)
        console.error(e.message)
        sys.exit(1)

    jobs = expand(specs, filter)
    console.raw(json.dumps(matrix_payload(jobs)))
