"""Main CLI application using Cyclopts."""

import cyclopts

from artefact_mirror.cli.commands import matrix, run, schedule, validate

app = cyclopts.App(
    name="mirror",
    help="Mirror container images and Helm charts into an OCI registry.",
)

app.command(validate.app, name="validate")
app.command(matrix.app, name="matrix")
app.command(run.app, name="run")
app.command(schedule.app, name="schedule")
