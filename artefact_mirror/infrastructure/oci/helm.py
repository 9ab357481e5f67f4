"""ChartPublisher adapter backed by the helm CLI."""

import logfire

from artefact_mirror.domain.mirror.port import ChartPublisher
from artefact_mirror.infrastructure.oci.runner import DOCKER_CONFIG_MOUNT, OciToolRunner

DEFAULT_HELM_IMAGE = "alpine/helm:3.12.0"

# Arguments travel as environment variables so no value is ever parsed by the shell.
MIRROR_SCRIPT = """\
set -eu
cd "$(mktemp -d)"
helm repo add "$REPO_NAME" "$REPO_URL"
helm repo update "$REPO_NAME"
helm pull "$REPO_NAME/$CHART_NAME" --version "$CHART_VERSION"
helm push "$CHART_NAME-$CHART_VERSION.tgz" "$DESTINATION_URL"
"""


class HelmChartPublisher(ChartPublisher):
    """Pulls a chart from a classic Helm repository and pushes it to an OCI registry."""

    def __init__(self, runner: OciToolRunner, image: str = DEFAULT_HELM_IMAGE):
        self._runner = runner
        self._image = image

    async def fetch_and_push(
        self,
        repo_name: str,
        repo_url: str,
        chart_name: str,
        version: str,
        dest_ref: str,
    ) -> None:
        env = {
            "REPO_NAME": repo_name,
            "REPO_URL": repo_url,
            "CHART_NAME": chart_name,
            "CHART_VERSION": version,
            "DESTINATION_URL": dest_ref,
        }
        if self._runner.docker_config_dir is not None:
            env["HELM_REGISTRY_CONFIG"] = f"{DOCKER_CONFIG_MOUNT}/config.json"

        output = await self._runner.run(
            self._image,
            [MIRROR_SCRIPT],
            entrypoint=["/bin/sh", "-c"],
            env=env,
        )
        logfire.info(
            "Mirror successful",
            chart=f"{chart_name}:{version}",
            destination=dest_ref,
            duration=output.duration,
        )
