from typing import AsyncIterable

import aiodocker
from dishka import Provider, Scope, provide

from artefact_mirror.config import Config
from artefact_mirror.domain.mirror.port import ChartPublisher, ImageMirror, VulnerabilityScanner
from artefact_mirror.domain.shared.error import ConfigurationError
from artefact_mirror.infrastructure.oci.helm import HelmChartPublisher
from artefact_mirror.infrastructure.oci.mirror import CraneImageMirror
from artefact_mirror.infrastructure.oci.runner import OciToolRunner
from artefact_mirror.infrastructure.oci.trivy import TrivyScanner


class OciProvider(Provider):
    @provide(scope=Scope.APP)
    async def get_docker(self) -> AsyncIterable[aiodocker.Docker]:
        docker = aiodocker.Docker()
        yield docker
        await docker.close()

    @provide(scope=Scope.APP)
    def get_runner(self, docker: aiodocker.Docker, config: Config) -> OciToolRunner:
        tools = config.tools
        try:
            return OciToolRunner(
                docker,
                memory=tools.memory,
                cpu=tools.cpu,
                docker_config_dir=tools.docker_config_dir.expanduser() if tools.docker_config_dir else None,
            )
        except ValueError as e:
            raise ConfigurationError(f"tools: {e}") from e

    @provide(scope=Scope.APP)
    def get_image_mirror(self, runner: OciToolRunner, config: Config) -> ImageMirror:
        return CraneImageMirror(runner, image=config.tools.crane_image)

    @provide(scope=Scope.APP)
    def get_chart_publisher(self, runner: OciToolRunner, config: Config) -> ChartPublisher:
        return HelmChartPublisher(runner, image=config.tools.helm_image)

    @provide(scope=Scope.APP)
    def get_scanner(self, runner: OciToolRunner, config: Config) -> VulnerabilityScanner:
        scan = config.scan
        return TrivyScanner(
            runner,
            image=scan.image,
            severities=scan.severities,
            ignore_unfixed=scan.ignore_unfixed,
            cache_dir=scan.cache_dir.expanduser() if scan.cache_dir else None,
        )
