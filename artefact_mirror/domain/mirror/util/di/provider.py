from dishka import Provider, Scope, from_context, provide

from artefact_mirror.config import Config
from artefact_mirror.domain.mirror.model import Destination
from artefact_mirror.domain.mirror.port import (
    ChartPublisher,
    ImageMirror,
    ReportSink,
    VulnerabilityScanner,
)
from artefact_mirror.domain.mirror.service import JobExecutor, MirrorOrchestrator


class MirrorProvider(Provider):
    config = from_context(provides=Config, scope=Scope.APP)

    @provide(scope=Scope.APP)
    def get_destination(self, config: Config) -> Destination:
        return config.destination.to_destination()

    @provide(scope=Scope.REQUEST)
    def get_job_executor(
        self,
        config: Config,
        destination: Destination,
        image_mirror: ImageMirror,
        chart_publisher: ChartPublisher,
        scanner: VulnerabilityScanner,
        report_sink: ReportSink,
    ) -> JobExecutor:
        scanning = config.scan.enabled
        return JobExecutor(
            image_mirror=image_mirror,
            chart_publisher=chart_publisher,
            destination=destination,
            scanner=scanner if scanning else None,
            report_sink=report_sink if scanning else None,
            max_concurrency=config.execution.max_concurrency,
            job_timeout=config.execution.job_timeout_seconds,
        )

    @provide(scope=Scope.REQUEST)
    def get_orchestrator(self, config: Config, executor: JobExecutor) -> MirrorOrchestrator:
        return MirrorOrchestrator(
            executor=executor,
            images_path=config.configs.images,
            charts_path=config.configs.charts,
        )
