from dishka import Provider, Scope, provide

from artefact_mirror.config import Config
from artefact_mirror.domain.mirror.port import ReportSink
from artefact_mirror.infrastructure.persistence.report_store import FileReportSink


class PersistenceProvider(Provider):
    @provide(scope=Scope.APP)
    def get_report_sink(self, config: Config) -> ReportSink:
        return FileReportSink(
            base_path=config.reports.dir.expanduser(),
            retention_days=config.reports.retention_days,
        )
