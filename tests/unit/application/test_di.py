from unittest.mock import AsyncMock

import pytest
from dishka import Provider, Scope, make_async_container, provide

from artefact_mirror.config import Config
from artefact_mirror.domain.mirror.port import (
    ChartPublisher,
    ImageMirror,
    ReportSink,
    VulnerabilityScanner,
)
from artefact_mirror.domain.mirror.service import JobExecutor, MirrorOrchestrator
from artefact_mirror.domain.mirror.util.di import MirrorProvider
from artefact_mirror.infrastructure.persistence import PersistenceProvider
from artefact_mirror.infrastructure.persistence.report_store import FileReportSink


class FakeOciProvider(Provider):
    @provide(scope=Scope.APP)
    def get_image_mirror(self) -> ImageMirror:
        return AsyncMock()

    @provide(scope=Scope.APP)
    def get_chart_publisher(self) -> ChartPublisher:
        return AsyncMock()

    @provide(scope=Scope.APP)
    def get_scanner(self) -> VulnerabilityScanner:
        return AsyncMock()


def _container(config: Config):
    return make_async_container(
        PersistenceProvider(),
        FakeOciProvider(),
        MirrorProvider(),
        context={Config: config},
    )


class TestMirrorProvider:
    @pytest.fixture(autouse=True)
    def isolated_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

    async def test_orchestrator_uses_configured_paths_and_limits(self, tmp_path):
        config = Config()
        config.configs.images = tmp_path / "i.yaml"
        config.execution.max_concurrency = 2
        config.reports.dir = tmp_path / "reports"
        container = _container(config)
        try:
            async with container() as request:
                orchestrator = await request.get(MirrorOrchestrator)
                sink = await request.get(ReportSink)
        finally:
            await container.close()

        assert orchestrator.images_path == tmp_path / "i.yaml"
        assert orchestrator.executor.max_concurrency == 2
        assert orchestrator.executor.scanner is not None
        assert isinstance(sink, FileReportSink)
        assert sink.base_path == tmp_path / "reports"

    async def test_scanning_disabled_drops_scanner_and_sink(self):
        config = Config()
        config.scan.enabled = False
        container = _container(config)
        try:
            async with container() as request:
                executor = await request.get(JobExecutor)
        finally:
            await container.close()

        assert executor.scanner is None
        assert executor.report_sink is None
