import json
from unittest.mock import AsyncMock

import pytest
from dishka import Provider, Scope, make_async_container, provide

from artefact_mirror.cli.commands import run as run_command
from artefact_mirror.cli.main import app
from artefact_mirror.config import Config
from artefact_mirror.domain.mirror.port import ChartPublisher, ImageMirror, VulnerabilityScanner
from artefact_mirror.domain.mirror.util.di import MirrorProvider
from artefact_mirror.domain.shared.error import ExternalServiceError
from artefact_mirror.infrastructure.persistence import PersistenceProvider

IMAGES = """\
images:
  - name: nginx
    source_registry: docker.io/library
    versions: ["1.25.0", "1.27.0"]
"""

INVALID_IMAGES = """\
images:
  - name: nginx
    versions: ["1.25.0"]
"""

CHARTS = """\
charts:
  - name: ingress-nginx
    repo_name: ingress-nginx
    repo_url: https://kubernetes.github.io/ingress-nginx
    versions: ["4.10.0"]
"""


def invoke(*tokens: str) -> int:
    """Run the CLI and return its exit code."""
    try:
        app(list(tokens))
    except SystemExit as e:
        return e.code or 0
    return 0


@pytest.fixture(autouse=True)
def workspace(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "images.yaml").write_text(IMAGES)
    (tmp_path / "configs" / "charts.yaml").write_text(CHARTS)
    monkeypatch.setenv("MIRROR_SCAN__ENABLED", "false")
    return tmp_path


@pytest.fixture
def image_mirror(monkeypatch):
    """Route `mirror run` through fake mirroring ports."""
    mirror = AsyncMock()

    class FakeOciProvider(Provider):
        @provide(scope=Scope.APP)
        def get_image_mirror(self) -> ImageMirror:
            return mirror

        @provide(scope=Scope.APP)
        def get_chart_publisher(self) -> ChartPublisher:
            return AsyncMock()

        @provide(scope=Scope.APP)
        def get_scanner(self) -> VulnerabilityScanner:
            return AsyncMock()

    def create_container(config: Config):
        return make_async_container(
            PersistenceProvider(),
            FakeOciProvider(),
            MirrorProvider(),
            context={Config: config},
        )

    monkeypatch.setattr(run_command, "create_container", create_container)
    return mirror


class TestValidate:
    def test_valid_configuration(self, capsys):
        assert invoke("validate") == 0
        assert "All configurations are valid" in capsys.readouterr().out

    def test_invalid_configuration(self, workspace, capsys):
        (workspace / "configs" / "images.yaml").write_text(INVALID_IMAGES)

        assert invoke("validate") == 1
        assert "missing 'source_registry' field" in capsys.readouterr().err

    def test_missing_document(self, workspace):
        (workspace / "configs" / "charts.yaml").unlink()
        assert invoke("validate") == 1

    def test_explicit_paths(self, workspace):
        other = workspace / "other.yaml"
        other.write_text(IMAGES)
        assert invoke("validate", "--images", str(other)) == 0


class TestMatrix:
    def test_prints_json_matrix(self, capsys):
        assert invoke("matrix", "images") == 0

        payload = json.loads(capsys.readouterr().out)
        assert [entry["version"] for entry in payload] == ["1.25.0", "1.27.0"]
        assert payload[0]["platforms"] == ["linux/amd64", "linux/arm64"]

    def test_filter(self, capsys):
        assert invoke("matrix", "charts", "--filter", "other") == 0
        assert json.loads(capsys.readouterr().out) == []

    def test_invalid_entries_are_skipped(self, workspace, capsys):
        (workspace / "configs" / "images.yaml").write_text(INVALID_IMAGES)

        assert invoke("matrix", "images") == 0
        assert json.loads(capsys.readouterr().out) == []

    def test_strict_rejects_invalid_document(self, workspace, capsys):
        (workspace / "configs" / "images.yaml").write_text(INVALID_IMAGES)

        assert invoke("matrix", "images", "--strict") == 1
        assert "missing 'source_registry' field" in capsys.readouterr().err


class TestRun:
    def test_all_jobs_succeed(self, image_mirror, workspace):
        summary = workspace / "out" / "summary.json"

        assert invoke("run", "images", "--summary-json", str(summary)) == 0
        assert image_mirror.mirror.await_count == 2
        data = json.loads(summary.read_text())
        assert data["status"] == "succeeded"
        assert data["summary"]["total_jobs"] == 2

    def test_failed_job_exits_non_zero(self, image_mirror):
        image_mirror.mirror.side_effect = ExternalServiceError("crane exited with code 1")
        assert invoke("run", "images") == 1

    def test_config_change_with_failure_verdict_is_skipped(self, image_mirror, capsys):
        code = invoke("run", "images", "--source", "config-change", "--verdict", "failure")

        assert code == 0
        image_mirror.mirror.assert_not_awaited()
        assert "Upstream validation failed, skipping images mirroring" in capsys.readouterr().out

    def test_invalid_config_change_is_skipped(self, image_mirror, workspace, capsys):
        (workspace / "configs" / "images.yaml").write_text(INVALID_IMAGES)

        assert invoke("run", "images", "--source", "config-change") == 0
        image_mirror.mirror.assert_not_awaited()
        out = capsys.readouterr().out
        assert "Validation failed, skipping images mirroring" in out
        assert "Upstream" not in out

    def test_verdict_without_config_change_is_rejected(self, image_mirror):
        assert invoke("run", "images", "--verdict", "success") == 1
        image_mirror.mirror.assert_not_awaited()

    def test_unreadable_document_exits_non_zero(self, image_mirror, workspace):
        (workspace / "configs" / "images.yaml").write_text("images: [oops\n")
        assert invoke("run", "images") == 1
