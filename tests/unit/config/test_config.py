from pathlib import Path

import pytest

from artefact_mirror.config import Config
from artefact_mirror.domain.mirror.model import Destination


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


class TestConfig:
    def test_defaults(self):
        config = Config()

        assert config.configs.images == Path("configs/images.yaml")
        assert config.destination.to_destination() == Destination(
            registry="ghcr.io", namespace="scalevector-io"
        )
        assert config.execution.max_concurrency == 4
        assert config.reports.retention_days == 30
        assert config.scan.severities == ["CRITICAL", "HIGH", "MEDIUM"]
        assert config.schedule.images_cron == "0 3 * * 1"

    def test_nested_env_override(self, monkeypatch):
        monkeypatch.setenv("MIRROR_EXECUTION__MAX_CONCURRENCY", "8")
        monkeypatch.setenv("MIRROR_DESTINATION__NAMESPACE", "acme")

        config = Config()

        assert config.execution.max_concurrency == 8
        assert config.destination.namespace == "acme"

    def test_yaml_file(self, tmp_path, monkeypatch):
        config_file = tmp_path / "mirror.yaml"
        config_file.write_text(
            "scan:\n  enabled: false\nreports:\n  retention_days: 7\n"
        )
        monkeypatch.setenv("MIRROR_CONFIG_FILE", str(config_file))

        config = Config()

        assert config.scan.enabled is False
        assert config.reports.retention_days == 7

    def test_env_wins_over_yaml(self, tmp_path, monkeypatch):
        config_file = tmp_path / "mirror.yaml"
        config_file.write_text("reports:\n  retention_days: 7\n")
        monkeypatch.setenv("MIRROR_CONFIG_FILE", str(config_file))
        monkeypatch.setenv("MIRROR_REPORTS__RETENTION_DAYS", "14")

        assert Config().reports.retention_days == 14

    def test_log_file_from_env(self, monkeypatch):
        monkeypatch.setenv("MIRROR_LOG_FILE", "/tmp/mirror.log")
        assert Config().logging.file == "/tmp/mirror.log"
