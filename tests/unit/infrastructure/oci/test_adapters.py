import json
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from artefact_mirror.domain.mirror.model import SeverityCounts
from artefact_mirror.domain.shared.error import ExternalServiceError
from artefact_mirror.infrastructure.oci.helm import HelmChartPublisher
from artefact_mirror.infrastructure.oci.mirror import CraneImageMirror
from artefact_mirror.infrastructure.oci.runner import ToolOutput
from artefact_mirror.infrastructure.oci.trivy import TrivyScanner, count_severities


def _make_runner(docker_config_dir: Path | None = None) -> AsyncMock:
    runner = AsyncMock()
    runner.docker_config_dir = docker_config_dir
    runner.run.return_value = ToolOutput(exit_code=0, logs="", duration=0.1)
    return runner


class TestCraneImageMirror:
    async def test_filters_platforms_into_destination(self):
        runner = _make_runner()
        mirror = CraneImageMirror(runner, image="crane:test")

        await mirror.mirror(
            "docker.io/library/nginx:1.25.0",
            "ghcr.io/scalevector-io/nginx:1.25.0",
            ("linux/amd64", "linux/arm64"),
        )

        runner.run.assert_awaited_once_with(
            "crane:test",
            [
                "index",
                "filter",
                "docker.io/library/nginx:1.25.0",
                "--platform=linux/amd64",
                "--platform=linux/arm64",
                "--tag",
                "ghcr.io/scalevector-io/nginx:1.25.0",
            ],
        )


class TestHelmChartPublisher:
    async def test_passes_arguments_as_environment(self):
        runner = _make_runner()
        publisher = HelmChartPublisher(runner)

        await publisher.fetch_and_push(
            "ingress-nginx",
            "https://kubernetes.github.io/ingress-nginx",
            "ingress-nginx",
            "4.10.0",
            "oci://ghcr.io/scalevector-io/ingress-nginx",
        )

        kwargs = runner.run.await_args.kwargs
        assert kwargs["entrypoint"] == ["/bin/sh", "-c"]
        assert kwargs["env"]["CHART_VERSION"] == "4.10.0"
        assert kwargs["env"]["DESTINATION_URL"] == "oci://ghcr.io/scalevector-io/ingress-nginx"
        script = runner.run.await_args.args[1][0]
        assert 'helm push "$CHART_NAME-$CHART_VERSION.tgz" "$DESTINATION_URL"' in script
        assert "HELM_REGISTRY_CONFIG" not in kwargs["env"]

    async def test_registry_config_follows_mounted_docker_config(self, tmp_path: Path):
        runner = _make_runner(docker_config_dir=tmp_path)
        publisher = HelmChartPublisher(runner)

        await publisher.fetch_and_push(
            "repo", "https://charts.example.com", "app", "1.0.0", "oci://ghcr.io/ns/repo"
        )

        env = runner.run.await_args.kwargs["env"]
        assert env["HELM_REGISTRY_CONFIG"] == "/docker-config/config.json"


class TestCountSeverities:
    def test_counts_across_results(self):
        report = {
            "Results": [
                {"Vulnerabilities": [{"Severity": "CRITICAL"}, {"Severity": "HIGH"}]},
                {"Vulnerabilities": [{"Severity": "MEDIUM"}, {"Severity": "LOW"}]},
                {"Target": "no findings"},
            ]
        }
        assert count_severities(report) == SeverityCounts(critical=1, high=1, medium=1)

    def test_no_results(self):
        assert count_severities({}) == SeverityCounts()
        assert count_severities({"Results": None}) == SeverityCounts()


class TestTrivyScanner:
    def test_command(self, tmp_path: Path):
        scanner = TrivyScanner(_make_runner(), cache_dir=tmp_path)

        cmd = scanner._command("ghcr.io/scalevector-io/nginx:1.25.0")

        assert cmd[0] == "image"
        assert cmd[cmd.index("--severity") + 1] == "CRITICAL,HIGH,MEDIUM"
        assert cmd[cmd.index("--exit-code") + 1] == "0"
        assert cmd[cmd.index("--pkg-types") + 1] == "os,library"
        assert "--ignore-unfixed" in cmd
        assert cmd[cmd.index("--cache-dir") + 1] == "/cache"
        assert cmd[-1] == "ghcr.io/scalevector-io/nginx:1.25.0"

    def test_command_without_ignore_unfixed(self):
        scanner = TrivyScanner(_make_runner(), ignore_unfixed=False)
        cmd = scanner._command("img")
        assert "--ignore-unfixed" not in cmd
        assert "--cache-dir" not in cmd

    async def test_scan_reads_report(self, tmp_path: Path):
        report = {"Results": [{"Vulnerabilities": [{"Severity": "HIGH"}, {"Severity": "HIGH"}]}]}
        runner = _make_runner()

        async def run(image, cmd, *, binds):
            out_dir = Path(binds[0].split(":")[0])
            (out_dir / "trivy-report.json").write_text(json.dumps(report))
            return ToolOutput(exit_code=0, logs="", duration=1.0)

        runner.run.side_effect = run
        scanner = TrivyScanner(runner, work_dir=tmp_path)

        scan = await scanner.scan("ghcr.io/scalevector-io/nginx:1.25.0")

        assert scan.counts == SeverityCounts(high=2)
        assert json.loads(scan.report_blob) == report

    async def test_missing_report_raises(self, tmp_path: Path):
        scanner = TrivyScanner(_make_runner(), work_dir=tmp_path)

        with pytest.raises(ExternalServiceError, match="did not produce a report"):
            await scanner.scan("img")

    async def test_unreadable_report_raises(self, tmp_path: Path):
        runner = _make_runner()

        async def run(image, cmd, *, binds):
            out_dir = Path(binds[0].split(":")[0])
            (out_dir / "trivy-report.json").write_text("not json")
            return ToolOutput(exit_code=0, logs="", duration=1.0)

        runner.run.side_effect = run
        scanner = TrivyScanner(runner, work_dir=tmp_path)

        with pytest.raises(ExternalServiceError, match="Unreadable trivy report"):
            await scanner.scan("img")
