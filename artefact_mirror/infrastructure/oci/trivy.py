"""VulnerabilityScanner adapter backed by trivy."""

import json
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import logfire

from artefact_mirror.domain.mirror.model import ScanReport, SeverityCounts
from artefact_mirror.domain.mirror.port import VulnerabilityScanner
from artefact_mirror.domain.shared.error import ExternalServiceError
from artefact_mirror.infrastructure.oci.runner import OciToolRunner

DEFAULT_TRIVY_IMAGE = "aquasec/trivy:latest"
DEFAULT_SEVERITIES = ("CRITICAL", "HIGH", "MEDIUM")

REPORT_FILE = "trivy-report.json"


def count_severities(report: dict[str, Any]) -> SeverityCounts:
    """Count CRITICAL/HIGH/MEDIUM findings across all results of a trivy JSON report."""
    counts = {"CRITICAL": 0, "HIGH": 0, "MEDIUM": 0}
    for result in report.get("Results") or []:
        for vulnerability in result.get("Vulnerabilities") or []:
            severity = vulnerability.get("Severity")
            if severity in counts:
                counts[severity] += 1
    return SeverityCounts(
        critical=counts["CRITICAL"],
        high=counts["HIGH"],
        medium=counts["MEDIUM"],
    )


class TrivyScanner(VulnerabilityScanner):
    """Scans a pushed image with trivy and returns counts plus the raw JSON report.

    Findings never fail the scan (``--exit-code 0``); only a tool failure does.
    """

    def __init__(
        self,
        runner: OciToolRunner,
        image: str = DEFAULT_TRIVY_IMAGE,
        *,
        severities: Sequence[str] = DEFAULT_SEVERITIES,
        ignore_unfixed: bool = True,
        cache_dir: Path | None = None,
        work_dir: Path | None = None,
    ):
        self._runner = runner
        self._image = image
        self._severities = tuple(severities)
        self._ignore_unfixed = ignore_unfixed
        self._cache_dir = cache_dir
        self._work_dir = work_dir

    def _command(self, image_ref: str) -> list[str]:
        cmd = [
            "image",
            "--format", "json",
            "--output", f"/out/{REPORT_FILE}",
            "--exit-code", "0",
            "--severity", ",".join(self._severities),
            "--pkg-types", "os,library",
        ]  # fmt: skip
        if self._ignore_unfixed:
            cmd.append("--ignore-unfixed")
        if self._cache_dir is not None:
            cmd.extend(["--cache-dir", "/cache"])
        cmd.append(image_ref)
        return cmd

    async def scan(self, image_ref: str) -> ScanReport:
        if self._work_dir is not None:
            self._work_dir.mkdir(parents=True, exist_ok=True)

        with tempfile.TemporaryDirectory(prefix="trivy-", dir=self._work_dir) as tmpdir:
            out_dir = Path(tmpdir)
            binds = [f"{out_dir}:/out:rw"]
            if self._cache_dir is not None:
                self._cache_dir.mkdir(parents=True, exist_ok=True)
                binds.append(f"{self._cache_dir}:/cache:rw")

            await self._runner.run(self._image, self._command(image_ref), binds=binds)

            report_path = out_dir / REPORT_FILE
            if not report_path.exists():
                raise ExternalServiceError("trivy did not produce a report")
            blob = report_path.read_bytes()

        try:
            counts = count_severities(json.loads(blob))
        except (json.JSONDecodeError, AttributeError) as e:
            raise ExternalServiceError(f"Unreadable trivy report: {e}") from e

        logfire.info(
            "Security scan completed",
            image=image_ref,
            critical=counts.critical,
            high=counts.high,
            medium=counts.medium,
        )
        return ScanReport(counts=counts, report_blob=blob)
