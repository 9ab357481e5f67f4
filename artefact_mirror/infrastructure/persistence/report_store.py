"""Filesystem ReportSink with age-based retention."""

import logging
import os
import shutil
import time
from datetime import UTC, datetime
from pathlib import Path

from artefact_mirror.domain.matrix.model import sanitize_key
from artefact_mirror.domain.mirror.model import ScanReport
from artefact_mirror.domain.mirror.port import ReportSink

logger = logging.getLogger(__name__)

RAW_REPORT_FILE = "trivy-report.json"


def report_name(job_id: str) -> str:
    return sanitize_key(f"vulnerability-report-{job_id}")


def render_vulnerability_report(image_ref: str, report: ScanReport, generated_at: datetime) -> str:
    """Plain-text summary stored next to the raw scanner output."""
    counts = report.counts
    lines = [
        f"# Vulnerability Report for {image_ref}",
        f"Generated: {generated_at.strftime('%a %b %d %H:%M:%S UTC %Y')}",
        f"Mirror URL: {image_ref}",
        "",
        "VULNERABILITY SUMMARY:",
        f"Critical: {counts.critical}",
        f"High: {counts.high}",
        f"Medium: {counts.medium}",
        "",
    ]
    if report.report_blob:
        lines.append(f"See {RAW_REPORT_FILE} for detailed vulnerability information.")
    else:
        lines.append("Trivy scan output not available.")
    return "\n".join(lines) + "\n"


class FileReportSink(ReportSink):
    """Stores each job's reports under ``<base>/vulnerability-report-<job_id>/``.

    Layout:
        vulnerability-report-nginx-1.25.0/
            trivy-report.json
            vulnerability-report-nginx-1.25.0.txt

    Report directories older than ``retention_days`` are pruned whenever a
    new report is stored.
    """

    def __init__(self, base_path: Path | str = "reports", retention_days: int = 30):
        self.base_path = Path(base_path)
        self.retention_days = retention_days

    def path_for(self, job_id: str) -> Path:
        return self.base_path / report_name(job_id)

    async def store(self, job_id: str, image_ref: str, report: ScanReport) -> None:
        target_dir = self.path_for(job_id)
        target_dir.mkdir(parents=True, exist_ok=True)

        if report.report_blob:
            (target_dir / RAW_REPORT_FILE).write_bytes(report.report_blob)
        else:
            (target_dir / RAW_REPORT_FILE).unlink(missing_ok=True)
        summary = render_vulnerability_report(image_ref, report, datetime.now(UTC))
        (target_dir / f"{report_name(job_id)}.txt").write_text(summary)
        # Rewriting existing files leaves the directory mtime untouched.
        os.utime(target_dir)
        logger.info("Stored vulnerability report for %s in %s", job_id, target_dir)

        self.prune()

    def prune(self, now: float | None = None) -> list[Path]:
        """Delete report directories past retention. Returns what was removed."""
        if self.retention_days <= 0 or not self.base_path.exists():
            return []

        cutoff = (now if now is not None else time.time()) - self.retention_days * 86400
        removed: list[Path] = []
        for entry in self.base_path.iterdir():
            if entry.is_dir() and entry.stat().st_mtime < cutoff:
                shutil.rmtree(entry)
                removed.append(entry)
        if removed:
            logger.info("Pruned %d expired report(s) from %s", len(removed), self.base_path)
        return removed
