from artefact_mirror.domain.mirror.port.chart_publisher import ChartPublisher
from artefact_mirror.domain.mirror.port.image_mirror import ImageMirror
from artefact_mirror.domain.mirror.port.report_sink import ReportSink
from artefact_mirror.domain.mirror.port.scanner import VulnerabilityScanner

__all__ = [
    "ChartPublisher",
    "ImageMirror",
    "ReportSink",
    "VulnerabilityScanner",
]
