from abc import abstractmethod
from typing import Protocol, runtime_checkable

from artefact_mirror.domain.mirror.model import ScanReport
from artefact_mirror.domain.shared.port import Port


@runtime_checkable
class ReportSink(Port, Protocol):
    """Store scan reports. Retention is the sink's concern."""

    @abstractmethod
    async def store(self, job_id: str, image_ref: str, report: ScanReport) -> None: ...
