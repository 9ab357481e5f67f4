from abc import abstractmethod
from typing import Protocol, runtime_checkable

from artefact_mirror.domain.mirror.model import ScanReport
from artefact_mirror.domain.shared.port import Port


@runtime_checkable
class VulnerabilityScanner(Port, Protocol):
    """Scan an image reference for known vulnerabilities."""

    @abstractmethod
    async def scan(self, image_ref: str) -> ScanReport: ...
