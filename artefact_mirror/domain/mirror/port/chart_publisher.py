from abc import abstractmethod
from typing import Protocol, runtime_checkable

from artefact_mirror.domain.shared.port import Port


@runtime_checkable
class ChartPublisher(Port, Protocol):
    """Fetch a packaged chart from a chart repository and push it to an OCI registry."""

    @abstractmethod
    async def fetch_and_push(
        self,
        repo_name: str,
        repo_url: str,
        chart_name: str,
        version: str,
        dest_ref: str,
    ) -> None:
        """
        Raises:
            ExternalServiceError: If the pull or push fails (including an unknown version)
        """
        ...
