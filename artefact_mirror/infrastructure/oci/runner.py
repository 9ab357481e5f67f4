"""Run command-line tools (crane, helm, trivy) in OCI containers via aiodocker."""

import asyncio
import re
import time
from dataclasses import dataclass
from pathlib import Path

import aiodocker
import logfire
from pydantic import BaseModel

from artefact_mirror.domain.shared.error import ExternalServiceError

DOCKER_CONFIG_MOUNT = "/docker-config"


class HostConfig(BaseModel):
    """Docker host configuration for tool containers."""

    Binds: list[str]
    Memory: int
    MemorySwap: int
    NanoCpus: int
    # Tools talk to registries, so networking stays enabled.
    CapDrop: list[str] = ["ALL"]
    SecurityOpt: list[str] = ["no-new-privileges"]
    PidsLimit: int = 256


class ContainerConfig(BaseModel):
    """Docker container configuration for a single tool invocation."""

    Image: str
    Cmd: list[str]
    Env: list[str]
    HostConfig: HostConfig
    Entrypoint: list[str] | None = None


@dataclass(frozen=True)
class ToolOutput:
    """Output of a tool container that exited cleanly."""

    exit_code: int
    logs: str
    duration: float


class OciToolRunner:
    """Executes a tool image as a short-lived container.

    Each call pulls the image if it is not present locally, runs the
    container to completion, collects its logs and removes it. Registry
    credentials are shared read-only by mounting a Docker config directory.
    """

    def __init__(
        self,
        docker: aiodocker.Docker,
        *,
        memory: str = "1g",
        cpu: str = "1.0",
        docker_config_dir: Path | None = None,
    ):
        self._docker = docker
        self._memory = self._parse_memory(memory)
        self._nano_cpus = int(float(cpu) * 1e9)
        self._docker_config_dir = docker_config_dir

    @property
    def docker_config_dir(self) -> Path | None:
        """Host directory mounted at DOCKER_CONFIG_MOUNT, if any."""
        return self._docker_config_dir

    async def run(
        self,
        image: str,
        cmd: list[str],
        *,
        env: dict[str, str] | None = None,
        binds: list[str] | None = None,
        entrypoint: list[str] | None = None,
        timeout: float | None = None,
    ) -> ToolOutput:
        """Run a tool container.

        Args:
            image: Tool image reference (e.g., gcr.io/go-containerregistry/crane)
            cmd: Arguments passed to the image entrypoint
            env: Extra environment variables
            binds: Extra bind mounts in ``host:container:mode`` form
            entrypoint: Override the image entrypoint
            timeout: Seconds before the container is abandoned

        Returns:
            ToolOutput for a zero exit code

        Raises:
            ExternalServiceError: On non-zero exit, OOM kill, timeout or Docker error
        """
        start_time = time.monotonic()
        try:
            return await asyncio.wait_for(
                self._run_container(image, cmd, env or {}, binds or [], entrypoint, start_time),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            logfire.error("Tool timed out", image=image, timeout=timeout)
            raise ExternalServiceError(f"{self._tool_name(image)} timed out after {timeout}s")

    async def _run_container(
        self,
        image: str,
        cmd: list[str],
        env: dict[str, str],
        binds: list[str],
        entrypoint: list[str] | None,
        start_time: float,
    ) -> ToolOutput:
        container = None
        tool = self._tool_name(image)
        try:
            await self._ensure_image(image)

            all_env = dict(env)
            all_binds = list(binds)
            if self._docker_config_dir is not None:
                all_binds.append(f"{self._docker_config_dir}:{DOCKER_CONFIG_MOUNT}:ro")
                all_env.setdefault("DOCKER_CONFIG", DOCKER_CONFIG_MOUNT)

            config = ContainerConfig(
                Image=image,
                Cmd=cmd,
                Env=[f"{key}={value}" for key, value in all_env.items()],
                Entrypoint=entrypoint,
                HostConfig=HostConfig(
                    Binds=all_binds,
                    Memory=self._memory,
                    MemorySwap=self._memory,
                    NanoCpus=self._nano_cpus,
                ),
            )

            container = await self._docker.containers.create(config.model_dump(exclude_none=True))
            await container.start()
            wait_result = await container.wait()
            exit_code = wait_result.get("StatusCode", -1)

            inspect_data = await container.show()
            if inspect_data.get("State", {}).get("OOMKilled", False):
                raise ExternalServiceError(f"{tool} killed by OOM")

            logs = await container.log(stdout=True, stderr=True)
            logs_str = "".join(logs) if logs else ""

            if exit_code != 0:
                logfire.warning(
                    "Tool exited with non-zero code",
                    tool=tool,
                    exit_code=exit_code,
                    logs=logs_str[-1000:],
                )
                raise ExternalServiceError(
                    f"{tool} exited with code {exit_code}: {logs_str.strip()[-500:]}"
                )

            return ToolOutput(
                exit_code=exit_code,
                logs=logs_str,
                duration=time.monotonic() - start_time,
            )

        except aiodocker.DockerError as e:
            logfire.error("Docker error running tool", tool=tool, error=str(e))
            raise ExternalServiceError(f"Docker error: {e}") from e
        finally:
            if container is not None:
                try:
                    await container.delete(force=True)
                except aiodocker.DockerError:
                    logfire.warning("Failed to delete container", container_id=container.id)

    async def _ensure_image(self, image: str) -> None:
        try:
            await self._docker.images.inspect(image)
        except aiodocker.DockerError as e:
            if e.status != 404:
                raise
            logfire.info("Pulling tool image", image=image)
            await self._docker.images.pull(image)

    @staticmethod
    def _tool_name(image: str) -> str:
        """Short tool name from an image ref: 'aquasec/trivy:0.50' -> 'trivy'."""
        name = image.rsplit("/", 1)[-1]
        return re.split(r"[:@]", name, maxsplit=1)[0]

    @staticmethod
    def _parse_memory(memory: str) -> int:
        """Parse a Docker-style memory string ('512m', '1g', '2Gi') to bytes."""
        match = re.match(r"^(\d+(?:\.\d+)?)\s*([kmg]?)i?b?$", memory.strip().lower())
        if not match:
            raise ValueError(f"Invalid memory format: {memory}")
        amount, unit = match.groups()
        multiplier = {"": 1, "k": 1024, "m": 1024**2, "g": 1024**3}[unit]
        return int(float(amount) * multiplier)
