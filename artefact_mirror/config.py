import logging
import os
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from artefact_mirror.domain.mirror.model import Destination

# =============================================================================
# Section models
# =============================================================================


class ConfigFiles(BaseModel):
    """Where the artifact documents live (relative to the working directory)."""

    images: Path = Path("configs/images.yaml")
    charts: Path = Path("configs/charts.yaml")


class DestinationConfig(BaseModel):
    registry: str = "ghcr.io"
    namespace: str = "scalevector-io"

    def to_destination(self) -> Destination:
        return Destination(registry=self.registry, namespace=self.namespace)


class ExecutionConfig(BaseModel):
    max_concurrency: int = 4  # parallel jobs per run
    job_timeout_seconds: float | None = 3600  # None disables the per-job timeout


class ToolsConfig(BaseModel):
    """Tool images and limits for containerised crane/helm/trivy runs."""

    crane_image: str = "gcr.io/go-containerregistry/crane:latest"
    helm_image: str = "alpine/helm:3.12.0"
    docker_config_dir: Path | None = None  # mounted read-only for registry auth
    memory: str = "1g"
    cpu: str = "1.0"


class ScanConfig(BaseModel):
    enabled: bool = True
    image: str = "aquasec/trivy:latest"
    severities: list[str] = ["CRITICAL", "HIGH", "MEDIUM"]
    ignore_unfixed: bool = True
    cache_dir: Path | None = Path("~/.cache/trivy").expanduser()


class ReportsConfig(BaseModel):
    dir: Path = Path("reports")
    retention_days: int = 30


class ScheduleConfig(BaseModel):
    """Cron expressions for scheduled runs (UTC)."""

    images_cron: str = "0 3 * * 1"  # Mondays 03:00
    charts_cron: str = "0 4 * * 1"  # Mondays 04:00


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @property
    def file(self) -> str | None:
        """Get log file path from MIRROR_LOG_FILE env var."""
        return os.environ.get("MIRROR_LOG_FILE")


# =============================================================================
# Application Configuration
# =============================================================================


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Load settings from the YAML file named by MIRROR_CONFIG_FILE."""

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        yaml_data = self._load_yaml_config()
        return yaml_data.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return self._load_yaml_config()

    def _load_yaml_config(self) -> dict[str, Any]:
        config_file = os.environ.get("MIRROR_CONFIG_FILE")
        if config_file:
            path = Path(config_file)
            if path.exists():
                return yaml.safe_load(path.read_text()) or {}
        return {}


class Config(BaseSettings):
    configs: ConfigFiles = ConfigFiles()
    destination: DestinationConfig = DestinationConfig()
    execution: ExecutionConfig = ExecutionConfig()
    tools: ToolsConfig = ToolsConfig()
    scan: ScanConfig = ScanConfig()
    reports: ReportsConfig = ReportsConfig()
    schedule: ScheduleConfig = ScheduleConfig()
    logging: LoggingConfig = LoggingConfig()

    model_config = SettingsConfigDict(
        env_prefix="MIRROR_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # Allows MIRROR_EXECUTION__MAX_CONCURRENCY=8
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include YAML config.

        Priority (highest to lowest):
        1. init_settings - values passed to Config()
        2. env_settings - environment variables
        3. dotenv_settings - .env file
        4. yaml_settings - MIRROR_CONFIG_FILE yaml
        5. file_secret_settings - secrets from files
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def configure_logging(config: LoggingConfig) -> None:
    """Configure Python logging based on config.

    Call once at CLI start, before any run begins.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(config.level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(config.format, datefmt=config.date_format)

    if config.file:
        log_path = Path(config.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_path)
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(config.level)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # Reduce noise from third-party libraries
    logging.getLogger("aiodocker").setLevel(logging.WARNING)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)

    logging.debug("Logging configured: level=%s, file=%s", config.level, config.file)
