"""Process-wide setup shared by every CLI command."""

import logfire

from artefact_mirror.config import Config, configure_logging


def bootstrap() -> Config:
    """Load settings, then configure logging and logfire once."""
    config = Config()
    configure_logging(config.logging)
    logfire.configure(send_to_logfire="if-token-present", console=False)
    return config
