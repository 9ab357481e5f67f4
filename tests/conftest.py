"""Global test fixtures."""

import os

import logfire
import pytest

# Keep the developer's shell settings out of Config() in tests.
for key in [k for k in os.environ if k.startswith("MIRROR_")]:
    del os.environ[key]

logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture
def write_yaml(tmp_path):
    """Write a YAML document under tmp_path and return its path."""

    def _write(name: str, text: str):
        path = tmp_path / name
        path.write_text(text)
        return path

    return _write
