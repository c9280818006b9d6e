"""Shared fixtures for lila-docker tests."""

import pytest

from lila_docker.cli.main import reset_logging


@pytest.fixture(autouse=True)
def lila_docker_home(tmp_path, monkeypatch):
    """Keep config and log files out of the real home directory."""
    home = tmp_path / "lila-docker-home"
    monkeypatch.setenv("LILA_DOCKER_HOME", str(home))
    yield home
    reset_logging()
