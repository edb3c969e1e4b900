"""Shared test fixtures for etlgraph."""

import pytest

from etlgraph.config import Settings
from etlgraph.scripting.executor import ScriptExecutor
from etlgraph.services import Services


@pytest.fixture
def settings(tmp_path):
    return Settings(data_dir=tmp_path, log_level="DEBUG")


@pytest.fixture
def services(settings):
    """Services rooted in a temp dir, with the default plugins seeded."""
    svc = Services(settings, console_logging=False)
    yield svc
    svc.shutdown()


@pytest.fixture
def scripts():
    return ScriptExecutor()
