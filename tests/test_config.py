from pathlib import Path

import pytest
from pydantic import ValidationError

from etlgraph.config import Settings
from etlgraph.log import LogBuffer, setup_logging, shutdown_logging
from etlgraph.values import render_value, to_value


def test_defaults():
    settings = Settings()
    assert settings.plugins_path == Path("etlgraph_data/plugins")
    assert settings.graphs_path == Path("etlgraph_data/graphs")
    assert settings.command_timeout == 30.0
    assert settings.script_sandbox is False


def test_from_env():
    settings = Settings.from_env({
        "ETLGRAPH_DATA_DIR": "/srv/etl",
        "ETLGRAPH_GRAPHS_DIR": "/srv/graphs",
        "ETLGRAPH_COMMAND_TIMEOUT": "5",
        "ETLGRAPH_SCRIPT_SANDBOX": "true",
        "ETLGRAPH_LOG_LEVEL": "",
        "UNRELATED": "x",
    })
    assert settings.data_dir == Path("/srv/etl")
    assert settings.plugins_path == Path("/srv/etl/plugins")
    assert settings.graphs_path == Path("/srv/graphs")
    assert settings.command_timeout == 5.0
    assert settings.script_sandbox is True
    assert settings.log_level == "INFO"


def test_invalid_env_value():
    with pytest.raises(ValidationError):
        Settings.from_env({"ETLGRAPH_HTTP_TIMEOUT": "-1"})


def test_log_buffer_is_bounded(tmp_path):
    from loguru import logger

    buffer = setup_logging(Settings(data_dir=tmp_path, log_buffer_size=3), console=False)
    try:
        for i in range(5):
            logger.bind(source="test").info(f"message {i}")
        entries = buffer.entries()
        assert [e.message for e in entries] == ["message 2", "message 3", "message 4"]
        assert entries[-1].source == "test"
        assert entries[-1].level == "INFO"
        buffer.clear()
        assert buffer.entries() == []
    finally:
        shutdown_logging(buffer)
    assert buffer.sink_ids == []


def test_file_sink(tmp_path):
    buffer = setup_logging(Settings(data_dir=tmp_path, log_dir=tmp_path / "logs"), console=False)
    shutdown_logging(buffer)
    assert list((tmp_path / "logs").glob("etlgraph_*.log"))


def test_unattached_buffer_starts_empty():
    assert LogBuffer().entries() == []


def test_to_value():
    assert to_value({"a": (1, 2), 3: {"b"}}) == {"a": [1, 2], "3": ["b"]}
    assert to_value(Path("/x")) == "/x"
    assert to_value(True) is True
    assert to_value(None) is None


def test_render_value():
    assert render_value(None) == "(null)"
    assert render_value([1, "a"]) == '[1, "a"]'
    assert render_value(2.5) == "2.5"
