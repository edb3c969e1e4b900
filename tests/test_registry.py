import httpx
import pytest

from etlgraph.config import Settings
from etlgraph.engine.registry import NodeRegistry
from etlgraph.nodes.base import BaseNode, NodeKind, NodeMeta, schema_defaults
from etlgraph.nodes.builtin.cli import CliNode
from etlgraph.nodes.builtin.rest_api import RestApiNode
from etlgraph.plugins.registry import PluginRegistry


class Bare(BaseNode):
    kind = NodeKind.INPUT
    meta = NodeMeta(id="bare", label="Bare", category="test")


def _registry(tmp_path, scripts, **kwargs):
    plugins = PluginRegistry(tmp_path, scripts, create_defaults=False)
    plugins.load()
    reg = NodeRegistry(plugins, **kwargs)
    reg.discover()
    return reg


def test_base_node_run_not_implemented():
    """BaseNode.run must be overridden; execute reports it instead of raising."""
    node = Bare()
    assert node.execute({}) == {"error": "Bare.run() is not implemented"}
    assert node.outputs == {"error": "Bare.run() is not implemented"}


def test_node_ids_are_unique_and_stable():
    first, second = Bare(), Bare(node_id="fixed")
    assert first.id != Bare().id
    assert second.id == "fixed"
    with pytest.raises(AttributeError):
        second.id = "other"


def test_node_meta_pydantic():
    """NodeMeta should be a valid Pydantic model."""
    meta = NodeMeta(id="test", label="Test", category="input")
    data = meta.model_dump()
    assert data["id"] == "test"
    assert data["inputs"] == []


def test_schema_defaults():
    schema = {"properties": {"a": {"default": 1}, "b": {"type": "string"}}}
    assert schema_defaults(schema) == {"a": 1}


def test_discover_finds_builtins(tmp_path, scripts):
    reg = _registry(tmp_path, scripts)
    assert set(reg.node_types) == {NodeKind.REST_API, NodeKind.CLI, NodeKind.INPUT, NodeKind.OUTPUT}
    assert reg.get("cli") is CliNode
    with pytest.raises(KeyError):
        reg.get("teleporter")


def test_create_applies_settings(tmp_path, scripts):
    transport = httpx.MockTransport(lambda r: httpx.Response(200))
    reg = _registry(tmp_path, scripts,
                    settings=Settings(command_timeout=5, http_timeout=7),
                    http_transport=transport)
    cli = reg.create(NodeKind.CLI, name="Runner")
    rest = reg.create("rest_api")
    assert cli.config["timeout"] == 5.0
    assert cli.name == "Runner"
    assert isinstance(rest, RestApiNode)
    assert rest.transport is transport
    assert rest.config["timeout"] == 7.0


def test_create_plugin_requires_id(tmp_path, scripts):
    reg = _registry(tmp_path, scripts)
    with pytest.raises(ValueError):
        reg.create(NodeKind.PLUGIN)


def test_legacy_kind_names():
    assert NodeKind("RestApi") is NodeKind.REST_API
    assert NodeKind("CLI") is NodeKind.CLI
    with pytest.raises(ValueError):
        NodeKind("Teleporter")


def test_list_meta_includes_plugins(services):
    metas = services.nodes.list_meta()
    plugin_metas = [m for m in metas if m["plugin_id"]]
    assert len(plugin_metas) == 7
    assert len(metas) == 11
