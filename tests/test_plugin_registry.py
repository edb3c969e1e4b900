"""Tests for plugin definitions, persistence and the default plugin set."""

import sys

import httpx
import pytest
from pydantic import ValidationError

from etlgraph.config import Settings
from etlgraph.errors import PluginNotFoundError
from etlgraph.nodes.plugin import PluginNode
from etlgraph.plugins.models import PluginDefinition, PluginInputPin, PluginOutputPin
from etlgraph.plugins.registry import PluginRegistry

DEFAULT_NAMES = {
    "Input", "Output", "REST API", "CLI Command",
    "String Transform", "Math Calculator", "JSON Parser",
}


def _registry(path, scripts, **kwargs):
    reg = PluginRegistry(path, scripts, **kwargs)
    reg.load()
    return reg


class TestPluginRegistry:
    def test_seeds_defaults_into_new_directory(self, tmp_path, scripts):
        root = tmp_path / "plugins"
        reg = _registry(root, scripts)
        names = {p.name for p in reg.list_definitions()}
        assert names == DEFAULT_NAMES
        assert len(list(root.glob("*.json"))) == len(DEFAULT_NAMES)

    def test_reload_keeps_ids(self, tmp_path, scripts):
        first = _registry(tmp_path, scripts)
        second = _registry(tmp_path, scripts)
        assert {p.id for p in first.list_definitions()} == {p.id for p in second.list_definitions()}

    def test_no_defaults_when_disabled(self, tmp_path, scripts):
        reg = _registry(tmp_path / "plugins", scripts, create_defaults=False)
        assert reg.list_definitions() == []

    def test_bad_file_is_skipped(self, tmp_path, scripts):
        good = PluginDefinition(name="Good")
        (tmp_path / f"{good.id}.json").write_text(good.model_dump_json())
        (tmp_path / "broken.json").write_text("{not json")
        reg = _registry(tmp_path, scripts)
        assert [p.name for p in reg.list_definitions()] == ["Good"]

    def test_upsert_is_immediately_available(self, tmp_path, scripts):
        reg = _registry(tmp_path, scripts, create_defaults=False)
        plugin = PluginDefinition(name="Echo", python_process_code="outputs = dict(inputs)")
        reg.upsert_definition(plugin)

        assert reg.get_definition(plugin.id) == plugin
        assert (tmp_path / f"{plugin.id}.json").exists()
        node = reg.create_node(plugin.id)
        assert isinstance(node, PluginNode)
        assert node.execute({"a": 1}) == {"a": 1}

    def test_update_replaces_definition(self, tmp_path, scripts):
        reg = _registry(tmp_path, scripts, create_defaults=False)
        plugin = PluginDefinition(name="V1")
        reg.upsert_definition(plugin)
        reg.upsert_definition(plugin.model_copy(update={"name": "V2"}))

        reloaded = _registry(tmp_path, scripts, create_defaults=False)
        assert reloaded.get_definition(plugin.id).name == "V2"

    def test_remove(self, tmp_path, scripts):
        reg = _registry(tmp_path, scripts, create_defaults=False)
        plugin = PluginDefinition(name="Doomed")
        reg.upsert_definition(plugin)

        assert reg.remove_definition(plugin.id) is True
        assert reg.get_definition(plugin.id) is None
        assert not (tmp_path / f"{plugin.id}.json").exists()
        assert reg.remove_definition(plugin.id) is False

    def test_create_node_unknown_plugin(self, tmp_path, scripts):
        reg = _registry(tmp_path, scripts, create_defaults=False)
        with pytest.raises(PluginNotFoundError):
            reg.create_node("missing")

    def test_duplicate_pin_names_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate input pin"):
            PluginDefinition(input_pins=[PluginInputPin(name="a"), PluginInputPin(name="a")])
        with pytest.raises(ValidationError, match="Duplicate output pin"):
            PluginDefinition(output_pins=[PluginOutputPin(name="a"), PluginOutputPin(name="a")])

    def test_meta_describes_pins(self):
        plugin = PluginDefinition(
            name="Meta",
            input_pins=[PluginInputPin(name="a", required=True)],
            output_pins=[PluginOutputPin(name="b")],
            config_properties={"k": 1},
        )
        meta = plugin.to_meta()
        assert meta.plugin_id == plugin.id
        assert [p.name for p in meta.inputs] == ["a"]
        assert meta.inputs[0].required is True
        assert [p.name for p in meta.outputs] == ["b"]
        assert meta.config_schema["properties"] == {"k": {"default": 1}}


# ---------------------------------------------------------------------------
# Default plugins
# ---------------------------------------------------------------------------

def _default_node(services, name):
    plugin = services.plugins.find_by_name(name)
    return services.plugins.create_node(plugin.id)


class TestDefaultPlugins:
    def test_string_transform(self, services):
        node = _default_node(services, "String Transform")
        assert node.execute({"text": "hello"}) == {
            "result": "HELLO",
            "original_length": 5,
            "length": 5,
        }

    def test_string_transform_requires_text(self, services):
        node = _default_node(services, "String Transform")
        assert node.execute({}) == {"error": "Required input 'text' is missing"}

    def test_math_calculator(self, services):
        node = _default_node(services, "Math Calculator")
        assert node.execute({"a": 9, "b": 0}) == {
            "sum": 9.0, "difference": 9.0, "product": 0.0, "quotient": None,
        }

    def test_json_parser_path(self, services):
        node = _default_node(services, "JSON Parser")
        outputs = node.execute({"json_string": '{"a": {"b": [1, 2]}}', "path": "a.b"})
        assert outputs == {"data": [1, 2], "is_valid": True}

    def test_json_parser_invalid(self, services):
        node = _default_node(services, "JSON Parser")
        outputs = node.execute({"json_string": "{nope"})
        assert outputs["is_valid"] is False
        assert outputs["data"] is None
        assert "error" in outputs

    def test_input_plugin(self, services):
        node = _default_node(services, "Input")
        node.apply_config({"input_data": "[1, 2]", "data_type": "json"})
        assert node.execute({}) == {"data": [1, 2]}

    def test_output_plugin(self, services):
        node = _default_node(services, "Output")
        outputs = node.execute({"data": 3})
        assert outputs["logged"] is True
        assert "  data: 3" in outputs["message"]

    def test_rest_api_plugin_uses_httpx(self, services, monkeypatch):
        calls = []

        def fake_request(method, url, **kwargs):
            calls.append((method, url, kwargs))
            return httpx.Response(201, text="created")

        monkeypatch.setattr(httpx, "request", fake_request)
        node = _default_node(services, "REST API")
        node.apply_config({"method": "POST", "headers": '{"X-Key": "k"}'})
        outputs = node.execute({"url_override": "https://example.test/items",
                                "payload_data": {"n": 1}})

        assert outputs == {"response_text": "created", "status_code": 201, "success": True}
        method, url, kwargs = calls[0]
        assert (method, url) == ("POST", "https://example.test/items")
        assert kwargs["content"] == '{"n": 1}'
        assert kwargs["headers"] == {"X-Key": "k", "Content-Type": "application/json"}
        assert kwargs["timeout"] == 30.0

    def test_rest_api_plugin_transport_fault(self, services, monkeypatch):
        def failing_request(method, url, **kwargs):
            raise httpx.ConnectError("refused")

        monkeypatch.setattr(httpx, "request", failing_request)
        outputs = _default_node(services, "REST API").execute({})
        assert outputs["success"] is False
        assert outputs["status_code"] == 0
        assert outputs["error"] == "refused"

    def test_cli_plugin_decodes_binary_output(self, services):
        node = _default_node(services, "CLI Command")
        node.apply_config({
            "command": sys.executable,
            "arguments": ["-c", "import sys; sys.stdout.buffer.write(b'\\xff ok')"],
        })
        outputs = node.execute({})
        assert outputs["return_code"] == 0
        assert outputs["stdout"] == "\ufffd ok"


class TestDefaultPluginTimeouts:
    def test_seeded_from_settings(self, tmp_path, scripts):
        reg = _registry(tmp_path, scripts, settings=Settings(command_timeout=4, http_timeout=6))
        assert reg.find_by_name("CLI Command").config_properties["timeout"] == 4.0
        assert reg.find_by_name("REST API").config_properties["timeout"] == 6.0

    def test_cli_plugin_honours_timeout(self, tmp_path, scripts):
        reg = _registry(tmp_path, scripts, settings=Settings(command_timeout=0.2))
        node = reg.create_node(reg.find_by_name("CLI Command").id)
        node.apply_config({"command": sys.executable, "arguments": ["-c", "import time; time.sleep(5)"]})
        outputs = node.execute({})
        assert outputs["return_code"] == -1
        assert outputs["error"] == "Command timed out after 0.2s"
