"""Node type registry with autodiscovery of the built-in variants."""

import importlib
import pkgutil
from typing import Any

import httpx

from etlgraph.config import Settings
from etlgraph.nodes.base import BaseNode, NodeKind
from etlgraph.plugins.registry import PluginRegistry


class NodeRegistry:
    """Discovers built-in node classes and creates nodes of any kind.

    Built-in kinds are dispatched by their ``NodeKind`` tag; plugin nodes are
    delegated to the plugin registry.
    """

    def __init__(
        self,
        plugins: PluginRegistry,
        settings: Settings | None = None,
        http_transport: httpx.BaseTransport | None = None,
    ):
        self.plugins = plugins
        self.settings = settings or Settings()
        self.http_transport = http_transport
        self.node_types: dict[NodeKind, type[BaseNode]] = {}

    def discover(self):
        """Scan etlgraph.nodes.builtin for BaseNode subclasses."""
        import etlgraph.nodes.builtin as builtin_pkg

        for _importer, modname, _ispkg in pkgutil.iter_modules(builtin_pkg.__path__):
            mod = importlib.import_module(f"{builtin_pkg.__name__}.{modname}")
            for attr_name in dir(mod):
                attr = getattr(mod, attr_name)
                if (isinstance(attr, type)
                    and issubclass(attr, BaseNode)
                    and attr is not BaseNode
                    and hasattr(attr, 'meta')
                    and hasattr(attr, 'kind')):
                    self.node_types[attr.kind] = attr

    def get(self, kind: NodeKind | str) -> type[BaseNode]:
        """Get a built-in node class by kind. Raises KeyError if not found."""
        try:
            return self.node_types[NodeKind(kind)]
        except ValueError:
            raise KeyError(kind) from None

    def create(self, kind: NodeKind | str, name: str | None = None,
               node_id: str | None = None, plugin_id: str | None = None) -> BaseNode:
        """Create a node of the given kind; plugin nodes require ``plugin_id``."""
        kind = NodeKind(kind)
        if kind is NodeKind.PLUGIN:
            if not plugin_id:
                raise ValueError("Plugin nodes require a plugin_id")
            return self.plugins.create_node(plugin_id, name=name, node_id=node_id)

        node_cls = self.get(kind)
        if kind is NodeKind.REST_API:
            node = node_cls(name=name, node_id=node_id, transport=self.http_transport)
            node.config["timeout"] = self.settings.http_timeout
        else:
            node = node_cls(name=name, node_id=node_id)
        if kind is NodeKind.CLI:
            node.config["timeout"] = self.settings.command_timeout
        return node

    def list_meta(self) -> list[dict[str, Any]]:
        """Return metadata for all node types, built-in and plugin (for the editor palette)."""
        metas = [cls.meta.model_dump() for cls in self.node_types.values()]
        metas.extend(p.to_meta().model_dump() for p in self.plugins.list_definitions())
        return metas
