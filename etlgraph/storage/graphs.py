"""Graph storage: the persisted graph JSON format and a directory of saved graphs."""

import json
from pathlib import Path
from typing import Any

from loguru import logger

from etlgraph.engine.graph import Connection, NodeGraph
from etlgraph.engine.registry import NodeRegistry
from etlgraph.nodes.base import BaseNode, NodeKind, Position
from etlgraph.nodes.plugin import PluginNode

log = logger.bind(source="NodeGraph")


def node_to_dict(node: BaseNode) -> dict[str, Any]:
    return {
        "id": node.id,
        "type": node.kind.value,
        "name": node.name,
        "position": {"x": node.position.x, "y": node.position.y},
        "pluginId": node.definition.id if isinstance(node, PluginNode) else None,
        "config": node.get_config(),
    }


def graph_to_dict(graph: NodeGraph) -> dict[str, Any]:
    return {
        "nodes": [node_to_dict(n) for n in graph.nodes.values()],
        "connections": [c.model_dump() for c in graph.connections.values()],
    }


def node_from_dict(data: dict[str, Any], registry: NodeRegistry) -> BaseNode:
    """Rebuild one node. Plugin nodes need their definition in the plugin registry."""
    plugin_id = data.get("pluginId")
    if plugin_id is not None:
        kind = NodeKind.PLUGIN
    else:
        kind = NodeKind(data["type"])
    node = registry.create(kind, name=data.get("name"), node_id=str(data["id"]),
                           plugin_id=plugin_id)
    position = data.get("position")
    if position:
        node.position = Position.model_validate(position)
    config = data.get("config")
    if isinstance(config, dict):
        node.apply_config(config)
    return node


def graph_from_dict(data: dict[str, Any], registry: NodeRegistry) -> NodeGraph:
    """Rebuild a graph; entries that fail to load are skipped and logged."""
    graph = NodeGraph()

    for node_data in data.get("nodes", []):
        try:
            graph.add_node(node_from_dict(node_data, registry))
        except Exception as exc:
            log.error(f"Failed to load node: {exc}")

    for conn_data in data.get("connections", []):
        try:
            graph.add_connection(Connection.model_validate(conn_data))
        except Exception as exc:
            log.error(f"Failed to load connection: {exc}")

    log.info(f"Loaded {len(graph.nodes)} nodes and {len(graph.connections)} connections")
    return graph


class GraphStore:
    """Saved graphs as ``<root>/<name>.json``."""

    def __init__(self, root: Path, registry: NodeRegistry):
        self.root = Path(root)
        self.registry = registry

    def _path(self, name: str) -> Path:
        return self.root / f"{name}.json"

    def save_to_file(self, graph: NodeGraph, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(graph_to_dict(graph), indent=2), encoding="utf-8")
        log.info(f"Saved {len(graph.nodes)} nodes and {len(graph.connections)} connections")

    def load_from_file(self, path: Path) -> NodeGraph:
        """Load a saved graph. Raises ValueError if the file is not a graph document."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a JSON object with nodes and connections")
        return graph_from_dict(data, self.registry)

    def list_graphs(self) -> list[str]:
        if not self.root.exists():
            return []
        return [p.stem for p in sorted(self.root.glob("*.json"))]

    def save_graph(self, name: str, graph: NodeGraph) -> None:
        self.save_to_file(graph, self._path(name))

    def load_graph(self, name: str) -> NodeGraph | None:
        path = self._path(name)
        if not path.exists():
            return None
        return self.load_from_file(path)

    def delete_graph(self, name: str) -> bool:
        path = self._path(name)
        if not path.exists():
            return False
        path.unlink()
        return True
