"""Exception types raised inside nodes, the plugin registry and the graph."""


class EtlGraphError(Exception):
    """Base class for all etlgraph errors."""


class InputValidationError(EtlGraphError):
    """A required input pin has no value at execution time."""

    def __init__(self, pin_name: str):
        self.pin_name = pin_name
        super().__init__(f"Required input '{pin_name}' is missing")


class ExecutionError(EtlGraphError):
    """A script, transport or process launch failed inside a node."""


class NodeNotFoundError(EtlGraphError):
    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node {node_id} not found")


class PluginNotFoundError(EtlGraphError):
    def __init__(self, plugin_id: str):
        self.plugin_id = plugin_id
        super().__init__(f"Plugin {plugin_id} not found")


class InvalidConnectionError(EtlGraphError):
    """A connection references a node that is not part of the graph."""
