"""Base node definitions for etlgraph nodes."""

import uuid
from enum import Enum
from typing import Any, ClassVar

from loguru import logger
from pydantic import BaseModel, Field

from etlgraph.values import Value, ValueMap, to_value_map


class NodeKind(str, Enum):
    """Closed set of node variants; persisted as the node ``type``."""

    REST_API = "rest_api"
    CLI = "cli"
    INPUT = "input"
    OUTPUT = "output"
    PLUGIN = "plugin"

    @classmethod
    def _missing_(cls, value):
        # Accept legacy spellings such as "RestApi" or "CLI"
        if isinstance(value, str):
            folded = value.replace("_", "").replace("-", "").lower()
            for member in cls:
                if member.value.replace("_", "") == folded:
                    return member
        return None


class NodePort(BaseModel):
    """Describes an input or output port on a node."""
    name: str
    description: str = ""
    data_type: str = "any"
    required: bool = False


class NodeMeta(BaseModel):
    """Metadata describing a node type for the editor palette."""
    id: str                                          # e.g. "rest_api"
    label: str                                       # e.g. "REST API"
    category: str                                    # "core" | "network" | "system" | plugin category
    description: str = ""
    inputs: list[NodePort] = Field(default_factory=list)
    outputs: list[NodePort] = Field(default_factory=list)
    config_schema: dict[str, Any] = Field(default_factory=dict)  # JSON Schema
    plugin_id: str | None = None


class Position(BaseModel):
    x: float = 0.0
    y: float = 0.0


def schema_defaults(config_schema: dict[str, Any]) -> dict[str, Value]:
    """Collect the ``default`` of every property in a JSON Schema object."""
    props = config_schema.get("properties", {})
    return {name: spec["default"] for name, spec in props.items() if "default" in spec}


class BaseNode:
    """Base class for all etlgraph nodes.

    Subclasses define ``meta`` and ``kind`` class attributes and override
    ``run()``. ``execute()`` never raises: a failing ``run()`` produces
    ``{"error": <message>}``. Whatever ``execute()`` returns replaces
    ``outputs`` wholesale.
    """

    meta: ClassVar[NodeMeta]
    kind: ClassVar[NodeKind]

    def __init__(self, name: str | None = None, node_id: str | None = None):
        self._id = node_id or str(uuid.uuid4())
        self.name = name or self.meta.label
        self.position = Position()
        self.output_pins: list[str] = [p.name for p in self.meta.outputs]
        self.config: dict[str, Value] = self.default_config()
        self.outputs: ValueMap | None = None

    @property
    def id(self) -> str:
        return self._id

    @property
    def log(self):
        return logger.bind(source=type(self).__name__, node_id=self._id)

    def default_config(self) -> dict[str, Value]:
        return dict(schema_defaults(self.meta.config_schema))

    def get_config(self) -> dict[str, Value]:
        return dict(self.config)

    def apply_config(self, config: dict[str, Any]) -> None:
        self.config.update(to_value_map(config))

    def execute(self, inputs: ValueMap) -> ValueMap:
        """Run the node against its resolved inputs and store the result as ``outputs``."""
        try:
            outputs = to_value_map(self.run(dict(inputs)))
        except Exception as exc:
            message = str(exc) or type(exc).__name__
            self.log.error(f"Error executing {self.kind.value} node {self.name}: {message}")
            outputs = {"error": message}
        self.outputs = outputs
        return outputs

    def run(self, inputs: ValueMap) -> dict[str, Any]:
        """Compute the output map. Subclasses override this."""
        raise NotImplementedError(f"{type(self).__name__}.run() is not implemented")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r} id={self._id}>"
