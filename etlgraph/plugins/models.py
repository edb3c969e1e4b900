"""Plugin definition schema: pins, processing scripts and config defaults."""

import uuid
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from etlgraph.nodes.base import NodeMeta, NodePort

DEFAULT_PROCESS_CODE = """# Available: inputs (dict), config (dict)
# Assign the result to: outputs (dict)

outputs = {}
# Your processing code here
"""


class DataKind(str, Enum):
    """Declared pin data kind. A hint for editors, never checked at runtime."""

    ANY = "any"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    JSON = "json"


class PluginInputPin(BaseModel):
    name: str
    data_type: DataKind = DataKind.ANY
    required: bool = False
    default_value: Any = None


class PluginOutputPin(BaseModel):
    name: str
    data_type: DataKind = DataKind.ANY
    python_code: str | None = None   # optional per-output override script

    @property
    def has_override(self) -> bool:
        return bool(self.python_code and self.python_code.strip())


def _check_unique(pins: list, kind: str) -> list:
    seen = set()
    for pin in pins:
        if pin.name in seen:
            raise ValueError(f"Duplicate {kind} pin name: '{pin.name}'")
        seen.add(pin.name)
    return pins


class PluginDefinition(BaseModel):
    """A runtime-loaded node schema, identified by a stable id."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = "New Plugin"
    description: str = ""
    category: str = "Custom"
    icon: str = ""
    input_pins: list[PluginInputPin] = Field(default_factory=list)
    output_pins: list[PluginOutputPin] = Field(default_factory=list)
    python_process_code: str = DEFAULT_PROCESS_CODE
    config_properties: dict[str, Any] = Field(default_factory=dict)

    @field_validator("input_pins")
    @classmethod
    def _unique_inputs(cls, pins):
        return _check_unique(pins, "input")

    @field_validator("output_pins")
    @classmethod
    def _unique_outputs(cls, pins):
        return _check_unique(pins, "output")

    def to_meta(self) -> NodeMeta:
        """Palette metadata for nodes built from this definition."""
        return NodeMeta(
            id=f"plugin:{self.id}",
            label=self.name,
            category=self.category,
            description=self.description,
            inputs=[NodePort(name=p.name, data_type=p.data_type.value, required=p.required)
                    for p in self.input_pins],
            outputs=[NodePort(name=p.name, data_type=p.data_type.value)
                     for p in self.output_pins],
            config_schema={
                "type": "object",
                "properties": {k: {"default": v} for k, v in self.config_properties.items()},
            },
            plugin_id=self.id,
        )
