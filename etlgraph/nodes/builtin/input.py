"""Input node: emits a static value parsed from configured text."""

import json
import math
from typing import Any

from etlgraph.nodes.base import BaseNode, NodeKind, NodeMeta, NodePort
from etlgraph.values import Value, ValueMap

_TRUE = ("true", "yes", "1")
_FALSE = ("false", "no", "0")


def _finite_float(text: str) -> float:
    number = float(text)
    if not math.isfinite(number):
        raise ValueError(f"Non-finite number {text}")
    return number


def parse_static(raw: str, data_type: str) -> Value:
    """Parse ``raw`` according to ``data_type``; unparseable text is returned unchanged.

    Non-finite numbers (nan, inf) count as unparseable since they have no JSON form.
    """
    kind = (data_type or "text").lower()
    if kind == "number":
        try:
            return _finite_float(raw)
        except ValueError:
            return raw
    if kind == "boolean":
        folded = raw.strip().lower()
        if folded in _TRUE:
            return True
        if folded in _FALSE:
            return False
        return raw
    if kind == "json":
        try:
            return json.loads(raw, parse_float=_finite_float, parse_constant=_finite_float)
        except ValueError:
            return raw
    return raw


class InputNode(BaseNode):
    kind = NodeKind.INPUT
    meta = NodeMeta(
        id=NodeKind.INPUT.value,
        label="Input",
        category="core",
        description="Provides static data to the graph",
        inputs=[],
        outputs=[NodePort(name="data", description="Parsed value")],
        config_schema={
            "type": "object",
            "properties": {
                "input_data": {"type": "string", "title": "Data", "default": ""},
                "data_type": {"type": "string", "title": "Data Type",
                              "enum": ["text", "number", "boolean", "json"],
                              "default": "text"},
            },
        },
    )

    def run(self, inputs: ValueMap) -> dict[str, Any]:
        raw = self.config.get("input_data")
        raw = "" if raw is None else str(raw)
        return {"data": parse_static(raw, str(self.config.get("data_type") or "text"))}
