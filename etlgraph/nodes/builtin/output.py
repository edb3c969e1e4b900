"""Output node: terminal sink that logs everything it receives."""

from datetime import datetime
from typing import Any

from etlgraph.nodes.base import BaseNode, NodeKind, NodeMeta, NodePort
from etlgraph.values import ValueMap, render_value


class OutputNode(BaseNode):
    kind = NodeKind.OUTPUT
    meta = NodeMeta(
        id=NodeKind.OUTPUT.value,
        label="Output/Log",
        category="core",
        description="Logs all inputs",
        inputs=[NodePort(name="data", description="Any value to log")],
        outputs=[],
    )

    def __init__(self, name: str | None = None, node_id: str | None = None):
        super().__init__(name=name, node_id=node_id)
        self.last_message: str = ""
        self.last_executed: datetime | None = None

    def run(self, inputs: ValueMap) -> dict[str, Any]:
        self.last_executed = datetime.now()
        lines = [f"[{self.last_executed:%Y-%m-%d %H:%M:%S}] Output Node Executed:"]
        for key, value in inputs.items():
            lines.append(f"  {key}: {render_value(value)}")
        self.last_message = "\n".join(lines)
        self.log.info(self.last_message)
        return {}
