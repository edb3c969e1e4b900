"""Plugin node: a node whose pins and behavior come from a PluginDefinition."""

import copy
from typing import Any

from etlgraph.errors import InputValidationError
from etlgraph.nodes.base import BaseNode, NodeKind
from etlgraph.plugins.models import PluginDefinition
from etlgraph.scripting.executor import ScriptExecutor
from etlgraph.values import Value, ValueMap


class PluginNode(BaseNode):
    kind = NodeKind.PLUGIN

    def __init__(
        self,
        definition: PluginDefinition,
        scripts: ScriptExecutor,
        name: str | None = None,
        node_id: str | None = None,
    ):
        self.definition = definition
        self.scripts = scripts
        self.meta = definition.to_meta()
        super().__init__(name=name or definition.name, node_id=node_id)

    def default_config(self) -> dict[str, Value]:
        return copy.deepcopy(self.definition.config_properties)

    def run(self, inputs: ValueMap) -> dict[str, Any]:
        definition = self.definition

        for pin in definition.input_pins:
            if pin.required and inputs.get(pin.name) is None:
                raise InputValidationError(pin.name)

        for pin in definition.input_pins:
            if pin.name not in inputs and pin.default_value is not None:
                inputs[pin.name] = pin.default_value

        result = self.scripts.run(
            definition.python_process_code,
            {"inputs": inputs, "config": self.config},
        )
        main = result.get("outputs")
        outputs = dict(main) if isinstance(main, dict) else dict(result)

        for pin in definition.output_pins:
            if not pin.has_override:
                continue
            override = self.scripts.execute(
                pin.python_code,
                {"inputs": inputs, "outputs": outputs, "config": self.config},
            )
            if "result" in override:
                outputs[pin.name] = override["result"]
            elif pin.name in override:
                outputs[pin.name] = override[pin.name]

        return outputs
