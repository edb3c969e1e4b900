"""Node graph: owns nodes and connections, resolves inputs and runs the scheduler.

Execution is sequential: a node's ``execute()`` completes before the next
node starts, so a node never observes a predecessor's outputs mid-run.
Topology must not be edited while ``execute_all()`` is running.
"""

import uuid
from typing import Callable

from loguru import logger
from pydantic import BaseModel, Field, computed_field

from etlgraph.errors import InvalidConnectionError, NodeNotFoundError
from etlgraph.nodes.base import BaseNode
from etlgraph.values import ValueMap, render_value

log = logger.bind(source="GraphExecutor")


class Connection(BaseModel):
    """A directed wire from a node's output pin to another node's input pin."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    source_node_id: str
    source_output: str
    target_node_id: str
    target_input: str


class ExecutionReport(BaseModel):
    """Outcome of ``NodeGraph.execute_all()``."""
    executed: list[str] = Field(default_factory=list)    # in execution order
    pending: list[str] = Field(default_factory=list)     # never became ready
    starting_nodes: list[str] = Field(default_factory=list)
    passes: int = 0

    @computed_field
    @property
    def completed(self) -> bool:
        return not self.pending


def _describe(values: ValueMap) -> str:
    return ", ".join(f"{k}={render_value(v)}" for k, v in values.items())


class NodeGraph:
    """Directed graph of nodes wired output-pin to input-pin.

    Each input pin accepts at most one connection: connecting to a pin that
    is already wired replaces the earlier connection.
    """

    def __init__(self):
        self.nodes: dict[str, BaseNode] = {}
        self.connections: dict[str, Connection] = {}

    # ---- Nodes ----

    def add_node(self, node: BaseNode) -> BaseNode:
        self.nodes[node.id] = node
        logger.bind(source="NodeGraph").debug(f"Added node: {node!r}")
        return node

    def remove_node(self, node_id: str) -> bool:
        """Remove a node and every connection that references it."""
        node = self.nodes.pop(node_id, None)
        if node is None:
            return False
        stale = [
            conn_id for conn_id, conn in self.connections.items()
            if conn.source_node_id == node_id or conn.target_node_id == node_id
        ]
        for conn_id in stale:
            del self.connections[conn_id]
        logger.bind(source="NodeGraph").debug(
            f"Removed node {node!r} and {len(stale)} connection(s)")
        return True

    def get_node(self, node_id: str) -> BaseNode | None:
        return self.nodes.get(node_id)

    def require_node(self, node_id: str) -> BaseNode:
        """Like get_node, but raises NodeNotFoundError for an unknown id."""
        try:
            return self.nodes[node_id]
        except KeyError:
            raise NodeNotFoundError(node_id) from None

    def clear(self) -> None:
        self.connections.clear()
        self.nodes.clear()

    # ---- Connections ----

    def add_connection(self, connection: Connection) -> Connection:
        for end in (connection.source_node_id, connection.target_node_id):
            if end not in self.nodes:
                raise InvalidConnectionError(f"Connection endpoint {end} is not in the graph")

        for conn_id, existing in list(self.connections.items()):
            if (existing.target_node_id == connection.target_node_id
                    and existing.target_input == connection.target_input
                    and conn_id != connection.id):
                del self.connections[conn_id]
                logger.bind(source="NodeGraph").info(
                    f"Replaced connection {conn_id} on input '{connection.target_input}'")

        self.connections[connection.id] = connection
        return connection

    def connect(self, source_node_id: str, source_output: str,
                target_node_id: str, target_input: str) -> Connection:
        return self.add_connection(Connection(
            source_node_id=source_node_id,
            source_output=source_output,
            target_node_id=target_node_id,
            target_input=target_input,
        ))

    def remove_connection(self, connection_id: str) -> bool:
        return self.connections.pop(connection_id, None) is not None

    def incoming(self, node_id: str) -> list[Connection]:
        return [c for c in self.connections.values() if c.target_node_id == node_id]

    def starting_nodes(self) -> list[str]:
        """Ids of nodes with no incoming connection."""
        targets = {c.target_node_id for c in self.connections.values()}
        return [node_id for node_id in self.nodes if node_id not in targets]

    # ---- Execution ----

    def resolve_inputs(self, node_id: str) -> ValueMap:
        """Collect upstream output values keyed by this node's input pin names.

        Pins whose source has not produced that output yet are omitted.
        """
        inputs: ValueMap = {}
        for conn in self.incoming(node_id):
            source = self.nodes.get(conn.source_node_id)
            if source is None or not source.outputs:
                continue
            if conn.source_output in source.outputs:
                inputs[conn.target_input] = source.outputs[conn.source_output]
        return inputs

    def execute_node(self, node_id: str) -> ValueMap:
        """Resolve inputs for one node and execute it.

        An unknown id yields ``{"error": "Node not found"}``; nothing is raised.
        """
        try:
            node = self.require_node(node_id)
        except NodeNotFoundError as exc:
            log.error(str(exc))
            return {"error": "Node not found"}

        inputs = self.resolve_inputs(node_id)
        log.info(f"Executing: {node.name}")
        log.debug(f"  Inputs: {_describe(inputs)}" if inputs else "  No inputs")

        outputs = node.execute(inputs)

        log.debug(f"  Outputs: {_describe(outputs)}" if outputs else "  No outputs")
        return outputs

    def execute_all(
        self,
        on_node_start: Callable[[str], None] | None = None,
        on_node_done: Callable[[str, ValueMap], None] | None = None,
    ) -> ExecutionReport:
        """Run every node once its upstream nodes have run.

        Repeated passes execute each node whose sources have all executed. A
        pass that makes no progress (cycle, or a node fed by one) ends the run
        early with the remaining nodes left pending. Failed nodes count as
        executed, so their downstream still runs.
        """
        total = len(self.nodes)
        report = ExecutionReport(starting_nodes=self.starting_nodes())
        log.info(f"Starting graph execution with {total} nodes")
        if report.starting_nodes:
            log.info(f"Found {len(report.starting_nodes)} starting node(s)")
        else:
            log.warning("No starting nodes found (nodes without inputs)")

        executed: set[str] = set()
        max_passes = total * 2

        while len(executed) < total and report.passes < max_passes:
            report.passes += 1
            ran = 0

            for node_id in list(self.nodes):
                if node_id in executed:
                    continue
                if not all(c.source_node_id in executed for c in self.incoming(node_id)):
                    continue

                if on_node_start:
                    on_node_start(node_id)
                outputs = self.execute_node(node_id)
                executed.add(node_id)
                report.executed.append(node_id)
                ran += 1
                if on_node_done:
                    on_node_done(node_id, outputs)

            if ran == 0:
                log.warning(
                    f"Circular dependency or disconnected nodes detected. "
                    f"{total - len(executed)} nodes not executed.")
                break

        report.pending = [node_id for node_id in self.nodes if node_id not in executed]
        log.info(f"Graph execution completed. Executed {len(executed)}/{total} nodes")
        return report
