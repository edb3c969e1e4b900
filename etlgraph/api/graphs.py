"""Graphs API: save, load and run node graphs."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from etlgraph.api.deps import get_services
from etlgraph.engine.graph import ExecutionReport, NodeGraph
from etlgraph.services import Services
from etlgraph.storage.graphs import graph_from_dict, graph_to_dict

router = APIRouter(prefix="/api/graphs", tags=["graphs"])


class GraphPayload(BaseModel):
    nodes: list[dict[str, Any]] = Field(default_factory=list)
    connections: list[dict[str, Any]] = Field(default_factory=list)


def serialize_results(graph: NodeGraph, report: ExecutionReport) -> dict[str, Any]:
    return {
        "results": {node_id: node.outputs or {} for node_id, node in graph.nodes.items()},
        "report": report.model_dump(),
    }


@router.get("")
def list_graphs(services: Services = Depends(get_services)):
    return services.graphs.list_graphs()


@router.post("/run")
def run_graph(payload: GraphPayload, services: Services = Depends(get_services)):
    """Build a graph from the payload, execute it and return every node's outputs."""
    graph = graph_from_dict(payload.model_dump(), services.nodes)
    report = graph.execute_all()
    return serialize_results(graph, report)


@router.get("/{name}")
def get_graph(name: str, services: Services = Depends(get_services)):
    graph = services.graphs.load_graph(name)
    if graph is None:
        raise HTTPException(status_code=404, detail="Graph not found")
    return graph_to_dict(graph)


@router.put("/{name}")
def save_graph(name: str, payload: GraphPayload, services: Services = Depends(get_services)):
    graph = graph_from_dict(payload.model_dump(), services.nodes)
    services.graphs.save_graph(name, graph)
    return {"status": "saved", "nodes": len(graph.nodes), "connections": len(graph.connections)}


@router.delete("/{name}")
def delete_graph(name: str, services: Services = Depends(get_services)):
    if not services.graphs.delete_graph(name):
        raise HTTPException(status_code=404, detail="Graph not found")
    return {"status": "deleted"}


@router.post("/{name}/run")
def run_saved_graph(name: str, services: Services = Depends(get_services)):
    graph = services.graphs.load_graph(name)
    if graph is None:
        raise HTTPException(status_code=404, detail="Graph not found")
    report = graph.execute_all()
    return serialize_results(graph, report)
