"""Node types API: lists available node types for the editor palette."""

from fastapi import APIRouter, Depends

from etlgraph.api.deps import get_services
from etlgraph.services import Services

router = APIRouter(prefix="/api/nodes", tags=["nodes"])


@router.get("")
def list_node_types(services: Services = Depends(get_services)):
    """Return metadata for all built-in and plugin node types."""
    return services.nodes.list_meta()
