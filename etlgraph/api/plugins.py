"""Plugins API: CRUD for plugin definitions."""

from fastapi import APIRouter, Depends, HTTPException

from etlgraph.api.deps import get_services
from etlgraph.plugins.models import PluginDefinition
from etlgraph.services import Services

router = APIRouter(prefix="/api/plugins", tags=["plugins"])


@router.get("")
def list_plugins(services: Services = Depends(get_services)):
    return [p.model_dump() for p in services.plugins.list_definitions()]


@router.get("/{plugin_id}")
def get_plugin(plugin_id: str, services: Services = Depends(get_services)):
    plugin = services.plugins.get_definition(plugin_id)
    if plugin is None:
        raise HTTPException(status_code=404, detail="Plugin not found")
    return plugin.model_dump()


@router.put("/{plugin_id}")
def save_plugin(plugin_id: str, body: PluginDefinition,
                services: Services = Depends(get_services)):
    plugin = body.model_copy(update={"id": plugin_id})
    services.plugins.upsert_definition(plugin)
    return plugin.model_dump()


@router.delete("/{plugin_id}")
def delete_plugin(plugin_id: str, services: Services = Depends(get_services)):
    if not services.plugins.remove_definition(plugin_id):
        raise HTTPException(status_code=404, detail="Plugin not found")
    return {"status": "deleted"}
