"""Process-wide service wiring: built once at startup, shut down explicitly."""

import httpx

from etlgraph.config import Settings
from etlgraph.engine.registry import NodeRegistry
from etlgraph.log import LogBuffer, setup_logging, shutdown_logging
from etlgraph.plugins.registry import PluginRegistry
from etlgraph.scripting.executor import ScriptExecutor
from etlgraph.storage.graphs import GraphStore


class Services:
    """Owns the collaborators every component receives through its constructor."""

    def __init__(
        self,
        settings: Settings,
        console_logging: bool = True,
        http_transport: httpx.BaseTransport | None = None,
    ):
        self.settings = settings
        self.logs: LogBuffer = setup_logging(settings, console=console_logging)
        self.scripts = ScriptExecutor(sandbox=settings.script_sandbox)
        self.plugins = PluginRegistry(
            settings.plugins_path,
            self.scripts,
            create_defaults=settings.create_default_plugins,
            settings=settings,
        )
        self.plugins.load()
        self.nodes = NodeRegistry(self.plugins, settings, http_transport=http_transport)
        self.nodes.discover()
        self.graphs = GraphStore(settings.graphs_path, self.nodes)

    def shutdown(self) -> None:
        shutdown_logging(self.logs)
