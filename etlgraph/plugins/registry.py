"""Plugin registry: JSON-on-disk plugin definitions and the plugin node factory."""

from pathlib import Path

from loguru import logger

from etlgraph.config import Settings
from etlgraph.errors import PluginNotFoundError
from etlgraph.nodes.plugin import PluginNode
from etlgraph.plugins.defaults import default_plugins
from etlgraph.plugins.models import PluginDefinition
from etlgraph.scripting.executor import ScriptExecutor

log = logger.bind(source="PluginRegistry")


class PluginRegistry:
    """Holds plugin definitions keyed by id, persisted as ``<root>/<id>.json``."""

    def __init__(self, root: Path, scripts: ScriptExecutor, create_defaults: bool = True,
                 settings: Settings | None = None):
        self.root = Path(root)
        self.scripts = scripts
        self.create_defaults = create_defaults
        self.settings = settings or Settings()
        self._plugins: dict[str, PluginDefinition] = {}

    def _path(self, plugin_id: str) -> Path:
        return self.root / f"{plugin_id}.json"

    def load(self) -> None:
        """(Re)load every definition file; seed the defaults into an empty directory."""
        self._plugins.clear()
        if not self.root.exists():
            self.root.mkdir(parents=True)
            log.info(f"Created plugins directory: {self.root}")
        else:
            log.info(f"Loading plugins from: {self.root}")
            loaded = failed = 0
            for path in sorted(self.root.glob("*.json")):
                try:
                    plugin = PluginDefinition.model_validate_json(path.read_text(encoding="utf-8"))
                except (OSError, ValueError) as exc:
                    log.error(f"Error loading plugin from {path.name}: {exc}")
                    failed += 1
                    continue
                self._plugins[plugin.id] = plugin
                log.debug(f"Loaded plugin: {plugin.name} ({plugin.category})")
                loaded += 1
            log.info(f"Loaded {loaded} plugins successfully, {failed} errors")

        if not self._plugins and self.create_defaults:
            log.info("No plugins found, creating defaults")
            for plugin in default_plugins(
                command_timeout=self.settings.command_timeout,
                http_timeout=self.settings.http_timeout,
            ):
                self.upsert_definition(plugin)
            log.info(f"Created {len(self._plugins)} default plugins")

    def list_definitions(self) -> list[PluginDefinition]:
        return list(self._plugins.values())

    def get_definition(self, plugin_id: str) -> PluginDefinition | None:
        return self._plugins.get(plugin_id)

    def upsert_definition(self, plugin: PluginDefinition) -> None:
        """Persist a definition and make it available immediately."""
        self.root.mkdir(parents=True, exist_ok=True)
        self._path(plugin.id).write_text(plugin.model_dump_json(indent=2), encoding="utf-8")
        self._plugins[plugin.id] = plugin
        log.info(f"Saved plugin: {plugin.name}")

    def remove_definition(self, plugin_id: str) -> bool:
        if self._plugins.pop(plugin_id, None) is None:
            return False
        self._path(plugin_id).unlink(missing_ok=True)
        log.info(f"Removed plugin: {plugin_id}")
        return True

    def create_node(self, plugin_id: str, name: str | None = None,
                    node_id: str | None = None) -> PluginNode:
        """Instantiate a node bound to a definition. Raises PluginNotFoundError."""
        plugin = self.get_definition(plugin_id)
        if plugin is None:
            raise PluginNotFoundError(plugin_id)
        return PluginNode(plugin, self.scripts, name=name, node_id=node_id)

    def find_by_name(self, name: str) -> PluginDefinition | None:
        for plugin in self._plugins.values():
            if plugin.name == name:
                return plugin
        return None
