"""Plugin manager using pluggy for kube-probe.

This module provides the PluginManager class that handles plugin
discovery, registration, health checking and collection of the controls
and resource listings plugins contribute.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import pluggy

from kube_probe.hooks import PROJECT_NAME, KubeProbeHookSpec

if TYPE_CHECKING:
    from kube_probe.clients.base import CRDDefinition
    from kube_probe.controls.models import ControlHandler
    from kube_probe.models.common import ResourceHandle, ResourceKind
    from kube_probe.plugin import PluginMetadata
    from kube_probe.probe import Probe

logger = logging.getLogger(__name__)

# Entry point group name for external plugin discovery
PLUGIN_ENTRY_POINT_GROUP = "kube_probe.plugins"


class PluginManager:
    """Manages plugin discovery, registration, and lifecycle.

    Uses pluggy for hook-based plugin architecture, providing a unified
    interface for both core domain plugins and external plugins.
    """

    def __init__(self) -> None:
        """Initialize the plugin manager with a pluggy PluginManager."""
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(KubeProbeHookSpec)
        self._registered_plugins: dict[str, Any] = {}
        self._healthy_plugins: dict[str, Any] = {}

    @property
    def hook(self) -> Any:
        """Get the pluggy hook caller for invoking hooks."""
        return self._pm.hook

    @property
    def registered_plugins(self) -> dict[str, Any]:
        """Get all registered plugins by name."""
        return self._registered_plugins

    @property
    def healthy_plugins(self) -> dict[str, Any]:
        """Get plugins that passed health checks."""
        return self._healthy_plugins

    def register_plugin(self, plugin: Any, name: str | None = None) -> str:
        """Register a plugin instance.

        Args:
            plugin: Plugin instance implementing hook methods.
            name: Optional name for the plugin. If not provided,
                  will try to get from plugin metadata.

        Returns:
            The name used to register the plugin.
        """
        if name is None:
            if hasattr(plugin, "kube_probe_get_plugin_metadata"):
                name = plugin.kube_probe_get_plugin_metadata().name
            else:
                name = type(plugin).__name__

        self._pm.register(plugin, name=name)
        self._registered_plugins[name] = plugin
        logger.debug(f"Registered plugin: {name}")
        return name

    def unregister_plugin(self, name: str) -> None:
        """Unregister a plugin by name.

        Args:
            name: Name of the plugin to unregister.
        """
        if name in self._registered_plugins:
            plugin = self._registered_plugins.pop(name)
            self._pm.unregister(plugin)
            self._healthy_plugins.pop(name, None)
            logger.debug(f"Unregistered plugin: {name}")

    def load_entrypoint_plugins(self) -> int:
        """Discover and load external plugins from entry points.

        Returns:
            Number of plugins loaded.
        """
        count = self._pm.load_setuptools_entrypoints(PLUGIN_ENTRY_POINT_GROUP)

        for plugin in self._pm.get_plugins():
            name = self._pm.get_name(plugin)
            if name and name not in self._registered_plugins:
                self._registered_plugins[name] = plugin
                logger.info(f"Loaded external plugin from entry point: {name}")

        logger.info(f"Loaded {count} external plugins from entry points")
        return count

    def load_core_plugins(self) -> int:
        """Load the built-in Kubernetes control plugins.

        Returns:
            Number of plugins loaded.
        """
        from kube_probe.domains.registry import get_core_plugins

        plugins = get_core_plugins()
        for plugin in plugins:
            self.register_plugin(plugin)

        logger.info(f"Loaded {len(plugins)} core domain plugins")
        return len(plugins)

    def get_all_metadata(self) -> list[PluginMetadata]:
        """Collect metadata from all registered plugins."""
        results = self.hook.kube_probe_get_plugin_metadata()
        return [meta for meta in results if meta is not None]

    def run_health_checks(self, probe: Probe) -> dict[str, tuple[bool, str]]:
        """Run health checks on all registered plugins.

        Updates the healthy_plugins dict with plugins that pass.

        Args:
            probe: The probe whose cluster connection is checked.

        Returns:
            Dictionary mapping plugin names to (healthy, message) tuples.
        """
        results: dict[str, tuple[bool, str]] = {}
        self._healthy_plugins.clear()

        for name, plugin in self._registered_plugins.items():
            try:
                if hasattr(plugin, "kube_probe_health_check"):
                    is_healthy, message = plugin.kube_probe_health_check(probe=probe)
                else:
                    is_healthy, message = True, "No health check defined"

                results[name] = (is_healthy, message)

                if is_healthy:
                    self._healthy_plugins[name] = plugin
                    logger.info(f"Plugin {name} health check passed: {message}")
                else:
                    logger.warning(f"Plugin {name} unavailable: {message}")
            except Exception as e:
                results[name] = (False, f"Health check error: {e}")
                logger.warning(f"Plugin {name} health check failed with error: {e}")

        return results

    def _healthy_hook(self, name: str) -> Any:
        """Hook caller restricted to plugins that passed health checks."""
        unhealthy = [
            plugin
            for plugin_name, plugin in self._registered_plugins.items()
            if plugin_name not in self._healthy_plugins
        ]
        return self._pm.subset_hook_caller(name, remove_plugins=unhealthy)

    def collect_controls(self, probe: Probe) -> dict[str, ControlHandler]:
        """Collect controls from all healthy plugins.

        Returns:
            Mapping of control id to handler. When two plugins provide the
            same id, the one registered first wins and a warning is logged.
        """
        controls: dict[str, ControlHandler] = {}
        # pluggy returns results last-registered first
        results = self._healthy_hook("kube_probe_get_controls")(probe=probe)
        for contributed in reversed(results):
            for control, handler in (contributed or {}).items():
                if control in controls:
                    logger.warning(f"Control {control} provided by more than one plugin, ignoring duplicate")
                    continue
                controls[control] = handler
        return controls

    def collect_resources(self, probe: Probe) -> dict[ResourceKind, list[ResourceHandle]]:
        """Collect resource listings from all healthy plugins."""
        listings: dict[ResourceKind, list[ResourceHandle]] = {}
        for contributed in self._healthy_hook("kube_probe_list_resources")(probe=probe):
            for kind, handles in (contributed or {}).items():
                listings.setdefault(kind, []).extend(handles)
        return listings

    def get_all_crd_definitions(self) -> list[CRDDefinition]:
        """Collect CRD definitions from all plugins."""
        all_crds = []
        for crd_list in self.hook.kube_probe_get_crd_definitions():
            if crd_list:
                all_crds.extend(crd_list)
        return all_crds
