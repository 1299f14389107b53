"""Plugin interface for kube-probe control sets.

This module defines the plugin base class and metadata that all kube-probe
plugins use to integrate with the probe via pluggy hooks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from kube_probe.hooks import hookimpl

if TYPE_CHECKING:
    from kube_probe.clients.base import CRDDefinition
    from kube_probe.controls.models import ControlHandler
    from kube_probe.models.common import ResourceHandle, ResourceKind
    from kube_probe.probe import Probe


@dataclass
class PluginMetadata:
    """Metadata describing a kube-probe plugin.

    Each plugin must provide this metadata to identify itself and
    declare its requirements.
    """

    name: str
    """Unique plugin name, e.g., 'workloads', 'snapshots'."""

    version: str
    """Plugin version following semver, e.g., '1.0.0'."""

    description: str
    """Human-readable description of what this plugin provides."""

    requires_crds: list[str] = field(default_factory=list)
    """List of CRD kinds this plugin requires to function.

    If any of these CRDs are not available in the cluster, the plugin is
    marked unavailable and its controls are not registered, but the probe
    keeps running with the other plugins.
    """


class BasePlugin:
    """Base implementation of a kube-probe plugin with common functionality.

    Control set plugins extend this class to get default implementations
    of hook methods. All hook methods are decorated with @hookimpl to
    register them with pluggy.

    Example entry point in pyproject.toml for external plugins:
        [project.entry-points."kube_probe.plugins"]
        my_plugin = "my_package.plugin:MyPlugin"
    """

    def __init__(self, metadata: PluginMetadata) -> None:
        """Initialize the plugin with metadata.

        Args:
            metadata: Plugin metadata.
        """
        self._metadata = metadata

    @hookimpl
    def kube_probe_get_plugin_metadata(self) -> PluginMetadata:
        """Return plugin metadata."""
        return self._metadata

    @hookimpl
    def kube_probe_get_controls(self, probe: Probe) -> dict[str, ControlHandler]:
        """Return controls. Override in subclass."""
        return {}

    @hookimpl
    def kube_probe_list_resources(self, probe: Probe) -> dict[ResourceKind, list[ResourceHandle]]:
        """List resources for the cache. Override in subclass."""
        return {}

    @hookimpl
    def kube_probe_get_crd_definitions(self) -> list[CRDDefinition]:
        """Return CRD definitions. Override in subclass."""
        return []

    @hookimpl
    def kube_probe_health_check(self, probe: Probe) -> tuple[bool, str]:
        """Check plugin health by verifying required CRDs are available.

        Default implementation checks that all CRDs listed in
        metadata.requires_crds are served by the cluster.
        """
        if not self._metadata.requires_crds:
            return True, "No CRD requirements"

        crd_defs = self.kube_probe_get_crd_definitions()
        crd_map = {crd.kind: crd for crd in crd_defs}

        missing_crds = []
        for crd_kind in self._metadata.requires_crds:
            if crd_kind not in crd_map:
                missing_crds.append(crd_kind)
                continue

            try:
                probe.k8s.get_resource(crd_map[crd_kind])
            except Exception:
                missing_crds.append(crd_kind)

        if missing_crds:
            return False, f"Missing CRDs: {', '.join(missing_crds)}"

        return True, "All required CRDs available"
