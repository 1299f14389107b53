"""Pluggy hook specifications for kube-probe plugins.

Plugins contribute controls, resource listings for the cache, CRD
requirements and health checks through these hooks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from kube_probe.clients.base import CRDDefinition
    from kube_probe.controls.models import ControlHandler
    from kube_probe.models.common import ResourceHandle, ResourceKind
    from kube_probe.plugin import PluginMetadata
    from kube_probe.probe import Probe

PROJECT_NAME = "kube_probe"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class KubeProbeHookSpec:
    """Hook specifications implemented by kube-probe plugins."""

    @hookspec
    def kube_probe_get_plugin_metadata(self) -> PluginMetadata:  # type: ignore[empty-body]
        """Return metadata describing the plugin."""

    @hookspec
    def kube_probe_get_controls(self, probe: Probe) -> dict[str, ControlHandler]:  # type: ignore[empty-body]
        """Return the controls this plugin provides, keyed by control id.

        Handlers are installed in the probe's registry in one batch at
        start and removed in one batch at stop.
        """

    @hookspec
    def kube_probe_list_resources(
        self, probe: Probe
    ) -> dict[ResourceKind, list[ResourceHandle]]:  # type: ignore[empty-body]
        """List the current resources of the kinds this plugin's controls target."""

    @hookspec
    def kube_probe_get_crd_definitions(self) -> list[CRDDefinition]:  # type: ignore[empty-body]
        """Return CRD definitions this plugin uses."""

    @hookspec
    def kube_probe_health_check(self, probe: Probe) -> tuple[bool, str]:  # type: ignore[empty-body]
        """Check whether the plugin can operate against the connected cluster."""
