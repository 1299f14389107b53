"""Plugin registry for the built-in Kubernetes domains.

This module provides plugin classes for the core domains. Each plugin
contributes the controls of its domain and the resource listings those
controls resolve node ids against.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from kube_probe.hooks import hookimpl
from kube_probe.models.common import ResourceKind
from kube_probe.plugin import BasePlugin, PluginMetadata

if TYPE_CHECKING:
    from kube_probe.clients.base import CRDDefinition
    from kube_probe.controls.models import ControlHandler
    from kube_probe.models.common import ResourceHandle
    from kube_probe.probe import Probe


class WorkloadsPlugin(BasePlugin):
    """Plugin for pods and workload controllers.

    Provides log streaming, pod deletion, deployment scaling and describe
    for pods, services, deployments, daemon sets, stateful sets and cron
    jobs.
    """

    def __init__(self) -> None:
        super().__init__(
            PluginMetadata(
                name="workloads",
                version="1.0.0",
                description="Pod and workload controller controls",
                requires_crds=[],
            )
        )

    @hookimpl
    def kube_probe_get_controls(self, probe: Probe) -> dict[str, ControlHandler]:
        from kube_probe.domains.workloads.controls import WorkloadControls

        return WorkloadControls(probe).controls()

    @hookimpl
    def kube_probe_list_resources(self, probe: Probe) -> dict[ResourceKind, list[ResourceHandle]]:
        from kube_probe.domains.workloads.client import WorkloadClient

        client = WorkloadClient(probe.k8s)
        return {
            ResourceKind.POD: list(client.list_pods()),
            ResourceKind.SERVICE: list(client.list_services()),
            ResourceKind.DEPLOYMENT: list(client.list_deployments()),
            ResourceKind.DAEMONSET: list(client.list_daemon_sets()),
            ResourceKind.STATEFULSET: list(client.list_stateful_sets()),
            ResourceKind.CRONJOB: list(client.list_cron_jobs()),
        }

    @hookimpl
    def kube_probe_health_check(self, probe: Probe) -> tuple[bool, str]:  # noqa: ARG002
        return True, "Workloads use core Kubernetes APIs"


class StoragePlugin(BasePlugin):
    """Plugin for persistent volumes, claims and storage classes."""

    def __init__(self) -> None:
        super().__init__(
            PluginMetadata(
                name="storage",
                version="1.0.0",
                description="Describe controls for storage resources",
                requires_crds=[],
            )
        )

    @hookimpl
    def kube_probe_get_controls(self, probe: Probe) -> dict[str, ControlHandler]:
        from kube_probe.domains.storage.controls import StorageControls

        return StorageControls(probe).controls()

    @hookimpl
    def kube_probe_list_resources(self, probe: Probe) -> dict[ResourceKind, list[ResourceHandle]]:
        from kube_probe.domains.storage.client import StorageClient

        client = StorageClient(probe.k8s)
        return {
            ResourceKind.PERSISTENT_VOLUME_CLAIM: list(client.list_claims()),
            ResourceKind.PERSISTENT_VOLUME: list(client.list_volumes()),
            ResourceKind.STORAGE_CLASS: list(client.list_storage_classes()),
        }

    @hookimpl
    def kube_probe_health_check(self, probe: Probe) -> tuple[bool, str]:  # noqa: ARG002
        return True, "Storage uses core Kubernetes APIs"


class SnapshotsPlugin(BasePlugin):
    """Plugin for CSI volume snapshots.

    Requires the VolumeSnapshot CRD; on clusters without it the plugin is
    marked unavailable and its controls are not installed.
    """

    def __init__(self) -> None:
        super().__init__(
            PluginMetadata(
                name="snapshots",
                version="1.0.0",
                description="Create, clone and delete volume snapshots",
                requires_crds=["VolumeSnapshot"],
            )
        )

    @hookimpl
    def kube_probe_get_controls(self, probe: Probe) -> dict[str, ControlHandler]:
        from kube_probe.domains.snapshots.controls import SnapshotControls

        return SnapshotControls(probe).controls()

    @hookimpl
    def kube_probe_list_resources(self, probe: Probe) -> dict[ResourceKind, list[ResourceHandle]]:
        from kube_probe.domains.snapshots.client import SnapshotClient

        client = SnapshotClient(probe.k8s, probe.config)
        return {ResourceKind.VOLUME_SNAPSHOT: list(client.list_volume_snapshots())}

    @hookimpl
    def kube_probe_get_crd_definitions(self) -> list[CRDDefinition]:
        from kube_probe.domains.snapshots.crds import SnapshotCRDs

        return SnapshotCRDs.all_crds()


def get_core_plugins() -> list[BasePlugin]:
    """Return all core domain plugin instances.

    Returns:
        List of plugin instances for the built-in domains.
    """
    return [
        WorkloadsPlugin(),
        StoragePlugin(),
        SnapshotsPlugin(),
    ]
