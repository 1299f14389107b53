"""Volume snapshot controls."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kube_probe.controls import handlers, ids
from kube_probe.controls.capture import Capture
from kube_probe.controls.models import ControlHandler, ControlRequest, ControlResponse
from kube_probe.domains.snapshots.client import SnapshotClient
from kube_probe.domains.snapshots.models import VolumeSnapshotHandle
from kube_probe.domains.storage.models import PersistentVolumeClaimHandle
from kube_probe.models.common import ResourceKind

if TYPE_CHECKING:
    from kube_probe.probe import Probe


class SnapshotControls:
    """Handler bodies for snapshot controls.

    Creating and cloning acknowledge with the control id as value;
    deleting reports the snapshot's node as removed.
    """

    def __init__(self, probe: Probe, client: SnapshotClient | None = None) -> None:
        self._probe = probe
        self._client = client or SnapshotClient(probe.k8s, probe.config)

    def create_volume_snapshot(
        self, request: ControlRequest, claim: PersistentVolumeClaimHandle
    ) -> ControlResponse:
        return handlers.mutate(
            self._probe,
            request,
            "create",
            lambda: self._client.create_volume_snapshot(
                claim.namespace or "", claim.name, claim.capacity
            ),
            ControlResponse(value=request.control),
        )

    def clone_volume_snapshot(
        self, request: ControlRequest, snapshot: VolumeSnapshotHandle
    ) -> ControlResponse:
        return handlers.mutate(
            self._probe,
            request,
            "create",
            lambda: self._client.clone_volume_snapshot(
                snapshot.namespace or "", snapshot.name, snapshot.volume_name, snapshot.capacity
            ),
            ControlResponse(value=request.control),
        )

    def delete_volume_snapshot(
        self, request: ControlRequest, snapshot: VolumeSnapshotHandle
    ) -> ControlResponse:
        return handlers.mutate(
            self._probe,
            request,
            "delete",
            lambda: self._client.delete_volume_snapshot(snapshot.namespace or "", snapshot.name),
            ControlResponse(removed_node=request.node_id),
        )

    def controls(self) -> dict[str, ControlHandler]:
        """Bind every snapshot control to its capture adapter."""
        walk = self._probe.cache.walk
        capture_claim = Capture[PersistentVolumeClaimHandle](ResourceKind.PERSISTENT_VOLUME_CLAIM, walk)
        capture_snapshot = Capture[VolumeSnapshotHandle](ResourceKind.VOLUME_SNAPSHOT, walk)

        return {
            ids.CREATE_VOLUME_SNAPSHOT: capture_claim(self.create_volume_snapshot),
            ids.CLONE_VOLUME_SNAPSHOT: capture_snapshot(self.clone_volume_snapshot),
            ids.DELETE_VOLUME_SNAPSHOT: capture_snapshot(self.delete_volume_snapshot),
        }
