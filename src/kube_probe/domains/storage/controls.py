"""Describe controls for storage resources."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kube_probe.controls import handlers, ids
from kube_probe.controls.capture import Capture
from kube_probe.controls.models import ControlHandler, ControlRequest, ControlResponse
from kube_probe.domains.storage.models import (
    PersistentVolumeClaimHandle,
    PersistentVolumeHandle,
    StorageClassHandle,
)
from kube_probe.models.common import ResourceHandle, ResourceKind

if TYPE_CHECKING:
    from kube_probe.probe import Probe


class StorageControls:
    """Handler bodies for storage controls."""

    def __init__(self, probe: Probe) -> None:
        self._probe = probe

    def describe(self, request: ControlRequest, resource: ResourceHandle) -> ControlResponse:
        return handlers.describe(self._probe, request, resource)

    def controls(self) -> dict[str, ControlHandler]:
        """Bind every storage control to its capture adapter."""
        walk = self._probe.cache.walk
        capture_claim = Capture[PersistentVolumeClaimHandle](ResourceKind.PERSISTENT_VOLUME_CLAIM, walk)
        capture_volume = Capture[PersistentVolumeHandle](ResourceKind.PERSISTENT_VOLUME, walk)
        capture_storage_class = Capture[StorageClassHandle](ResourceKind.STORAGE_CLASS, walk)

        return {
            ids.DESCRIBE_PVC: capture_claim(self.describe),
            ids.DESCRIBE_PV: capture_volume(self.describe),
            ids.DESCRIBE_STORAGE_CLASS: capture_storage_class(self.describe),
        }
