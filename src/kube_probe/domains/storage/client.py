"""Storage client operations: claims, volumes and storage classes."""

from typing import TYPE_CHECKING

from kube_probe.domains.storage.models import (
    PersistentVolumeClaimHandle,
    PersistentVolumeHandle,
    StorageClassHandle,
)

if TYPE_CHECKING:
    from kube_probe.clients.base import K8sClient


class StorageClient:
    """Client for storage listings."""

    def __init__(self, k8s: "K8sClient") -> None:
        self._k8s = k8s

    def list_claims(self) -> list[PersistentVolumeClaimHandle]:
        """List persistent volume claims in all namespaces."""
        pvcs = self._k8s.core_v1.list_persistent_volume_claim_for_all_namespaces()
        return [PersistentVolumeClaimHandle.from_k8s(p) for p in pvcs.items]

    def list_volumes(self) -> list[PersistentVolumeHandle]:
        """List persistent volumes."""
        pvs = self._k8s.core_v1.list_persistent_volume()
        return [PersistentVolumeHandle.from_k8s(p) for p in pvs.items]

    def list_storage_classes(self) -> list[StorageClassHandle]:
        """List storage classes."""
        classes = self._k8s.storage_v1.list_storage_class()
        return [StorageClassHandle.from_k8s(c) for c in classes.items]
