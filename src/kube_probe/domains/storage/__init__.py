"""Storage domain - persistent volumes, claims and storage classes."""

from kube_probe.domains.storage.client import StorageClient
from kube_probe.domains.storage.models import (
    PersistentVolumeClaimHandle,
    PersistentVolumeHandle,
    StorageClassHandle,
)

__all__ = [
    "StorageClient",
    "PersistentVolumeClaimHandle",
    "PersistentVolumeHandle",
    "StorageClassHandle",
]
