"""Snapshots domain - CSI volume snapshots."""

from kube_probe.domains.snapshots.client import SnapshotClient
from kube_probe.domains.snapshots.crds import SnapshotCRDs
from kube_probe.domains.snapshots.models import VolumeSnapshotHandle

__all__ = [
    "SnapshotClient",
    "SnapshotCRDs",
    "VolumeSnapshotHandle",
]
