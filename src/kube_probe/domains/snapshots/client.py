"""Volume snapshot client operations."""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from kube_probe.domains.snapshots.crds import SnapshotCRDs
from kube_probe.domains.snapshots.models import CAPACITY_ANNOTATION, VolumeSnapshotHandle

if TYPE_CHECKING:
    from kube_probe.clients.base import K8sClient
    from kube_probe.config import ProbeConfig

logger = logging.getLogger(__name__)


class SnapshotClient:
    """Client for creating, cloning and deleting CSI volume snapshots."""

    def __init__(self, k8s: K8sClient, config: ProbeConfig) -> None:
        self._k8s = k8s
        self._config = config

    def list_volume_snapshots(self) -> list[VolumeSnapshotHandle]:
        """List volume snapshots in all namespaces."""
        items = self._k8s.list_custom_objects(SnapshotCRDs.VOLUME_SNAPSHOT)
        return [VolumeSnapshotHandle.from_k8s(item) for item in items]

    def create_volume_snapshot(self, namespace: str, claim_name: str, capacity: str | None) -> str:
        """Snapshot a persistent volume claim.

        Args:
            namespace: Namespace of the claim.
            claim_name: Claim to snapshot.
            capacity: Claim size, recorded on the snapshot for later clones
                when known.

        Returns:
            Name of the created VolumeSnapshot.
        """
        name = f"snapshot-{datetime.now(timezone.utc):%Y%m%d%H%M%S}-{secrets.token_hex(2)}"
        spec: dict[str, Any] = {"source": {"persistentVolumeClaimName": claim_name}}
        if self._config.volume_snapshot_class:
            spec["volumeSnapshotClassName"] = self._config.volume_snapshot_class
        metadata: dict[str, Any] = {"name": name, "namespace": namespace}
        if capacity:
            metadata["annotations"] = {CAPACITY_ANNOTATION: capacity}

        body = {
            "apiVersion": SnapshotCRDs.VOLUME_SNAPSHOT.api_version,
            "kind": SnapshotCRDs.VOLUME_SNAPSHOT.kind,
            "metadata": metadata,
            "spec": spec,
        }
        self._k8s.create_custom_object(SnapshotCRDs.VOLUME_SNAPSHOT, namespace, body)
        logger.info(f"Created volume snapshot {namespace}/{name} of claim {claim_name}")
        return name

    def clone_volume_snapshot(
        self,
        namespace: str,
        snapshot_name: str,
        claim_name: str | None,
        capacity: str | None,
    ) -> str:
        """Restore a snapshot into a new persistent volume claim.

        Args:
            namespace: Namespace of the snapshot.
            snapshot_name: Snapshot to restore.
            claim_name: Claim the snapshot was taken from; the clone is
                named after it.
            capacity: Storage to request for the clone.

        Returns:
            Name of the created claim.
        """
        if not capacity:
            raise ValueError(f"Volume snapshot {namespace}/{snapshot_name} has no known capacity")

        base = claim_name or snapshot_name
        name = f"clone-{base}-{secrets.token_hex(2)}"
        spec: dict[str, Any] = {
            "accessModes": ["ReadWriteOnce"],
            "resources": {"requests": {"storage": capacity}},
            "dataSource": {
                "apiGroup": SnapshotCRDs.VOLUME_SNAPSHOT.group,
                "kind": SnapshotCRDs.VOLUME_SNAPSHOT.kind,
                "name": snapshot_name,
            },
        }
        if self._config.clone_storage_class:
            spec["storageClassName"] = self._config.clone_storage_class

        body = {
            "apiVersion": "v1",
            "kind": "PersistentVolumeClaim",
            "metadata": {"name": name, "namespace": namespace},
            "spec": spec,
        }
        self._k8s.core_v1.create_namespaced_persistent_volume_claim(namespace=namespace, body=body)
        logger.info(f"Cloned volume snapshot {namespace}/{snapshot_name} into claim {name}")
        return name

    def delete_volume_snapshot(self, namespace: str, name: str) -> None:
        """Delete a volume snapshot."""
        self._k8s.delete_custom_object(SnapshotCRDs.VOLUME_SNAPSHOT, name, namespace)
        logger.info(f"Deleted volume snapshot {namespace}/{name}")
