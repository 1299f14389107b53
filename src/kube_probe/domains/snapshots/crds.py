"""CRD definitions for CSI volume snapshots."""

from kube_probe.clients.base import CRDDefinition


class SnapshotCRDs:
    """CSI external-snapshotter CRD definitions."""

    VOLUME_SNAPSHOT = CRDDefinition(
        group="snapshot.storage.k8s.io",
        version="v1",
        plural="volumesnapshots",
        kind="VolumeSnapshot",
    )

    @classmethod
    def all_crds(cls) -> list[CRDDefinition]:
        """Return all CRD definitions."""
        return [cls.VOLUME_SNAPSHOT]
