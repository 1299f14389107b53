"""Resource handle for volume snapshots."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field

from kube_probe.models.common import ResourceHandle, ResourceKind, get_field

CAPACITY_ANNOTATION = "capacity"
"""Annotation recording the source claim's size on snapshots we create."""


class VolumeSnapshotHandle(ResourceHandle):
    """Cached volume snapshot.

    ``volume_name`` is the claim the snapshot was taken from; clones are
    named after it.
    """

    kind: ClassVar[ResourceKind] = ResourceKind.VOLUME_SNAPSHOT

    volume_name: str = Field("", description="Source persistent volume claim")
    capacity: str = Field("", description="Size needed to restore the snapshot")
    ready: bool = Field(False, description="Snapshot is ready to use")

    @classmethod
    def from_k8s(cls, obj: Any) -> VolumeSnapshotHandle:
        """Create from a VolumeSnapshot custom object (a dict).

        Capacity comes from status.restoreSize once the snapshot is bound,
        falling back to the annotation set when the snapshot was created.
        """
        annotations = get_field(obj, "metadata", "annotations", default={})
        capacity = get_field(obj, "status", "restoreSize") or annotations.get(CAPACITY_ANNOTATION, "")
        return cls(
            uid=get_field(obj, "metadata", "uid"),
            name=get_field(obj, "metadata", "name"),
            namespace=get_field(obj, "metadata", "namespace"),
            volume_name=get_field(obj, "spec", "source", "persistentVolumeClaimName", default=""),
            capacity=str(capacity),
            ready=bool(get_field(obj, "status", "readyToUse", default=False)),
        )
