"""Resource handles for storage: claims, volumes and storage classes."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field

from kube_probe.models.common import ResourceHandle, ResourceKind


def _storage_quantity(mapping: Any) -> str:
    """Read the 'storage' quantity from a requests/capacity mapping."""
    if not mapping:
        return ""
    return str(mapping.get("storage", ""))


class PersistentVolumeClaimHandle(ResourceHandle):
    """Cached persistent volume claim."""

    kind: ClassVar[ResourceKind] = ResourceKind.PERSISTENT_VOLUME_CLAIM

    capacity: str = Field("", description="Requested storage, e.g. '10Gi'")
    storage_class: str | None = Field(None, description="Storage class name")
    volume_name: str | None = Field(None, description="Bound volume name")

    @classmethod
    def from_k8s(cls, obj: Any) -> PersistentVolumeClaimHandle:
        """Create from Kubernetes V1PersistentVolumeClaim.

        Capacity is the requested size, which is what a snapshot of the
        claim needs to restore into.
        """
        spec = obj.spec
        requests = spec.resources.requests if spec and spec.resources else None
        return cls(
            **cls._meta_fields(obj),
            capacity=_storage_quantity(requests),
            storage_class=spec.storage_class_name if spec else None,
            volume_name=spec.volume_name if spec else None,
        )


class PersistentVolumeHandle(ResourceHandle):
    """Cached persistent volume."""

    kind: ClassVar[ResourceKind] = ResourceKind.PERSISTENT_VOLUME

    capacity: str = Field("", description="Volume capacity")
    storage_class: str | None = Field(None, description="Storage class name")

    @classmethod
    def from_k8s(cls, obj: Any) -> PersistentVolumeHandle:
        """Create from Kubernetes V1PersistentVolume."""
        spec = obj.spec
        return cls(
            **cls._meta_fields(obj),
            capacity=_storage_quantity(spec.capacity if spec else None),
            storage_class=spec.storage_class_name if spec else None,
        )


class StorageClassHandle(ResourceHandle):
    """Cached storage class."""

    kind: ClassVar[ResourceKind] = ResourceKind.STORAGE_CLASS
