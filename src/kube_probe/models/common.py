"""Common models shared across the control dispatcher."""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field


class ResourceKind(str, Enum):
    """Resource kinds addressable by a node identifier.

    The enum value doubles as the tag embedded in encoded node ids.
    """

    POD = "pod"
    SERVICE = "service"
    DEPLOYMENT = "deployment"
    DAEMONSET = "daemonset"
    STATEFULSET = "statefulset"
    CRONJOB = "cronjob"
    PERSISTENT_VOLUME = "persistent_volume"
    PERSISTENT_VOLUME_CLAIM = "persistent_volume_claim"
    STORAGE_CLASS = "storage_class"
    VOLUME_SNAPSHOT = "volume_snapshot"

    @property
    def k8s_kind(self) -> str:
        """Kubernetes kind name, e.g. 'PersistentVolumeClaim'."""
        return _K8S_KINDS[self][0]

    @property
    def api_version(self) -> str:
        """Kubernetes apiVersion serving this kind."""
        return _K8S_KINDS[self][1]

    @property
    def namespaced(self) -> bool:
        """Whether resources of this kind live in a namespace."""
        return self not in _CLUSTER_SCOPED

    @property
    def display_name(self) -> str:
        """Human-readable name used in error messages."""
        return _DISPLAY_NAMES[self]


_K8S_KINDS: dict[ResourceKind, tuple[str, str]] = {
    ResourceKind.POD: ("Pod", "v1"),
    ResourceKind.SERVICE: ("Service", "v1"),
    ResourceKind.DEPLOYMENT: ("Deployment", "apps/v1"),
    ResourceKind.DAEMONSET: ("DaemonSet", "apps/v1"),
    ResourceKind.STATEFULSET: ("StatefulSet", "apps/v1"),
    ResourceKind.CRONJOB: ("CronJob", "batch/v1"),
    ResourceKind.PERSISTENT_VOLUME: ("PersistentVolume", "v1"),
    ResourceKind.PERSISTENT_VOLUME_CLAIM: ("PersistentVolumeClaim", "v1"),
    ResourceKind.STORAGE_CLASS: ("StorageClass", "storage.k8s.io/v1"),
    ResourceKind.VOLUME_SNAPSHOT: ("VolumeSnapshot", "snapshot.storage.k8s.io/v1"),
}

_CLUSTER_SCOPED = frozenset(
    {
        ResourceKind.PERSISTENT_VOLUME,
        ResourceKind.STORAGE_CLASS,
    }
)

_DISPLAY_NAMES: dict[ResourceKind, str] = {
    ResourceKind.POD: "Pod",
    ResourceKind.SERVICE: "Service",
    ResourceKind.DEPLOYMENT: "Deployment",
    ResourceKind.DAEMONSET: "Daemon Set",
    ResourceKind.STATEFULSET: "Stateful Set",
    ResourceKind.CRONJOB: "Cron Job",
    ResourceKind.PERSISTENT_VOLUME: "Persistent volume",
    ResourceKind.PERSISTENT_VOLUME_CLAIM: "Persistent volume claim",
    ResourceKind.STORAGE_CLASS: "StorageClass",
    ResourceKind.VOLUME_SNAPSHOT: "Volume snapshot",
}


class ResourceHandle(BaseModel):
    """Transient view of one cached cluster resource.

    Subclasses set ``kind`` and add the accessors their controls need.
    Handles are frozen: the dispatcher borrows them for a single request
    and never mutates them.
    """

    model_config = ConfigDict(frozen=True)

    kind: ClassVar[ResourceKind]

    uid: str = Field(..., description="Kubernetes UID")
    name: str = Field(..., description="Resource name")
    namespace: str | None = Field(None, description="Resource namespace")

    @property
    def node_id(self) -> str:
        """Topology node id addressing this resource."""
        from kube_probe.utils.node_id import encode

        return encode(self.kind, self.namespace, self.uid)

    @classmethod
    def _meta_fields(cls, obj: Any) -> dict[str, Any]:
        """Extract uid/name/namespace from a Kubernetes object."""
        metadata = obj.metadata
        return {
            "uid": metadata.uid,
            "name": metadata.name,
            "namespace": getattr(metadata, "namespace", None) if cls.kind.namespaced else None,
        }

    @classmethod
    def from_k8s(cls, obj: Any) -> ResourceHandle:
        """Create a handle from a Kubernetes API object."""
        return cls(**cls._meta_fields(obj))


def get_field(obj: Any, *path: str, default: Any = None) -> Any:
    """Walk a path through either typed API objects or plain dicts.

    Custom objects come back from the API as dicts with camelCase keys,
    while typed models expose snake_case attributes. Each path element is
    tried as given against dicts and as an attribute otherwise.
    """
    current = obj
    for key in path:
        if current is None:
            return default
        if isinstance(current, dict):
            current = current.get(key)
        else:
            current = getattr(current, key, None)
    return default if current is None else current
