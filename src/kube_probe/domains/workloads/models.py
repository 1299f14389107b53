"""Resource handles for workloads (pods, services and controllers)."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field

from kube_probe.models.common import ResourceHandle, ResourceKind


class PodHandle(ResourceHandle):
    """Cached pod."""

    kind: ClassVar[ResourceKind] = ResourceKind.POD

    container_names: list[str] = Field(default_factory=list, description="Container names")

    @classmethod
    def from_k8s(cls, obj: Any) -> PodHandle:
        """Create from Kubernetes V1Pod."""
        spec = obj.spec
        containers = spec.containers if spec and spec.containers else []
        return cls(
            **cls._meta_fields(obj),
            container_names=[c.name for c in containers],
        )


class ServiceHandle(ResourceHandle):
    """Cached service."""

    kind: ClassVar[ResourceKind] = ResourceKind.SERVICE


class DeploymentHandle(ResourceHandle):
    """Cached deployment."""

    kind: ClassVar[ResourceKind] = ResourceKind.DEPLOYMENT

    replicas: int | None = Field(None, description="Desired replicas")

    @classmethod
    def from_k8s(cls, obj: Any) -> DeploymentHandle:
        """Create from Kubernetes V1Deployment."""
        return cls(
            **cls._meta_fields(obj),
            replicas=obj.spec.replicas if obj.spec else None,
        )


class DaemonSetHandle(ResourceHandle):
    """Cached daemon set."""

    kind: ClassVar[ResourceKind] = ResourceKind.DAEMONSET


class StatefulSetHandle(ResourceHandle):
    """Cached stateful set."""

    kind: ClassVar[ResourceKind] = ResourceKind.STATEFULSET

    replicas: int | None = Field(None, description="Desired replicas")

    @classmethod
    def from_k8s(cls, obj: Any) -> StatefulSetHandle:
        """Create from Kubernetes V1StatefulSet."""
        return cls(
            **cls._meta_fields(obj),
            replicas=obj.spec.replicas if obj.spec else None,
        )


class CronJobHandle(ResourceHandle):
    """Cached cron job."""

    kind: ClassVar[ResourceKind] = ResourceKind.CRONJOB
