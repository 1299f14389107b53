"""Workload client operations: pods, controllers and their logs."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from kube_probe.domains.workloads.models import (
    CronJobHandle,
    DaemonSetHandle,
    DeploymentHandle,
    PodHandle,
    ServiceHandle,
    StatefulSetHandle,
)
from kube_probe.models.common import ResourceKind
from kube_probe.utils.errors import ProbeError

if TYPE_CHECKING:
    from kube_probe.clients.base import K8sClient
    from kube_probe.clients.streams import MergedLogStream, ResponseStream

logger = logging.getLogger(__name__)


class WorkloadClient:
    """Client for pod and workload controller operations."""

    def __init__(self, k8s: K8sClient) -> None:
        self._k8s = k8s

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------

    def list_pods(self) -> list[PodHandle]:
        """List pods in all namespaces."""
        pods = self._k8s.core_v1.list_pod_for_all_namespaces()
        return [PodHandle.from_k8s(p) for p in pods.items]

    def list_services(self) -> list[ServiceHandle]:
        """List services in all namespaces."""
        services = self._k8s.core_v1.list_service_for_all_namespaces()
        return [ServiceHandle.from_k8s(s) for s in services.items]

    def list_deployments(self) -> list[DeploymentHandle]:
        """List deployments in all namespaces."""
        deployments = self._k8s.apps_v1.list_deployment_for_all_namespaces()
        return [DeploymentHandle.from_k8s(d) for d in deployments.items]

    def list_daemon_sets(self) -> list[DaemonSetHandle]:
        """List daemon sets in all namespaces."""
        daemon_sets = self._k8s.apps_v1.list_daemon_set_for_all_namespaces()
        return [DaemonSetHandle.from_k8s(d) for d in daemon_sets.items]

    def list_stateful_sets(self) -> list[StatefulSetHandle]:
        """List stateful sets in all namespaces."""
        stateful_sets = self._k8s.apps_v1.list_stateful_set_for_all_namespaces()
        return [StatefulSetHandle.from_k8s(s) for s in stateful_sets.items]

    def list_cron_jobs(self) -> list[CronJobHandle]:
        """List cron jobs in all namespaces."""
        cron_jobs = self._k8s.batch_v1.list_cron_job_for_all_namespaces()
        return [CronJobHandle.from_k8s(c) for c in cron_jobs.items]

    # -------------------------------------------------------------------------
    # Controls
    # -------------------------------------------------------------------------

    def delete_pod(self, namespace: str, name: str) -> None:
        """Delete a pod."""
        self._k8s.core_v1.delete_namespaced_pod(name=name, namespace=namespace)
        logger.info(f"Deleted pod {namespace}/{name}")

    def scale_up(self, kind: ResourceKind, namespace: str, name: str) -> int:
        """Add one replica to a deployment or stateful set.

        Returns:
            The new replica count.
        """
        return self._scale(kind, namespace, name, 1)

    def scale_down(self, kind: ResourceKind, namespace: str, name: str) -> int:
        """Remove one replica from a deployment or stateful set.

        Returns:
            The new replica count.

        Raises:
            ProbeError: If the workload is already scaled to zero.
        """
        return self._scale(kind, namespace, name, -1)

    def _scale(self, kind: ResourceKind, namespace: str, name: str, delta: int) -> int:
        read, patch = self._scale_api(kind)
        scale = read(name=name, namespace=namespace)
        current = (scale.spec.replicas if scale.spec else None) or 0
        replicas = current + delta
        if replicas < 0:
            raise ProbeError(f"{kind.k8s_kind} {namespace}/{name} is already scaled to 0")

        patch(name=name, namespace=namespace, body={"spec": {"replicas": replicas}})
        logger.info(f"Scaled {kind.k8s_kind} {namespace}/{name} from {current} to {replicas}")
        return replicas

    def _scale_api(self, kind: ResourceKind) -> tuple[Any, Any]:
        apps = self._k8s.apps_v1
        if kind == ResourceKind.DEPLOYMENT:
            return apps.read_namespaced_deployment_scale, apps.patch_namespaced_deployment_scale
        if kind == ResourceKind.STATEFULSET:
            return apps.read_namespaced_stateful_set_scale, apps.patch_namespaced_stateful_set_scale
        raise ProbeError(f"Scaling {kind.k8s_kind} is not supported")

    def get_logs(
        self, namespace: str, pod: str, containers: list[str]
    ) -> ResponseStream | MergedLogStream:
        """Open a log stream over the given containers of a pod."""
        stream = self._k8s.stream_pod_logs(namespace, pod, containers)
        logger.debug(f"Opened log stream for pod {namespace}/{pod} containers {containers}")
        return stream
