"""Controls for pods and workload controllers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kube_probe.controls import handlers, ids
from kube_probe.controls.capture import Capture
from kube_probe.controls.models import ControlHandler, ControlRequest, ControlResponse
from kube_probe.domains.workloads.client import WorkloadClient
from kube_probe.domains.workloads.models import (
    CronJobHandle,
    DaemonSetHandle,
    DeploymentHandle,
    PodHandle,
    ServiceHandle,
    StatefulSetHandle,
)
from kube_probe.models.common import ResourceHandle, ResourceKind

if TYPE_CHECKING:
    from kube_probe.probe import Probe


class WorkloadControls:
    """Handler bodies for workload controls.

    Each body receives the request and the handle its capture adapter
    resolved from the cache.
    """

    def __init__(self, probe: Probe, client: WorkloadClient | None = None) -> None:
        self._probe = probe
        self._client = client or WorkloadClient(probe.k8s)

    def get_logs(self, request: ControlRequest, pod: PodHandle) -> ControlResponse:
        """Stream the logs of every container of a pod."""
        return handlers.open_pipe(
            self._probe,
            request,
            lambda: self._client.get_logs(pod.namespace or "", pod.name, pod.container_names),
        )

    def delete_pod(self, request: ControlRequest, pod: PodHandle) -> ControlResponse:
        return handlers.mutate(
            self._probe,
            request,
            "delete",
            lambda: self._client.delete_pod(pod.namespace or "", pod.name),
            ControlResponse(removed_node=request.node_id),
        )

    def scale_up(self, request: ControlRequest, deployment: DeploymentHandle) -> ControlResponse:
        return handlers.mutate(
            self._probe,
            request,
            "scale",
            lambda: self._client.scale_up(
                ResourceKind.DEPLOYMENT, deployment.namespace or "", deployment.name
            ),
            ControlResponse(),
        )

    def scale_down(self, request: ControlRequest, deployment: DeploymentHandle) -> ControlResponse:
        return handlers.mutate(
            self._probe,
            request,
            "scale",
            lambda: self._client.scale_down(
                ResourceKind.DEPLOYMENT, deployment.namespace or "", deployment.name
            ),
            ControlResponse(),
        )

    def describe(self, request: ControlRequest, resource: ResourceHandle) -> ControlResponse:
        return handlers.describe(self._probe, request, resource)

    def controls(self) -> dict[str, ControlHandler]:
        """Bind every workload control to its capture adapter."""
        walk = self._probe.cache.walk
        capture_pod = Capture[PodHandle](ResourceKind.POD, walk)
        capture_deployment = Capture[DeploymentHandle](ResourceKind.DEPLOYMENT, walk)
        capture_service = Capture[ServiceHandle](ResourceKind.SERVICE, walk)
        capture_daemon_set = Capture[DaemonSetHandle](ResourceKind.DAEMONSET, walk)
        capture_stateful_set = Capture[StatefulSetHandle](ResourceKind.STATEFULSET, walk)
        capture_cron_job = Capture[CronJobHandle](ResourceKind.CRONJOB, walk)

        return {
            ids.GET_LOGS: capture_pod(self.get_logs),
            ids.DELETE_POD: capture_pod(self.delete_pod),
            ids.DESCRIBE_POD: capture_pod(self.describe),
            ids.SCALE_UP: capture_deployment(self.scale_up),
            ids.SCALE_DOWN: capture_deployment(self.scale_down),
            ids.DESCRIBE_DEPLOYMENT: capture_deployment(self.describe),
            ids.DESCRIBE_SERVICE: capture_service(self.describe),
            ids.DESCRIBE_DAEMONSET: capture_daemon_set(self.describe),
            ids.DESCRIBE_STATEFULSET: capture_stateful_set(self.describe),
            ids.DESCRIBE_CRONJOB: capture_cron_job(self.describe),
        }
