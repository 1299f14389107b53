"""Tests for workload controls."""

import io
from unittest.mock import MagicMock

import pytest
from conftest import APP_ID

from kube_probe.controls import ids
from kube_probe.controls.models import ControlRequest, ControlResponse
from kube_probe.domains.workloads.controls import WorkloadControls
from kube_probe.domains.workloads.models import DeploymentHandle, PodHandle, ServiceHandle
from kube_probe.models.common import ResourceKind
from kube_probe.probe import Probe
from kube_probe.utils.errors import ProbeError


def _request(control: str, node_id: str) -> ControlRequest:
    return ControlRequest(app_id=APP_ID, node_id=node_id, control=control)


def _install(probe: Probe) -> None:
    probe.registry.batch(None, WorkloadControls(probe).controls())
    probe.cache.update(
        {
            ResourceKind.POD: [
                PodHandle(uid="abc", name="foo", namespace="ns1", container_names=["app"])
            ],
            ResourceKind.DEPLOYMENT: [
                DeploymentHandle(uid="dep-1", name="web", namespace="ns1", replicas=2)
            ],
            ResourceKind.SERVICE: [ServiceHandle(uid="svc-1", name="frontend", namespace="ns1")],
        }
    )


@pytest.fixture
def workload_probe(probe: Probe) -> Probe:
    """Probe with workload controls installed and a populated cache."""
    _install(probe)
    return probe


class TestWorkloadControls:
    """Tests for the workload control set."""

    def test_control_ids(self, probe: Probe) -> None:
        """The workload set binds logs, delete, scaling and describe controls."""
        controls = WorkloadControls(probe).controls()

        assert set(controls) == {
            ids.GET_LOGS,
            ids.DELETE_POD,
            ids.SCALE_UP,
            ids.SCALE_DOWN,
            ids.DESCRIBE_POD,
            ids.DESCRIBE_SERVICE,
            ids.DESCRIBE_DEPLOYMENT,
            ids.DESCRIBE_DAEMONSET,
            ids.DESCRIBE_STATEFULSET,
            ids.DESCRIBE_CRONJOB,
        }


class TestDeletePod:
    """Tests for the delete pod control."""

    def test_delete_pod(self, workload_probe: Probe, mock_k8s: MagicMock) -> None:
        """Deleting a cached pod reports its node as removed."""
        response = workload_probe.dispatch(_request(ids.DELETE_POD, "ns1/abc;<pod>"))

        assert response == ControlResponse(removed_node="ns1/abc;<pod>")
        mock_k8s.core_v1.delete_namespaced_pod.assert_called_once_with(name="foo", namespace="ns1")

    def test_delete_unknown_pod(self, workload_probe: Probe, mock_k8s: MagicMock) -> None:
        """A pod missing from the cache is not found and nothing is deleted."""
        response = workload_probe.dispatch(_request(ids.DELETE_POD, "ns1/zzz;<pod>"))

        assert response.error == "Pod not found: zzz"
        mock_k8s.core_v1.delete_namespaced_pod.assert_not_called()

    def test_delete_failure(self, workload_probe: Probe, mock_k8s: MagicMock) -> None:
        """A client failure is returned verbatim."""
        mock_k8s.core_v1.delete_namespaced_pod.side_effect = ProbeError("pods is forbidden")

        response = workload_probe.dispatch(_request(ids.DELETE_POD, "ns1/abc;<pod>"))

        assert response.error == "pods is forbidden"

    def test_delete_refused_in_read_only_mode(
        self, read_only_probe: Probe, mock_k8s: MagicMock
    ) -> None:
        """Read-only mode refuses deletion without calling the cluster."""
        _install(read_only_probe)

        response = read_only_probe.dispatch(_request(ids.DELETE_POD, "ns1/abc;<pod>"))

        assert "read-only mode" in (response.error or "")
        mock_k8s.core_v1.delete_namespaced_pod.assert_not_called()


class TestGetLogs:
    """Tests for the get logs control."""

    def test_get_logs_pipe_yields_stream_bytes(
        self, workload_probe: Probe, mock_k8s: MagicMock
    ) -> None:
        """The returned pipe yields exactly the log stream's bytes."""
        mock_k8s.stream_pod_logs.return_value = io.BytesIO(b"line1\nline2\n")

        response = workload_probe.dispatch(_request(ids.GET_LOGS, "ns1/abc;<pod>"))

        assert response.pipe is not None
        pipe = workload_probe.pipes.get(response.pipe)
        assert pipe is not None
        assert pipe.read() == b"line1\nline2\n"
        assert pipe.read() == b""
        assert pipe.closed
        mock_k8s.stream_pod_logs.assert_called_once_with("ns1", "foo", ["app"])

    def test_get_logs_stream_failure(self, workload_probe: Probe, mock_k8s: MagicMock) -> None:
        """A failure opening the log stream is an error response."""
        mock_k8s.stream_pod_logs.side_effect = ProbeError("container is waiting to start")

        response = workload_probe.dispatch(_request(ids.GET_LOGS, "ns1/abc;<pod>"))

        assert response.error == "container is waiting to start"

    def test_get_logs_unknown_session_closes_stream(
        self, workload_probe: Probe, mock_k8s: MagicMock
    ) -> None:
        """If the pipe cannot be registered, the log stream is closed."""
        stream = io.BytesIO(b"line1\n")
        mock_k8s.stream_pod_logs.return_value = stream

        response = workload_probe.dispatch(
            ControlRequest(app_id="gone", node_id="ns1/abc;<pod>", control=ids.GET_LOGS)
        )

        assert response.is_error
        assert stream.closed

    def test_get_logs_allowed_in_read_only_mode(
        self, read_only_probe: Probe, mock_k8s: MagicMock
    ) -> None:
        """Streaming logs is allowed in read-only mode."""
        _install(read_only_probe)
        mock_k8s.stream_pod_logs.return_value = io.BytesIO(b"line1\n")

        response = read_only_probe.dispatch(_request(ids.GET_LOGS, "ns1/abc;<pod>"))

        assert response.pipe is not None


class TestScale:
    """Tests for the scale controls."""

    def test_scale_up(self, workload_probe: Probe, mock_k8s: MagicMock) -> None:
        """Scaling up adds one replica and returns an empty response."""
        mock_k8s.apps_v1.read_namespaced_deployment_scale.return_value.spec.replicas = 2

        response = workload_probe.dispatch(_request(ids.SCALE_UP, "ns1/dep-1;<deployment>"))

        assert response == ControlResponse()
        mock_k8s.apps_v1.patch_namespaced_deployment_scale.assert_called_once_with(
            name="web", namespace="ns1", body={"spec": {"replicas": 3}}
        )

    def test_scale_down(self, workload_probe: Probe, mock_k8s: MagicMock) -> None:
        """Scaling down removes one replica."""
        mock_k8s.apps_v1.read_namespaced_deployment_scale.return_value.spec.replicas = 2

        response = workload_probe.dispatch(_request(ids.SCALE_DOWN, "dep-1;<deployment>"))

        assert response == ControlResponse()
        mock_k8s.apps_v1.patch_namespaced_deployment_scale.assert_called_once_with(
            name="web", namespace="ns1", body={"spec": {"replicas": 1}}
        )

    def test_scale_down_at_zero(self, workload_probe: Probe, mock_k8s: MagicMock) -> None:
        """Scaling below zero replicas is an error."""
        mock_k8s.apps_v1.read_namespaced_deployment_scale.return_value.spec.replicas = 0

        response = workload_probe.dispatch(_request(ids.SCALE_DOWN, "ns1/dep-1;<deployment>"))

        assert response.error == "Deployment ns1/web is already scaled to 0"
        mock_k8s.apps_v1.patch_namespaced_deployment_scale.assert_not_called()

    def test_scale_rejects_pod_id(self, workload_probe: Probe) -> None:
        """Scaling controls target deployments only."""
        response = workload_probe.dispatch(_request(ids.SCALE_UP, "ns1/abc;<pod>"))

        assert response.error == "Invalid ID: ns1/abc;<pod>"


class TestDescribe:
    """Tests for workload describe controls."""

    def test_describe_service(self, workload_probe: Probe, mock_k8s: MagicMock) -> None:
        """Describing a service pipes its description."""
        mock_k8s.describe.return_value = io.BytesIO(b"kind: Service\n")

        response = workload_probe.dispatch(_request(ids.DESCRIBE_SERVICE, "ns1/svc-1;<service>"))

        assert response.pipe is not None
        pipe = workload_probe.pipes.get(response.pipe)
        assert pipe is not None
        assert pipe.read() == b"kind: Service\n"
        mock_k8s.describe.assert_called_once_with("ns1", "frontend", ResourceKind.SERVICE)

    def test_describe_unknown_stateful_set(self, workload_probe: Probe) -> None:
        """Describe reports missing resources with the kind's display name."""
        response = workload_probe.dispatch(
            _request(ids.DESCRIBE_STATEFULSET, "ns1/zzz;<statefulset>")
        )

        assert response.error == "Stateful Set not found: zzz"
