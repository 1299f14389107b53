"""Tests for the shared control handler building blocks."""

from unittest.mock import MagicMock

from conftest import APP_ID, FakeStream

from kube_probe.controls import handlers
from kube_probe.controls.models import ControlRequest, ControlResponse
from kube_probe.domains.workloads.models import PodHandle
from kube_probe.models.common import ResourceKind
from kube_probe.probe import Probe


def _request(app_id: str = APP_ID) -> ControlRequest:
    return ControlRequest(app_id=app_id, node_id="ns1/abc;<pod>", control="kubernetes_test")


class TestOpenPipe:
    """Tests for open_pipe."""

    def test_returns_pipe(self, probe: Probe) -> None:
        """A successfully opened stream is returned as a pipe id."""
        response = handlers.open_pipe(probe, _request(), lambda: FakeStream(b"data"))

        assert response.pipe is not None
        assert probe.pipes.get(response.pipe) is not None

    def test_stream_failure_is_error_response(self, probe: Probe) -> None:
        """A failure opening the stream becomes an error response."""
        opener = MagicMock(side_effect=RuntimeError("logs unavailable"))

        response = handlers.open_pipe(probe, _request(), opener)

        assert response.error == "logs unavailable"
        assert probe.pipes.active_pipes == 0

    def test_registration_failure_closes_stream(self, probe: Probe) -> None:
        """A pipe that cannot be registered is closed and reported."""
        stream = FakeStream(b"data")

        response = handlers.open_pipe(probe, _request("unknown-app"), lambda: stream)

        assert response.error == "Unknown application session: unknown-app"
        assert stream.close_calls == 1


class TestMutate:
    """Tests for mutate."""

    def test_success_response(self, probe: Probe) -> None:
        """The given success response is returned when the call succeeds."""
        call = MagicMock()

        response = handlers.mutate(probe, _request(), "delete", call, ControlResponse(value="ok"))

        assert response.value == "ok"
        call.assert_called_once()

    def test_failure_message_is_verbatim(self, probe: Probe) -> None:
        """A failing call's message is returned as the error."""
        call = MagicMock(side_effect=RuntimeError("forbidden"))

        response = handlers.mutate(probe, _request(), "delete", call, ControlResponse())

        assert response.error == "forbidden"

    def test_read_only_refuses_without_calling(self, read_only_probe: Probe) -> None:
        """Read-only mode refuses mutations before calling the cluster."""
        call = MagicMock()

        response = handlers.mutate(read_only_probe, _request(), "delete", call, ControlResponse())

        assert response.error == "Operation 'delete' not allowed: probe is in read-only mode"
        call.assert_not_called()


class TestDescribe:
    """Tests for describe."""

    def test_describe_streams_description(self, probe: Probe, mock_k8s: MagicMock) -> None:
        """describe opens a pipe over the client's description."""
        mock_k8s.describe.return_value = FakeStream(b"kind: Pod\n")
        pod = PodHandle(uid="abc", name="foo", namespace="ns1")

        response = handlers.describe(probe, _request(), pod)

        assert response.pipe is not None
        mock_k8s.describe.assert_called_once_with("ns1", "foo", ResourceKind.POD)

    def test_describe_allowed_in_read_only_mode(
        self, read_only_probe: Probe, mock_k8s: MagicMock
    ) -> None:
        """Describing does not change cluster state and is allowed in read-only mode."""
        mock_k8s.describe.return_value = FakeStream(b"kind: Pod\n")
        pod = PodHandle(uid="abc", name="foo", namespace="ns1")

        response = handlers.describe(read_only_probe, _request(), pod)

        assert response.pipe is not None
