"""Building blocks shared by the Kubernetes control handlers.

Every handler calls exactly one cluster operation and turns its outcome into
exactly one response. Client failures become error responses carrying the
client's message; nothing is retried.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from kube_probe.controls.models import ControlRequest, ControlResponse
from kube_probe.controls.pipes import ReadStream, new_pipe_from_stream
from kube_probe.models.common import ResourceHandle
from kube_probe.utils.errors import OperationNotAllowedError, PipeError

if TYPE_CHECKING:
    from kube_probe.probe import Probe

logger = logging.getLogger(__name__)


def open_pipe(
    probe: Probe, request: ControlRequest, open_stream: Callable[[], ReadStream]
) -> ControlResponse:
    """Open a stream and hand it to the caller as a pipe.

    Args:
        probe: Probe whose pipe registry receives the pipe.
        request: Request being served; the pipe is scoped to its app id.
        open_stream: Cluster call returning the stream.

    Returns:
        A pipe response, or an error response if the stream could not be
        opened or the pipe could not be registered.
    """
    try:
        stream = open_stream()
    except Exception as e:
        logger.warning(f"{request.control} on {request.node_id} failed: {e}")
        return ControlResponse.from_error(e)

    try:
        pipe_id = new_pipe_from_stream(stream, probe.pipes, request.app_id)
    except PipeError as e:
        return ControlResponse.from_error(e)
    return ControlResponse(pipe=pipe_id)


def mutate(
    probe: Probe,
    request: ControlRequest,
    operation: str,
    call: Callable[[], object],
    success: ControlResponse,
) -> ControlResponse:
    """Run a state-changing cluster call, subject to read-only mode.

    Args:
        probe: Probe providing the configuration.
        request: Request being served.
        operation: Operation type checked against configuration policy.
        call: The cluster call.
        success: Response to return when the call succeeds.
    """
    allowed, reason = probe.config.is_operation_allowed(operation)
    if not allowed:
        error = OperationNotAllowedError(reason or f"Operation '{operation}' not allowed")
        logger.info(f"Refused {request.control} on {request.node_id}: {error}")
        return ControlResponse.from_error(error)

    try:
        call()
    except Exception as e:
        logger.warning(f"{request.control} on {request.node_id} failed: {e}")
        return ControlResponse.from_error(e)
    return success


def describe(probe: Probe, request: ControlRequest, handle: ResourceHandle) -> ControlResponse:
    """Stream the description of any resource through a pipe."""
    return open_pipe(
        probe,
        request,
        lambda: probe.k8s.describe(handle.namespace, handle.name, handle.kind),
    )
