"""Remote controls: request models, node resolution, pipes and the handler registry.

Controls are the commands a remote caller can run against one resource in
the probe's topology report. The dependency flow is one-way: domains import
from here, never the reverse.
"""

from kube_probe.controls.capture import Capture, capture
from kube_probe.controls.models import ControlHandler, ControlRequest, ControlResponse
from kube_probe.controls.pipes import Pipe, PipeRegistry, new_pipe_from_stream
from kube_probe.controls.registry import HandlerRegistry

__all__ = [
    "Capture",
    "ControlHandler",
    "ControlRequest",
    "ControlResponse",
    "HandlerRegistry",
    "Pipe",
    "PipeRegistry",
    "capture",
    "new_pipe_from_stream",
]
