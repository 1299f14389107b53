"""Resolve-then-invoke adapters binding node ids to cached resources.

Every Kubernetes control targets one resource. Before the control body runs
the node id of the request is decoded for the expected kind, the resource
cache is walked for that kind and the handle with the decoded UID is passed
to the body. The same algorithm serves every kind; only the kind tag, the
cache walker and the handle type vary.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Generic, TypeVar

from kube_probe.controls.models import ControlHandler, ControlRequest, ControlResponse
from kube_probe.models.common import ResourceHandle, ResourceKind
from kube_probe.utils.errors import InvalidNodeIDError
from kube_probe.utils.node_id import decode_as

logger = logging.getLogger(__name__)

H = TypeVar("H", bound=ResourceHandle)

Walker = Callable[[ResourceKind], Iterable[ResourceHandle]]
Continuation = Callable[[ControlRequest, H], ControlResponse]


def resolve(kind: ResourceKind, uid: str, handles: Iterable[ResourceHandle]) -> ResourceHandle | None:
    """Find the handle with ``uid`` among ``handles``.

    If several handles share the UID the last one walked wins. A healthy
    cache never holds duplicates, but the walk order is the cache's and is
    kept as is rather than deduplicated here.
    """
    found: ResourceHandle | None = None
    matches = 0
    for handle in handles:
        if handle.uid == uid:
            found = handle
            matches += 1
    if matches > 1:
        logger.debug(f"{matches} cached {kind.value} resources share uid {uid}; using the last")
    return found


def capture(kind: ResourceKind, walk: Walker, continuation: Continuation[H]) -> ControlHandler:
    """Wrap a control body with node id resolution.

    Args:
        kind: Resource kind the control targets.
        walk: Returns the cached handles of a kind.
        continuation: Control body, called with the request and the
            resolved handle.

    Returns:
        A control handler.
    """

    def handler(request: ControlRequest) -> ControlResponse:
        try:
            node = decode_as(kind, request.node_id)
        except InvalidNodeIDError as e:
            logger.debug(f"Rejecting {request.control}: {e}")
            return ControlResponse.from_error(f"Invalid ID: {request.node_id}")

        handle = resolve(kind, node.uid, walk(kind))
        if handle is None:
            return ControlResponse.from_error(f"{kind.display_name} not found: {node.uid}")
        return continuation(request, handle)  # type: ignore[arg-type]

    handler.__name__ = f"capture_{kind.value}_{getattr(continuation, '__name__', 'control')}"
    return handler


class Capture(Generic[H]):
    """Capture adapter bound to one kind and one cache walker.

    Usage:
        capture_pod = Capture[PodHandle](ResourceKind.POD, cache.walk)
        registry.register(DELETE_POD, capture_pod(controls.delete_pod))
    """

    def __init__(self, kind: ResourceKind, walk: Walker) -> None:
        self.kind = kind
        self._walk = walk

    def __call__(self, continuation: Continuation[H]) -> ControlHandler:
        return capture(self.kind, self._walk, continuation)
