"""Topology node identifiers for Kubernetes resources.

A node id names one resource in the probe's topology report. It embeds the
resource kind as a tag, the resource UID and, optionally, its namespace:

    "<uid>;<pod>"
    "<namespace>/<uid>;<pod>"

The UID alone identifies the resource; the namespace is carried for
readability and for consumers that want it without a cache lookup. The
same resource always encodes to the same id, so ids survive cache refreshes.
"""

from __future__ import annotations

from typing import NamedTuple

from kube_probe.models.common import ResourceKind
from kube_probe.utils.errors import InvalidNodeIDError, NodeKindMismatchError

SCOPE_DELIM = ";"
NAMESPACE_DELIM = "/"

_RESERVED = frozenset(";/<>")


class NodeID(NamedTuple):
    """Decoded form of a node identifier."""

    kind: ResourceKind
    namespace: str | None
    uid: str


def _check_component(value: str, what: str) -> None:
    if not value:
        raise ValueError(f"{what} must not be empty")
    bad = _RESERVED.intersection(value)
    if bad:
        raise ValueError(f"{what} {value!r} contains reserved characters: {''.join(sorted(bad))}")


def encode(kind: ResourceKind, namespace: str | None, uid: str) -> str:
    """Encode a resource reference as a node id.

    Args:
        kind: Resource kind.
        namespace: Namespace, or None to leave it out. Cluster-scoped kinds
            must not carry one.
        uid: Kubernetes UID of the resource.

    Returns:
        The node identifier string.

    Raises:
        ValueError: If a component is empty, contains a reserved character,
            or a namespace is given for a cluster-scoped kind.
    """
    kind = ResourceKind(kind)
    _check_component(uid, "uid")
    if namespace is None:
        return f"{uid}{SCOPE_DELIM}<{kind.value}>"
    if not kind.namespaced:
        raise ValueError(f"{kind.value} is cluster-scoped and takes no namespace")
    _check_component(namespace, "namespace")
    return f"{namespace}{NAMESPACE_DELIM}{uid}{SCOPE_DELIM}<{kind.value}>"


def decode(node_id: str) -> NodeID:
    """Decode a node id of any kind.

    Raises:
        InvalidNodeIDError: If the string is not a well-formed node id.
    """
    body, sep, tag = node_id.rpartition(SCOPE_DELIM)
    if not sep or len(tag) < 3 or not (tag.startswith("<") and tag.endswith(">")):
        raise InvalidNodeIDError(node_id, "missing kind tag")
    try:
        kind = ResourceKind(tag[1:-1])
    except ValueError:
        raise InvalidNodeIDError(node_id, f"unknown kind '{tag[1:-1]}'") from None

    namespace: str | None = None
    uid = body
    if NAMESPACE_DELIM in body:
        namespace, _, uid = body.partition(NAMESPACE_DELIM)
        if not kind.namespaced:
            raise InvalidNodeIDError(node_id, f"{kind.value} is cluster-scoped")

    try:
        _check_component(uid, "uid")
        if namespace is not None:
            _check_component(namespace, "namespace")
    except ValueError as e:
        raise InvalidNodeIDError(node_id, str(e)) from None

    return NodeID(kind, namespace, uid)


def decode_as(kind: ResourceKind, node_id: str) -> NodeID:
    """Decode a node id that must name a resource of ``kind``.

    Raises:
        InvalidNodeIDError: If the string is malformed.
        NodeKindMismatchError: If it is well-formed but names another kind.
    """
    decoded = decode(node_id)
    if decoded.kind != kind:
        raise NodeKindMismatchError(node_id, expected=kind.value, actual=decoded.kind.value)
    return decoded
