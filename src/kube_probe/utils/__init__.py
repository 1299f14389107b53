"""Utility functions and helpers for kube-probe."""

from kube_probe.utils.errors import (
    ConfigurationError,
    InvalidNodeIDError,
    NodeKindMismatchError,
    NotFoundError,
    OperationNotAllowedError,
    PipeClosedError,
    PipeError,
    ProbeError,
)
from kube_probe.utils.node_id import NodeID, decode, decode_as, encode

__all__ = [
    # Errors
    "ProbeError",
    "InvalidNodeIDError",
    "NodeKindMismatchError",
    "NotFoundError",
    "PipeError",
    "PipeClosedError",
    "ConfigurationError",
    "OperationNotAllowedError",
    # Node identifiers
    "NodeID",
    "encode",
    "decode",
    "decode_as",
]
