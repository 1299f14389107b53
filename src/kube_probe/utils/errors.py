"""Exception hierarchy for the kube-probe control dispatcher."""


class ProbeError(Exception):
    """Base error for all kube-probe failures."""

    pass


class InvalidNodeIDError(ProbeError):
    """A node identifier could not be decoded."""

    def __init__(self, node_id: str, reason: str | None = None) -> None:
        self.node_id = node_id
        self.reason = reason
        message = f"Invalid ID: {node_id}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class NodeKindMismatchError(InvalidNodeIDError):
    """A well-formed node identifier names a different resource kind."""

    def __init__(self, node_id: str, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(node_id, f"expected kind '{expected}', got '{actual}'")


class NotFoundError(ProbeError):
    """A Kubernetes resource does not exist."""

    def __init__(self, kind: str, name: str, namespace: str | None = None) -> None:
        self.kind = kind
        self.name = name
        self.namespace = namespace
        if namespace:
            message = f"{kind} '{name}' not found in namespace '{namespace}'"
        else:
            message = f"{kind} '{name}' not found"
        super().__init__(message)


class PipeError(ProbeError):
    """A pipe could not be created or registered."""

    pass


class PipeClosedError(PipeError):
    """An operation was attempted on a closed pipe."""

    def __init__(self, pipe_id: str) -> None:
        self.pipe_id = pipe_id
        super().__init__(f"Pipe {pipe_id} is closed")


class ConfigurationError(ProbeError):
    """The probe configuration is invalid or the cluster is unreachable."""

    pass


class OperationNotAllowedError(ProbeError):
    """A mutating operation was refused by configuration policy."""

    pass
