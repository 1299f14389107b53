"""Models shared across domains."""

from kube_probe.models.common import ResourceHandle, ResourceKind, get_field

__all__ = ["ResourceHandle", "ResourceKind", "get_field"]
