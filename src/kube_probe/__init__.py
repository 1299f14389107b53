"""kube-probe: control dispatcher for Kubernetes resources in a cluster probe."""

__version__ = "0.1.0"
