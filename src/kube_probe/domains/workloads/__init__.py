"""Workloads domain - pods, services and workload controllers."""

from kube_probe.domains.workloads.client import WorkloadClient
from kube_probe.domains.workloads.models import (
    CronJobHandle,
    DaemonSetHandle,
    DeploymentHandle,
    PodHandle,
    ServiceHandle,
    StatefulSetHandle,
)

__all__ = [
    "WorkloadClient",
    "CronJobHandle",
    "DaemonSetHandle",
    "DeploymentHandle",
    "PodHandle",
    "ServiceHandle",
    "StatefulSetHandle",
]
