"""Control identifiers understood by the Kubernetes control dispatcher.

These strings are the wire vocabulary shared with remote callers and are
matched exactly.
"""

CLONE_VOLUME_SNAPSHOT = "kubernetes_clone_volume_snapshot"
CREATE_VOLUME_SNAPSHOT = "kubernetes_create_volume_snapshot"
DELETE_VOLUME_SNAPSHOT = "kubernetes_delete_volume_snapshot"
GET_LOGS = "kubernetes_get_logs"
DELETE_POD = "kubernetes_delete_pod"
SCALE_UP = "kubernetes_scale_up"
SCALE_DOWN = "kubernetes_scale_down"
DESCRIBE_POD = "kubernetes_describe_pod"
DESCRIBE_SERVICE = "kubernetes_describe_service"
DESCRIBE_CRONJOB = "kubernetes_describe_cronjob"
DESCRIBE_DEPLOYMENT = "kubernetes_describe_deployment"
DESCRIBE_DAEMONSET = "kubernetes_describe_daemonset"
DESCRIBE_STATEFULSET = "kubernetes_describe_statefulset"
DESCRIBE_PVC = "kubernetes_describe_pvc"
DESCRIBE_PV = "kubernetes_describe_pv"
DESCRIBE_STORAGE_CLASS = "kubernetes_describe_storage_class"

ALL_CONTROLS = frozenset(
    {
        CLONE_VOLUME_SNAPSHOT,
        CREATE_VOLUME_SNAPSHOT,
        DELETE_VOLUME_SNAPSHOT,
        GET_LOGS,
        DELETE_POD,
        SCALE_UP,
        SCALE_DOWN,
        DESCRIBE_POD,
        DESCRIBE_SERVICE,
        DESCRIBE_CRONJOB,
        DESCRIBE_DEPLOYMENT,
        DESCRIBE_DAEMONSET,
        DESCRIBE_STATEFULSET,
        DESCRIBE_PVC,
        DESCRIBE_PV,
        DESCRIBE_STORAGE_CLASS,
    }
)
