"""Base Kubernetes client for the probe.

Wraps the official kubernetes client with connection lifecycle, typed API
accessors, custom resource helpers, resource description and log streaming.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Any

import yaml
from kubernetes import client, config  # type: ignore[import-untyped]
from kubernetes.client import ApiException  # type: ignore[import-untyped]
from kubernetes.dynamic import DynamicClient  # type: ignore[import-untyped]
from kubernetes.dynamic.exceptions import ResourceNotFoundError  # type: ignore[import-untyped]

from kube_probe.clients.streams import MergedLogStream, ResponseStream
from kube_probe.config import AuthMode, ProbeConfig, get_config
from kube_probe.models.common import ResourceKind
from kube_probe.utils.errors import ConfigurationError, NotFoundError, ProbeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CRDDefinition:
    """Custom resource definition coordinates."""

    group: str
    version: str
    plural: str
    kind: str

    @property
    def api_version(self) -> str:
        """Full apiVersion, e.g. 'snapshot.storage.k8s.io/v1'."""
        return f"{self.group}/{self.version}"


class K8sClient:
    """Kubernetes client used by the probe's domain clients."""

    def __init__(self, config_obj: ProbeConfig | None = None) -> None:
        self._config = config_obj or get_config()
        self._api_client: client.ApiClient | None = None
        self._core_v1: client.CoreV1Api | None = None
        self._apps_v1: client.AppsV1Api | None = None
        self._batch_v1: client.BatchV1Api | None = None
        self._storage_v1: client.StorageV1Api | None = None
        self._custom_objects: client.CustomObjectsApi | None = None
        self._dynamic_client: DynamicClient | None = None
        self._crd_cache: dict[str, Any] = {}

    # -------------------------------------------------------------------------
    # Connection
    # -------------------------------------------------------------------------

    def _load_config(self) -> None:
        mode = self._config.auth_mode
        if mode in (AuthMode.AUTO, AuthMode.IN_CLUSTER):
            try:
                config.load_incluster_config()
                logger.info("Using in-cluster Kubernetes configuration")
                return
            except config.ConfigException:
                if mode == AuthMode.IN_CLUSTER:
                    raise
                logger.debug("In-cluster configuration unavailable, trying kubeconfig")

        config.load_kube_config(
            config_file=self._config.kubeconfig_path,
            context=self._config.kubeconfig_context,
        )
        logger.info(
            f"Using kubeconfig {self._config.kubeconfig_path or '~/.kube/config'}"
            + (f" (context {self._config.kubeconfig_context})" if self._config.kubeconfig_context else "")
        )

    def connect(self) -> None:
        """Load configuration and create API clients.

        Raises:
            ConfigurationError: If no usable cluster configuration is found.
        """
        try:
            self._load_config()
        except config.ConfigException as e:
            raise ConfigurationError(f"Failed to load Kubernetes configuration: {e}") from e

        self._api_client = client.ApiClient()
        self._core_v1 = client.CoreV1Api(self._api_client)
        self._apps_v1 = client.AppsV1Api(self._api_client)
        self._batch_v1 = client.BatchV1Api(self._api_client)
        self._storage_v1 = client.StorageV1Api(self._api_client)
        self._custom_objects = client.CustomObjectsApi(self._api_client)
        self._dynamic_client = DynamicClient(self._api_client)
        logger.info("Connected to Kubernetes API")

    def disconnect(self) -> None:
        """Drop API clients."""
        if self._api_client is not None:
            self._api_client.close()
        self._api_client = None
        self._core_v1 = None
        self._apps_v1 = None
        self._batch_v1 = None
        self._storage_v1 = None
        self._custom_objects = None
        self._dynamic_client = None
        self._crd_cache.clear()
        logger.info("Disconnected from Kubernetes API")

    @property
    def is_connected(self) -> bool:
        return self._api_client is not None

    def _require(self, api: Any) -> Any:
        if api is None:
            raise RuntimeError("K8s client not connected. Call connect() first.")
        return api

    @property
    def api_client(self) -> client.ApiClient:
        return self._require(self._api_client)

    @property
    def core_v1(self) -> client.CoreV1Api:
        return self._require(self._core_v1)

    @property
    def apps_v1(self) -> client.AppsV1Api:
        return self._require(self._apps_v1)

    @property
    def batch_v1(self) -> client.BatchV1Api:
        return self._require(self._batch_v1)

    @property
    def storage_v1(self) -> client.StorageV1Api:
        return self._require(self._storage_v1)

    @property
    def custom_objects(self) -> client.CustomObjectsApi:
        return self._require(self._custom_objects)

    @property
    def dynamic(self) -> DynamicClient:
        return self._require(self._dynamic_client)

    # -------------------------------------------------------------------------
    # Custom resources
    # -------------------------------------------------------------------------

    def get_resource(self, crd: CRDDefinition) -> Any:
        """Get the dynamic API resource for a CRD.

        Raises:
            NotFoundError: If the CRD is not installed in the cluster.
        """
        if crd.api_version not in self._crd_cache:
            try:
                self._crd_cache[crd.api_version] = self.dynamic.resources.get(
                    api_version=crd.api_version, kind=crd.kind
                )
            except ResourceNotFoundError as e:
                raise NotFoundError("CustomResourceDefinition", crd.plural) from e
        return self._crd_cache[crd.api_version]

    def list_custom_objects(self, crd: CRDDefinition, namespace: str | None = None) -> list[dict[str, Any]]:
        """List custom objects, cluster-wide when no namespace is given."""
        if namespace:
            result = self.custom_objects.list_namespaced_custom_object(
                crd.group, crd.version, namespace, crd.plural
            )
        else:
            result = self.custom_objects.list_cluster_custom_object(crd.group, crd.version, crd.plural)
        items: list[dict[str, Any]] = result.get("items", [])
        return items

    def create_custom_object(self, crd: CRDDefinition, namespace: str, body: dict[str, Any]) -> Any:
        """Create a namespaced custom object."""
        return self.custom_objects.create_namespaced_custom_object(
            crd.group, crd.version, namespace, crd.plural, body
        )

    def delete_custom_object(self, crd: CRDDefinition, name: str, namespace: str) -> None:
        """Delete a namespaced custom object.

        Raises:
            NotFoundError: If the object does not exist.
        """
        try:
            self.custom_objects.delete_namespaced_custom_object(
                crd.group, crd.version, namespace, crd.plural, name
            )
        except ApiException as e:
            if e.status == 404:
                raise NotFoundError(crd.kind, name, namespace) from e
            raise

    # -------------------------------------------------------------------------
    # Describe
    # -------------------------------------------------------------------------

    def describe(self, namespace: str | None, name: str, kind: ResourceKind) -> io.BytesIO:
        """Render a resource and its recent events as a YAML document.

        Args:
            namespace: Namespace of the resource (ignored for cluster-scoped kinds).
            name: Resource name.
            kind: Resource kind.

        Returns:
            Readable byte stream with the description.

        Raises:
            NotFoundError: If the resource does not exist.
        """
        resource = self.dynamic.resources.get(api_version=kind.api_version, kind=kind.k8s_kind)
        ns = namespace if kind.namespaced else None
        try:
            obj = resource.get(name=name, namespace=ns)
        except ApiException as e:
            if e.status == 404:
                raise NotFoundError(kind.k8s_kind, name, ns) from e
            raise

        document: dict[str, Any] = obj.to_dict()
        document.get("metadata", {}).pop("managedFields", None)
        if ns:
            document["events"] = self.get_events(ns, name, kind.k8s_kind)

        text = yaml.safe_dump(document, default_flow_style=False, sort_keys=False)
        return io.BytesIO(text.encode("utf-8"))

    def get_events(self, namespace: str, name: str, kind: str) -> list[dict[str, Any]]:
        """Get events recorded for an object."""
        events = self.core_v1.list_namespaced_event(
            namespace=namespace,
            field_selector=f"involvedObject.name={name},involvedObject.kind={kind}",
        )

        result = []
        for event in events.items:
            result.append(
                {
                    "type": event.type,
                    "reason": event.reason,
                    "message": event.message,
                    "timestamp": str(event.last_timestamp) if event.last_timestamp else None,
                    "count": getattr(event, "count", 1),
                }
            )

        return result

    # -------------------------------------------------------------------------
    # Logs
    # -------------------------------------------------------------------------

    def stream_pod_logs(
        self, namespace: str, pod: str, containers: list[str]
    ) -> ResponseStream | MergedLogStream:
        """Open a log stream over one or more containers of a pod.

        With several containers every line is prefixed with its container
        name. If opening any container's stream fails, the streams already
        opened are closed before the error propagates.
        """
        if not containers:
            raise ProbeError(f"Pod {namespace}/{pod} has no containers")

        responses: dict[str, Any] = {}
        try:
            for container in containers:
                responses[container] = self.core_v1.read_namespaced_pod_log(
                    name=pod,
                    namespace=namespace,
                    container=container,
                    follow=self._config.log_follow,
                    timestamps=self._config.log_timestamps,
                    tail_lines=self._config.log_tail_lines,
                    _preload_content=False,
                )
        except Exception:
            for response in responses.values():
                ResponseStream(response).close()
            raise

        if len(responses) == 1:
            return ResponseStream(next(iter(responses.values())))
        return MergedLogStream(responses)
