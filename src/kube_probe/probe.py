"""The probe: cluster client, resource cache, pipes and control registry."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from kube_probe.cache import ResourceCache
from kube_probe.clients.base import K8sClient
from kube_probe.config import ProbeConfig, get_config
from kube_probe.controls.pipes import PipeRegistry
from kube_probe.controls.registry import HandlerRegistry
from kube_probe.plugin_manager import PluginManager

if TYPE_CHECKING:
    from kube_probe.controls.models import ControlRequest, ControlResponse

logger = logging.getLogger(__name__)


class Probe:
    """Kubernetes probe serving remote controls.

    The probe is inactive until ``start`` installs the controls of every
    healthy plugin into its registry; ``stop`` removes them again and
    closes every pipe left open.
    """

    def __init__(
        self,
        config: ProbeConfig | None = None,
        k8s: K8sClient | None = None,
        plugins: PluginManager | None = None,
    ) -> None:
        self._config = config or get_config()
        self._k8s_client = k8s
        self._cache = ResourceCache()
        self._pipes = PipeRegistry()
        self._registry = HandlerRegistry()
        self._installed: list[str] = []
        self._active = False
        self._lock = threading.Lock()

        if plugins is None:
            plugins = PluginManager()
            plugins.load_core_plugins()
            plugins.load_entrypoint_plugins()
        self._plugins = plugins

    @property
    def config(self) -> ProbeConfig:
        """Get probe configuration."""
        return self._config

    @property
    def k8s(self) -> K8sClient:
        """Get the Kubernetes client.

        Raises:
            RuntimeError: If the probe has no client yet.
        """
        if self._k8s_client is None:
            raise RuntimeError("Probe not started. K8s client not available.")
        return self._k8s_client

    @property
    def cache(self) -> ResourceCache:
        return self._cache

    @property
    def pipes(self) -> PipeRegistry:
        return self._pipes

    @property
    def registry(self) -> HandlerRegistry:
        return self._registry

    @property
    def plugins(self) -> PluginManager:
        return self._plugins

    @property
    def active(self) -> bool:
        """Whether the probe's controls are installed."""
        return self._active

    @property
    def installed_controls(self) -> list[str]:
        """Control ids this probe installed at start."""
        return list(self._installed)

    def start(self) -> None:
        """Connect to the cluster and install the controls of healthy plugins.

        Raises:
            RuntimeError: If the probe is already active.
            ConfigurationError: If the cluster cannot be reached.
        """
        with self._lock:
            if self._active:
                raise RuntimeError("Probe already started")

            if self._k8s_client is None:
                self._k8s_client = K8sClient(self._config)
            if not self._k8s_client.is_connected:
                self._k8s_client.connect()

            results = self._plugins.run_health_checks(self)
            controls = self._plugins.collect_controls(self)
            self._registry.batch(None, controls)
            self._installed = list(controls)
            self._active = True

        healthy = sum(1 for ok, _ in results.values() if ok)
        logger.info(
            f"Probe started with {len(self._installed)} controls from "
            f"{healthy}/{len(results)} plugins"
        )

    def stop(self) -> None:
        """Remove the installed controls, close all pipes and disconnect.

        Raises:
            RuntimeError: If the probe is not active.
        """
        with self._lock:
            if not self._active:
                raise RuntimeError("Probe not started")

            self._registry.batch(self._installed, None)
            removed = len(self._installed)
            self._installed = []
            self._active = False

        logger.info(f"Removed {removed} controls")
        self._pipes.close_all()
        if self._k8s_client is not None:
            self._k8s_client.disconnect()
        logger.info("Probe stopped")

    def refresh_cache(self) -> dict[str, int]:
        """Reload the resource cache from the healthy plugins' listings.

        Returns:
            Number of cached handles per kind.
        """
        listings = self._plugins.collect_resources(self)
        self._cache.update(listings)
        return {kind.value: len(handles) for kind, handles in listings.items()}

    def dispatch(self, request: ControlRequest) -> ControlResponse:
        """Serve one control request."""
        return self._registry.handle_control(request)

    def __enter__(self) -> Probe:
        self.start()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.stop()
