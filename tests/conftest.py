"""Pytest fixtures shared by kube-probe tests."""

from typing import Any
from unittest.mock import MagicMock

import pytest

from kube_probe.config import ProbeConfig
from kube_probe.hooks import hookimpl
from kube_probe.plugin import BasePlugin, PluginMetadata
from kube_probe.plugin_manager import PluginManager
from kube_probe.probe import Probe

APP_ID = "app-1"


def make_k8s_object(
    name: str,
    uid: str,
    namespace: str | None = None,
    spec: Any = None,
) -> MagicMock:
    """Create a mock typed Kubernetes API object."""
    obj = MagicMock()
    obj.metadata.name = name
    obj.metadata.uid = uid
    obj.metadata.namespace = namespace
    obj.spec = spec
    return obj


class FakeStream:
    """Readable stream over fixed chunks that records how often it is closed."""

    def __init__(self, *chunks: bytes) -> None:
        self._chunks = list(chunks)
        self.close_calls = 0

    def read(self, size: int = -1) -> bytes:  # noqa: ARG002
        if not self._chunks:
            return b""
        return self._chunks.pop(0)

    def close(self) -> None:
        self.close_calls += 1


class StaticPlugin(BasePlugin):
    """Plugin with fixed controls, resources and health."""

    def __init__(
        self,
        name: str,
        controls: dict | None = None,
        resources: dict | None = None,
        healthy: bool = True,
    ) -> None:
        super().__init__(PluginMetadata(name=name, version="1.0.0", description=name))
        self._controls = controls or {}
        self._resources = resources or {}
        self._healthy = healthy

    @hookimpl
    def kube_probe_get_controls(self, probe: Any) -> dict:  # noqa: ARG002
        return self._controls

    @hookimpl
    def kube_probe_list_resources(self, probe: Any) -> dict:  # noqa: ARG002
        return self._resources

    @hookimpl
    def kube_probe_health_check(self, probe: Any) -> tuple[bool, str]:  # noqa: ARG002
        return (True, "ok") if self._healthy else (False, "broken")


@pytest.fixture
def config() -> ProbeConfig:
    """Probe configuration isolated from the environment's .env file."""
    return ProbeConfig(_env_file=None)


@pytest.fixture
def read_only_config() -> ProbeConfig:
    """Probe configuration in read-only mode."""
    return ProbeConfig(_env_file=None, read_only_mode=True)


@pytest.fixture
def mock_k8s() -> MagicMock:
    """Create a mock K8sClient."""
    k8s = MagicMock()
    k8s.is_connected = True
    return k8s


@pytest.fixture
def probe(config: ProbeConfig, mock_k8s: MagicMock) -> Probe:
    """Probe wired to a mocked client, without plugins, with an open app session."""
    p = Probe(config, k8s=mock_k8s, plugins=PluginManager())
    p.pipes.open_session(APP_ID)
    return p


@pytest.fixture
def read_only_probe(read_only_config: ProbeConfig, mock_k8s: MagicMock) -> Probe:
    """Read-only probe wired to a mocked client."""
    p = Probe(read_only_config, k8s=mock_k8s, plugins=PluginManager())
    p.pipes.open_session(APP_ID)
    return p
