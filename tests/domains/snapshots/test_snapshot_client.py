"""Tests for SnapshotClient and the VolumeSnapshot handle."""

from unittest.mock import MagicMock

import pytest

from kube_probe.config import ProbeConfig
from kube_probe.domains.snapshots.client import SnapshotClient
from kube_probe.domains.snapshots.crds import SnapshotCRDs
from kube_probe.domains.snapshots.models import CAPACITY_ANNOTATION, VolumeSnapshotHandle


def _snapshot_object(**overrides) -> dict:
    obj = {
        "metadata": {
            "name": "snap-1",
            "namespace": "ns1",
            "uid": "vs-1",
            "annotations": {CAPACITY_ANNOTATION: "1Gi"},
        },
        "spec": {"source": {"persistentVolumeClaimName": "data"}},
        "status": {"readyToUse": True},
    }
    obj.update(overrides)
    return obj


class TestVolumeSnapshotHandle:
    """Tests for VolumeSnapshotHandle.from_k8s."""

    def test_from_custom_object(self) -> None:
        """Snapshots are read from plain custom object dicts."""
        handle = VolumeSnapshotHandle.from_k8s(_snapshot_object())

        assert handle.uid == "vs-1"
        assert handle.namespace == "ns1"
        assert handle.volume_name == "data"
        assert handle.capacity == "1Gi"
        assert handle.ready is True
        assert handle.node_id == "ns1/vs-1;<volume_snapshot>"

    def test_restore_size_takes_precedence(self) -> None:
        """A bound snapshot's restore size wins over the annotation."""
        handle = VolumeSnapshotHandle.from_k8s(
            _snapshot_object(status={"readyToUse": True, "restoreSize": "2Gi"})
        )

        assert handle.capacity == "2Gi"

    def test_missing_capacity(self) -> None:
        """Snapshots created elsewhere may have no known capacity."""
        obj = _snapshot_object(status={})
        obj["metadata"].pop("annotations")

        handle = VolumeSnapshotHandle.from_k8s(obj)

        assert handle.capacity == ""
        assert handle.ready is False


class TestSnapshotClient:
    """Test SnapshotClient operations."""

    @pytest.fixture
    def client(self, mock_k8s: MagicMock, config: ProbeConfig) -> SnapshotClient:
        """Create a SnapshotClient with mocked K8sClient."""
        return SnapshotClient(mock_k8s, config)

    def test_list_volume_snapshots(self, client: SnapshotClient, mock_k8s: MagicMock) -> None:
        """Snapshots are listed cluster-wide from the custom objects API."""
        mock_k8s.list_custom_objects.return_value = [_snapshot_object()]

        snapshots = client.list_volume_snapshots()

        assert [s.name for s in snapshots] == ["snap-1"]
        mock_k8s.list_custom_objects.assert_called_once_with(SnapshotCRDs.VOLUME_SNAPSHOT)

    def test_create_volume_snapshot(self, client: SnapshotClient, mock_k8s: MagicMock) -> None:
        """Creating a snapshot records the claim and its capacity."""
        name = client.create_volume_snapshot("ns1", "data", "1Gi")

        crd, namespace, body = mock_k8s.create_custom_object.call_args.args
        assert crd == SnapshotCRDs.VOLUME_SNAPSHOT
        assert namespace == "ns1"
        assert body["apiVersion"] == "snapshot.storage.k8s.io/v1"
        assert body["kind"] == "VolumeSnapshot"
        assert body["metadata"]["name"] == name
        assert name.startswith("snapshot-")
        assert body["metadata"]["annotations"] == {CAPACITY_ANNOTATION: "1Gi"}
        assert body["spec"] == {"source": {"persistentVolumeClaimName": "data"}}

    def test_create_with_snapshot_class(self, mock_k8s: MagicMock) -> None:
        """The configured snapshot class is set on new snapshots."""
        config = ProbeConfig(_env_file=None, volume_snapshot_class="csi-snapclass")
        client = SnapshotClient(mock_k8s, config)

        client.create_volume_snapshot("ns1", "data", "")

        body = mock_k8s.create_custom_object.call_args.args[2]
        assert body["spec"]["volumeSnapshotClassName"] == "csi-snapclass"
        assert "annotations" not in body["metadata"]

    def test_clone_volume_snapshot(self, client: SnapshotClient, mock_k8s: MagicMock) -> None:
        """Cloning restores the snapshot into a new claim of the recorded size."""
        name = client.clone_volume_snapshot("ns1", "snap-1", "data", "1Gi")

        kwargs = mock_k8s.core_v1.create_namespaced_persistent_volume_claim.call_args.kwargs
        body = kwargs["body"]
        assert kwargs["namespace"] == "ns1"
        assert name.startswith("clone-data-")
        assert body["metadata"]["name"] == name
        assert body["spec"]["resources"] == {"requests": {"storage": "1Gi"}}
        assert body["spec"]["dataSource"] == {
            "apiGroup": "snapshot.storage.k8s.io",
            "kind": "VolumeSnapshot",
            "name": "snap-1",
        }
        assert "storageClassName" not in body["spec"]

    def test_clone_requires_capacity(self, client: SnapshotClient, mock_k8s: MagicMock) -> None:
        """A snapshot without known capacity cannot be cloned."""
        with pytest.raises(ValueError, match="no known capacity"):
            client.clone_volume_snapshot("ns1", "snap-1", "data", "")

        mock_k8s.core_v1.create_namespaced_persistent_volume_claim.assert_not_called()

    def test_delete_volume_snapshot(self, client: SnapshotClient, mock_k8s: MagicMock) -> None:
        """Deleting a snapshot goes through the custom objects API."""
        client.delete_volume_snapshot("ns1", "snap-1")

        mock_k8s.delete_custom_object.assert_called_once_with(
            SnapshotCRDs.VOLUME_SNAPSHOT, "snap-1", "ns1"
        )
