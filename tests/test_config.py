"""Tests for probe configuration."""

import pytest

from kube_probe.config import AuthMode, LogLevel, ProbeConfig


class TestProbeConfig:
    """Tests for ProbeConfig."""

    def test_defaults(self, config: ProbeConfig) -> None:
        """Defaults stream followed, timestamped logs and allow mutations."""
        assert config.auth_mode == AuthMode.AUTO
        assert config.log_level == LogLevel.INFO
        assert config.read_only_mode is False
        assert config.log_follow is True
        assert config.log_timestamps is True
        assert config.log_tail_lines is None
        assert config.pipe_read_size == 4096

    def test_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Settings are read from KUBE_PROBE_ environment variables."""
        monkeypatch.setenv("KUBE_PROBE_READ_ONLY_MODE", "true")
        monkeypatch.setenv("KUBE_PROBE_LOG_TAIL_LINES", "100")
        monkeypatch.setenv("KUBE_PROBE_VOLUME_SNAPSHOT_CLASS", "csi-snapclass")

        config = ProbeConfig(_env_file=None)

        assert config.read_only_mode is True
        assert config.log_tail_lines == 100
        assert config.volume_snapshot_class == "csi-snapclass"


class TestOperationPolicy:
    """Tests for is_operation_allowed."""

    @pytest.mark.parametrize("operation", ["delete", "scale", "create"])
    def test_mutations_allowed_by_default(self, config: ProbeConfig, operation: str) -> None:
        """Mutations are allowed unless read-only mode is on."""
        assert config.is_operation_allowed(operation) == (True, None)

    @pytest.mark.parametrize("operation", ["delete", "scale", "create"])
    def test_mutations_refused_in_read_only_mode(
        self, read_only_config: ProbeConfig, operation: str
    ) -> None:
        """Read-only mode refuses every mutation with a reason."""
        allowed, reason = read_only_config.is_operation_allowed(operation)

        assert allowed is False
        assert reason == f"Operation '{operation}' not allowed: probe is in read-only mode"

    def test_reads_always_allowed(self, read_only_config: ProbeConfig) -> None:
        """Reads are allowed in read-only mode."""
        assert read_only_config.is_operation_allowed("read") == (True, None)


class TestValidateAuthConfig:
    """Tests for validate_auth_config."""

    def test_missing_kubeconfig_in_kubeconfig_mode(self, tmp_path) -> None:
        """A missing kubeconfig is fatal when kubeconfig auth is forced."""
        config = ProbeConfig(
            _env_file=None,
            auth_mode=AuthMode.KUBECONFIG,
            kubeconfig_path=str(tmp_path / "missing"),
        )

        with pytest.raises(ValueError, match="Kubeconfig file not found"):
            config.validate_auth_config()

    def test_missing_kubeconfig_in_auto_mode(self, tmp_path) -> None:
        """A missing kubeconfig is only a warning in auto mode."""
        config = ProbeConfig(_env_file=None, kubeconfig_path=str(tmp_path / "missing"))

        warnings = config.validate_auth_config()

        assert len(warnings) == 1
        assert "Kubeconfig file not found" in warnings[0]

    def test_in_cluster_ignores_kubeconfig(self) -> None:
        """Kubeconfig settings are reported as ignored in in-cluster mode."""
        config = ProbeConfig(
            _env_file=None, auth_mode=AuthMode.IN_CLUSTER, kubeconfig_context="dev"
        )

        assert config.validate_auth_config() == [
            "kubeconfig settings are ignored in in_cluster auth mode"
        ]
