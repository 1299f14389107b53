"""Configuration for the kube-probe control dispatcher."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthMode(str, Enum):
    """How the probe reaches the Kubernetes API."""

    AUTO = "auto"
    KUBECONFIG = "kubeconfig"
    IN_CLUSTER = "in_cluster"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class ProbeConfig(BaseSettings):
    """Configuration for the probe's Kubernetes controls.

    Loaded from environment variables with KUBE_PROBE_ prefix or from a
    .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="KUBE_PROBE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Cluster connection
    auth_mode: AuthMode = Field(
        default=AuthMode.AUTO,
        description="Use in-cluster config when available, else kubeconfig",
    )
    kubeconfig_path: str | None = Field(
        default=None,
        description="Path to kubeconfig file (default: ~/.kube/config)",
    )
    kubeconfig_context: str | None = Field(
        default=None,
        description="Kubeconfig context to use",
    )

    # Logging
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")

    # Safety
    read_only_mode: bool = Field(
        default=False,
        description="Refuse controls that change cluster state",
    )

    # Log streaming
    log_tail_lines: int | None = Field(
        default=None,
        ge=0,
        description="Only stream this many trailing lines per container",
    )
    log_follow: bool = Field(default=True, description="Keep streaming new log lines")
    log_timestamps: bool = Field(default=True, description="Prefix log lines with timestamps")

    # Volume snapshots
    volume_snapshot_class: str | None = Field(
        default=None,
        description="VolumeSnapshotClass for new snapshots (cluster default if unset)",
    )
    clone_storage_class: str | None = Field(
        default=None,
        description="StorageClass for claims cloned from snapshots (cluster default if unset)",
    )

    # Pipes
    pipe_read_size: int = Field(
        default=4096,
        gt=0,
        description="Chunk size used when draining a pipe",
    )

    def is_operation_allowed(self, operation: str) -> tuple[bool, str | None]:
        """Check if a control operation is allowed by current configuration.

        Args:
            operation: Operation type (e.g. 'delete', 'scale', 'create', 'read').

        Returns:
            Tuple of (allowed, reason). Reason is None when allowed.
        """
        if operation == "read":
            return True, None
        if self.read_only_mode:
            return False, f"Operation '{operation}' not allowed: probe is in read-only mode"
        return True, None

    def validate_auth_config(self) -> list[str]:
        """Validate connection settings.

        Returns:
            List of warnings.

        Raises:
            ValueError: If the settings cannot work.
        """
        warnings: list[str] = []

        if self.auth_mode == AuthMode.IN_CLUSTER:
            if self.kubeconfig_path or self.kubeconfig_context:
                warnings.append("kubeconfig settings are ignored in in_cluster auth mode")
            return warnings

        if self.kubeconfig_path:
            path = Path(self.kubeconfig_path).expanduser()
            if not path.exists():
                if self.auth_mode == AuthMode.KUBECONFIG:
                    raise ValueError(f"Kubeconfig file not found: {path}")
                warnings.append(f"Kubeconfig file not found: {path}")

        return warnings


@lru_cache
def get_config() -> ProbeConfig:
    """Get the process-wide configuration loaded from the environment."""
    return ProbeConfig()
