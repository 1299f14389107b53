"""Resource cache walked by the capture adapters.

The cache holds the latest known handles per resource kind. It is filled by
whoever owns the probe (on a timer, from informers, or once for a CLI run);
the dispatcher only reads it. Each walk iterates a snapshot taken under the
lock, so a concurrent refresh never changes a walk in progress.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator, Mapping

from kube_probe.models.common import ResourceHandle, ResourceKind

logger = logging.getLogger(__name__)


class ResourceCache:
    """Per-kind store of resource handles."""

    def __init__(self) -> None:
        self._handles: dict[ResourceKind, tuple[ResourceHandle, ...]] = {}
        self._lock = threading.Lock()

    def walk(self, kind: ResourceKind) -> Iterator[ResourceHandle]:
        """Iterate the cached handles of a kind."""
        with self._lock:
            snapshot = self._handles.get(kind, ())
        return iter(snapshot)

    def replace(self, kind: ResourceKind, handles: Iterable[ResourceHandle]) -> None:
        """Replace every handle of a kind."""
        snapshot = tuple(handles)
        with self._lock:
            self._handles[kind] = snapshot
        logger.debug(f"Cached {len(snapshot)} {kind.value} resources")

    def update(self, listings: Mapping[ResourceKind, Iterable[ResourceHandle]]) -> None:
        """Replace the handles of several kinds at once."""
        snapshots = {kind: tuple(handles) for kind, handles in listings.items()}
        with self._lock:
            self._handles.update(snapshots)
        logger.debug(
            "Cache refreshed: "
            + ", ".join(f"{kind.value}={len(h)}" for kind, h in sorted(snapshots.items()))
        )

    def clear(self) -> None:
        """Drop every cached handle."""
        with self._lock:
            self._handles.clear()

    def count(self, kind: ResourceKind) -> int:
        """Number of cached handles of a kind."""
        with self._lock:
            return len(self._handles.get(kind, ()))

    @property
    def kinds(self) -> list[ResourceKind]:
        """Kinds that have been populated."""
        with self._lock:
            return list(self._handles)
