"""Control handler registry.

Maps control identifiers to handlers. Membership changes go through
``batch``, which builds a new mapping and swaps it in under a lock, so a
concurrent dispatch sees either the old or the new set of handlers and
never a half-applied update.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping

from kube_probe.controls.models import ControlHandler, ControlRequest, ControlResponse

logger = logging.getLogger(__name__)


class HandlerRegistry:
    """Registry of control handlers owned by a probe instance."""

    def __init__(self) -> None:
        self._handlers: dict[str, ControlHandler] = {}
        self._lock = threading.Lock()

    def batch(
        self,
        to_remove: Iterable[str] | None,
        to_add: Mapping[str, ControlHandler] | None,
    ) -> None:
        """Remove and add handlers in one atomic step.

        Removals are applied before additions, so a control id present in
        both ends up bound to its new handler.

        Args:
            to_remove: Control ids to unbind. Unknown ids are ignored.
            to_add: Control ids to bind, with their handlers.
        """
        with self._lock:
            handlers = dict(self._handlers)
            removed = 0
            for control in to_remove or ():
                if handlers.pop(control, None) is not None:
                    removed += 1
            handlers.update(to_add or {})
            self._handlers = handlers
        logger.debug(f"Control registry batch: -{removed} +{len(to_add or {})}")

    def register(self, control: str, handler: ControlHandler) -> None:
        """Bind a single control id."""
        self.batch(None, {control: handler})

    def rm(self, control: str) -> None:
        """Unbind a single control id."""
        self.batch([control], None)

    def handler_for(self, control: str) -> ControlHandler | None:
        """Get the handler bound to a control id, if any."""
        with self._lock:
            return self._handlers.get(control)

    def has(self, control: str) -> bool:
        """Check if a control id is bound."""
        return self.handler_for(control) is not None

    @property
    def controls(self) -> list[str]:
        """Sorted list of bound control ids."""
        with self._lock:
            return sorted(self._handlers)

    def __len__(self) -> int:
        with self._lock:
            return len(self._handlers)

    def handle_control(self, request: ControlRequest) -> ControlResponse:
        """Dispatch a request to the handler bound to its control id.

        The registry lock is not held while the handler runs, so slow
        controls do not block registration or other dispatches.
        """
        handler = self.handler_for(request.control)
        if handler is None:
            logger.warning(f"Control {request.control!r} not recognised")
            return ControlResponse.from_error(f'Control "{request.control}" not recognised')
        return handler(request)
