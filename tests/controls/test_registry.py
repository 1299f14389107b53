"""Tests for the control handler registry."""

import threading

from kube_probe.controls.models import ControlRequest, ControlResponse
from kube_probe.controls.registry import HandlerRegistry


def _responder(value: str):
    def handler(request: ControlRequest) -> ControlResponse:  # noqa: ARG001
        return ControlResponse(value=value)

    return handler


def _request(control: str) -> ControlRequest:
    return ControlRequest(app_id="app-1", node_id="abc;<pod>", control=control)


class TestHandlerRegistry:
    """Tests for HandlerRegistry."""

    def test_batch_add_and_dispatch(self) -> None:
        """Handlers added in a batch receive matching requests."""
        registry = HandlerRegistry()

        registry.batch(None, {"a": _responder("from-a"), "b": _responder("from-b")})

        assert registry.handle_control(_request("a")).value == "from-a"
        assert registry.handle_control(_request("b")).value == "from-b"
        assert registry.controls == ["a", "b"]
        assert len(registry) == 2

    def test_register_then_deregister_restores_empty(self) -> None:
        """Removing everything a batch added leaves the registry empty."""
        registry = HandlerRegistry()
        handlers = {"a": _responder("1"), "b": _responder("2"), "c": _responder("3")}

        registry.batch(None, handlers)
        registry.batch(list(handlers), None)

        assert len(registry) == 0
        assert registry.controls == []

    def test_deregister_leaves_unrelated_ids(self) -> None:
        """Ids bound by other owners survive a removal batch."""
        registry = HandlerRegistry()
        registry.register("other", _responder("other"))
        registry.batch(None, {"a": _responder("1")})

        registry.batch(["a"], None)

        assert registry.controls == ["other"]

    def test_remove_unknown_id_is_ignored(self) -> None:
        """Removing an id that is not bound does nothing."""
        registry = HandlerRegistry()
        registry.register("a", _responder("1"))

        registry.rm("missing")

        assert registry.has("a")

    def test_removals_apply_before_additions(self) -> None:
        """An id both removed and added ends up bound to the new handler."""
        registry = HandlerRegistry()
        registry.register("a", _responder("old"))

        registry.batch(["a"], {"a": _responder("new")})

        assert registry.handle_control(_request("a")).value == "new"

    def test_unknown_control(self) -> None:
        """Dispatching an unbound id yields an error response."""
        registry = HandlerRegistry()

        response = registry.handle_control(_request("kubernetes_reboot"))

        assert response.error == 'Control "kubernetes_reboot" not recognised'

    def test_concurrent_dispatch_sees_whole_batches(self) -> None:
        """Dispatches racing a batch see all of its ids or none of them."""
        registry = HandlerRegistry()
        ids = [f"control-{i}" for i in range(50)]
        seen_partial = []
        stop = threading.Event()

        def watch() -> None:
            while not stop.is_set():
                snapshot = registry.controls
                if 0 < len(snapshot) < len(ids):
                    seen_partial.append(len(snapshot))

        watcher = threading.Thread(target=watch)
        watcher.start()
        try:
            for _ in range(100):
                registry.batch(None, {control: _responder(control) for control in ids})
                registry.batch(ids, None)
        finally:
            stop.set()
            watcher.join()

        assert seen_partial == []
