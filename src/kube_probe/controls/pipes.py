"""Pipes: bidirectional byte channels exposed to remote callers by id.

Read-only controls (logs, describe) produce a one-directional stream. The
bridge here wraps such a stream as the read half of a duplex channel whose
write half discards everything, registers it with a pipe registry under a
fresh id scoped to the caller's application session, and makes sure the
stream is closed exactly once when the pipe goes away.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Callable
from typing import Protocol

from kube_probe.utils.errors import PipeClosedError, PipeError

logger = logging.getLogger(__name__)


class ReadStream(Protocol):
    """A readable, closable byte stream."""

    def read(self, size: int = -1) -> bytes: ...

    def close(self) -> None: ...


class WriteStream(Protocol):
    """A writable byte sink."""

    def write(self, data: bytes) -> int: ...


class DiscardWriter:
    """Write half that accepts and drops all input."""

    def write(self, data: bytes) -> int:
        return len(data)


class DuplexStream:
    """Duplex channel built from independent read and write halves."""

    def __init__(self, reader: ReadStream, writer: WriteStream | None = None) -> None:
        self.reader = reader
        self.writer: WriteStream = writer if writer is not None else DiscardWriter()

    def read(self, size: int = -1) -> bytes:
        return self.reader.read(size)

    def write(self, data: bytes) -> int:
        return self.writer.write(data)


def new_pipe_id() -> str:
    """Allocate a fresh pipe identifier."""
    return f"pipe-{uuid.uuid4().hex}"


class Pipe:
    """A registered duplex channel with close-once semantics.

    Either side may close the pipe: the remote caller through the pipe
    registry, or the local side when the underlying stream ends. Close
    callbacks run exactly once regardless of how many closers race.
    """

    def __init__(self, pipe_id: str, app_id: str, ends: DuplexStream) -> None:
        self.id = pipe_id
        self.app_id = app_id
        self._ends = ends
        self._on_close: list[Callable[[], None]] = []
        self._closed = False
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    def on_close(self, callback: Callable[[], None]) -> None:
        """Register a callback to run when the pipe closes.

        If the pipe is already closed the callback runs immediately.
        """
        with self._lock:
            if not self._closed:
                self._on_close.append(callback)
                return
        callback()

    def read(self, size: int = -1) -> bytes:
        """Read from the stream half. Closes the pipe at end of stream."""
        if self._closed:
            raise PipeClosedError(self.id)
        data = self._ends.read(size)
        if size != 0 and not data:
            self.close()
        return data

    def write(self, data: bytes) -> int:
        """Write to the sink half."""
        if self._closed:
            raise PipeClosedError(self.id)
        return self._ends.write(data)

    def close(self) -> None:
        """Close the pipe and run close callbacks once."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            callbacks, self._on_close = self._on_close, []

        logger.debug(f"Closing pipe {self.id} for app {self.app_id}")
        errors: list[Exception] = []
        for callback in callbacks:
            try:
                callback()
            except Exception as e:
                logger.warning(f"Pipe {self.id} close callback failed: {e}")
                errors.append(e)
        if errors:
            raise PipeError(f"Failed to close pipe {self.id}: {errors[0]}") from errors[0]


class PipeRegistry:
    """In-process pipe transport.

    Tracks application sessions and the pipes opened for them. A pipe can
    only be registered for a known session; closing a session closes all of
    its pipes.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, set[str]] = {}
        self._pipes: dict[str, Pipe] = {}
        self._lock = threading.Lock()

    def open_session(self, app_id: str) -> None:
        """Start accepting pipes for an application session."""
        with self._lock:
            self._sessions.setdefault(app_id, set())
        logger.debug(f"Opened pipe session for app {app_id}")

    def close_session(self, app_id: str) -> None:
        """Stop a session and close every pipe it owns."""
        with self._lock:
            pipe_ids = self._sessions.pop(app_id, set())
            pipes = [self._pipes.pop(pid) for pid in pipe_ids if pid in self._pipes]
        for pipe in pipes:
            try:
                pipe.close()
            except PipeError as e:
                logger.warning(str(e))
        logger.debug(f"Closed pipe session for app {app_id} ({len(pipes)} pipes)")

    def pipe_connection(self, app_id: str, pipe_id: str, pipe: Pipe) -> None:
        """Register a pipe for a session.

        Raises:
            PipeError: If the session is unknown or the id is taken.
        """
        with self._lock:
            if app_id not in self._sessions:
                raise PipeError(f"Unknown application session: {app_id}")
            if pipe_id in self._pipes:
                raise PipeError(f"Pipe {pipe_id} already registered")
            self._pipes[pipe_id] = pipe
            self._sessions[app_id].add(pipe_id)
        pipe.on_close(lambda: self._forget(pipe_id))
        logger.info(f"Registered pipe {pipe_id} for app {app_id}")

    def _forget(self, pipe_id: str) -> None:
        with self._lock:
            pipe = self._pipes.pop(pipe_id, None)
            if pipe is not None:
                self._sessions.get(pipe.app_id, set()).discard(pipe_id)

    def get(self, pipe_id: str) -> Pipe | None:
        """Look up an open pipe."""
        with self._lock:
            return self._pipes.get(pipe_id)

    def close_pipe(self, pipe_id: str) -> None:
        """Close a pipe from the remote side. Unknown ids are ignored."""
        pipe = self.get(pipe_id)
        if pipe is not None:
            pipe.close()

    def close_all(self) -> None:
        """Close every pipe and forget all sessions.

        Should be called during probe shutdown.
        """
        with self._lock:
            pipes = list(self._pipes.values())
            self._pipes.clear()
            self._sessions.clear()
        for pipe in pipes:
            try:
                pipe.close()
            except PipeError as e:
                logger.warning(str(e))
        logger.info(f"Closed {len(pipes)} pipes")

    @property
    def active_pipes(self) -> int:
        """Number of open pipes."""
        with self._lock:
            return len(self._pipes)


class PipeTransport(Protocol):
    """Anything that can register a pipe for an application session."""

    def pipe_connection(self, app_id: str, pipe_id: str, pipe: Pipe) -> None: ...


def new_pipe_from_stream(stream: ReadStream, pipes: PipeTransport, app_id: str) -> str:
    """Bridge a read-only stream into a registered pipe.

    Args:
        stream: Stream to expose. Ownership passes to the pipe.
        pipes: Registry to register the pipe with.
        app_id: Application session the pipe belongs to.

    Returns:
        The new pipe id.

    Raises:
        PipeError: If registration fails. The stream is closed first.
    """
    pipe = Pipe(new_pipe_id(), app_id, DuplexStream(stream, DiscardWriter()))
    pipe.on_close(stream.close)
    try:
        pipes.pipe_connection(app_id, pipe.id, pipe)
    except Exception as e:
        logger.warning(f"Failed to register pipe {pipe.id} for app {app_id}: {e}")
        try:
            pipe.close()
        except PipeError as close_error:
            logger.warning(str(close_error))
        if isinstance(e, PipeError):
            raise
        raise PipeError(f"Failed to register pipe: {e}") from e
    return pipe.id
