"""Readable streams over streaming Kubernetes API responses."""

from __future__ import annotations

import logging
import queue
import threading
from typing import Any

logger = logging.getLogger(__name__)

_EOF = object()


class ResponseStream:
    """Read-only stream over one unbuffered HTTP response.

    ``response`` is what the kubernetes client returns for a call made with
    ``_preload_content=False``.
    """

    def __init__(self, response: Any) -> None:
        self._response = response
        self._closed = False
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    def read(self, size: int = -1) -> bytes:
        if self._closed:
            return b""
        data = self._response.read() if size is None or size < 0 else self._response.read(size)
        return bytes(data or b"")

    def readline(self) -> bytes:
        if self._closed:
            return b""
        return bytes(self._response.readline() or b"")

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._response.close()
        release = getattr(self._response, "release_conn", None)
        if release is not None:
            release()


class MergedLogStream:
    """Interleaves the log lines of several containers into one stream.

    One reader thread per container pushes lines, prefixed with
    ``[container] ``, onto a shared queue. ``read`` drains the queue and
    reports end of stream once every container's stream has ended.
    Closing the stream closes every response, which ends the readers.
    """

    def __init__(self, responses: dict[str, Any]) -> None:
        self._streams = {name: ResponseStream(resp) for name, resp in responses.items()}
        self._queue: queue.Queue[Any] = queue.Queue()
        self._buffer = b""
        self._remaining = len(self._streams)
        self._closed = False
        self._threads = [
            threading.Thread(
                target=self._pump,
                args=(name, stream),
                name=f"log-reader-{name}",
                daemon=True,
            )
            for name, stream in self._streams.items()
        ]
        for thread in self._threads:
            thread.start()

    def _pump(self, container: str, stream: ResponseStream) -> None:
        prefix = f"[{container}] ".encode()
        try:
            for line in iter(stream.readline, b""):
                self._queue.put(prefix + line)
        except Exception as e:
            if not self._closed:
                logger.warning(f"Log stream for container {container} failed: {e}")
        finally:
            self._queue.put(_EOF)

    def _fill(self, want: int) -> None:
        while self._remaining and (want < 0 or len(self._buffer) < want):
            if want >= 0 and self._buffer and self._queue.empty():
                return
            item = self._queue.get()
            if item is _EOF:
                self._remaining -= 1
            else:
                self._buffer += item

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes, blocking until some are available.

        Returns b"" once every container stream has ended or after close.
        """
        if self._closed:
            return b""
        want = -1 if size is None or size < 0 else size
        self._fill(want)
        if want < 0:
            data, self._buffer = self._buffer, b""
        else:
            data, self._buffer = self._buffer[:want], self._buffer[want:]
        return data

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        for stream in self._streams.values():
            try:
                stream.close()
            except Exception as e:
                logger.debug(f"Error closing log response: {e}")
