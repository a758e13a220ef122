"""A dedicated thread on which compilations run one after another."""

from __future__ import annotations

import asyncio
import logging
import queue
import threading
from typing import Any, Callable, TypeVar

from .project import Project
from .source import Source
from .world import ProjectWorld

logger = logging.getLogger(__name__)

T = TypeVar("T")

_STOP = object()


def _settle(future: asyncio.Future, result: Any, error: BaseException | None) -> None:
    if future.done():
        logger.warning("could not send back return value from Typst thread")
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(result)


class TypstThread:
    """Runs submitted work in order on a single background thread."""

    def __init__(self) -> None:
        self._requests: queue.SimpleQueue[Any] = queue.SimpleQueue()
        self._lock = threading.Lock()
        self._closed = False
        self._thread = threading.Thread(target=self._serve, name="typst", daemon=True)
        self._thread.start()

    def _serve(self) -> None:
        while True:
            request = self._requests.get()
            if request is _STOP:
                break
            logger.debug("got new request on Typst thread")
            request()
            logger.debug("completed request on Typst thread")

    def _send(self, request: Callable[[], None]) -> None:
        with self._lock:
            if self._closed:
                raise RuntimeError("the Typst thread has been closed")
            self._requests.put(request)

    async def run(self, f: Callable[[], T]) -> T:
        """Call `f` on the thread and wait for its result; its exceptions are raised here."""
        loop = asyncio.get_running_loop()
        future: asyncio.Future = loop.create_future()

        def request() -> None:
            result: Any = None
            error: BaseException | None = None
            try:
                result = f()
            except BaseException as err:  # delivered to the awaiting caller
                error = err
            try:
                loop.call_soon_threadsafe(_settle, future, result, error)
            except RuntimeError:
                logger.warning("could not send back return value from Typst thread")

        self._send(request)
        return await future

    async def run_with_world(
        self, project: Project, main: Source, f: Callable[[ProjectWorld], T]
    ) -> T:
        """Call `f` on the thread with a world made of `project` and `main`."""
        return await self.run(lambda: f(ProjectWorld(project, main)))

    def close(self) -> None:
        """Finish the queued work and stop the thread."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._requests.put(_STOP)
        if threading.current_thread() is not self._thread:
            self._thread.join()

    def __enter__(self) -> TypstThread:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()