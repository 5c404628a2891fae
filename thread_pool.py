"""Optional fixed-size worker pool for accepted client sockets.

Used only when a concurrency cap is configured. The queue is unbounded:
connections beyond the worker count wait their turn and are never rejected.
"""

from __future__ import annotations

import queue
import threading
import time
from collections.abc import Callable

ClientAddress = tuple[str, int]
ClientHandler = Callable[[object, ClientAddress], None]

_STOP = None


class ThreadPool:
    def __init__(self, worker_count: int, handler: ClientHandler) -> None:
        if worker_count <= 0:
            raise ValueError("worker_count must be positive")

        self._handler = handler
        self._jobs: queue.SimpleQueue[tuple[object, ClientAddress] | None] = queue.SimpleQueue()
        self._workers = [
            threading.Thread(target=self._run_worker, name=f"http-worker-{index}", daemon=True)
            for index in range(worker_count)
        ]
        # Submitted but not yet finished, queued or running.
        self._pending = 0
        self._idle = threading.Condition()
        self._closed = False

    def start(self) -> None:
        for worker in self._workers:
            worker.start()

    def submit(self, client_socket: object, address: ClientAddress) -> None:
        with self._idle:
            if self._closed:
                raise RuntimeError("cannot submit to a pool that is shutting down")
            self._pending += 1
        self._jobs.put((client_socket, address))

    def wait_for_drain(self, timeout: float | None = None) -> bool:
        """Block until every submitted job has finished; False on timeout."""
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._idle:
            while self._pending:
                remaining = None if deadline is None else deadline - time.monotonic()
                if remaining is not None and remaining <= 0:
                    return False
                self._idle.wait(remaining)
            return True

    def shutdown(self, *, graceful: bool = False, timeout: float | None = None) -> None:
        with self._idle:
            if self._closed:
                return
            self._closed = True

        if graceful:
            self.wait_for_drain(timeout=timeout)

        for _ in self._workers:
            self._jobs.put(_STOP)
        for worker in self._workers:
            if worker.is_alive():
                worker.join(timeout=1.0)

    def _run_worker(self) -> None:
        while (job := self._jobs.get()) is not _STOP:
            client_socket, address = job
            try:
                self._handler(client_socket, address)
            finally:
                with self._idle:
                    self._pending -= 1
                    self._idle.notify_all()
