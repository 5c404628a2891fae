"""Tests for the optional fixed-size worker pool."""

import threading
import time

import pytest

from thread_pool import ThreadPool


def test_thread_pool_rejects_non_positive_worker_count() -> None:
    with pytest.raises(ValueError, match="worker_count must be positive"):
        ThreadPool(worker_count=0, handler=lambda _sock, _addr: None)


def test_thread_pool_runs_up_to_worker_count_jobs_at_once() -> None:
    running = 0
    peak = 0
    lock = threading.Lock()

    def handler(_sock: object, _address: tuple[str, int]) -> None:
        nonlocal running, peak
        with lock:
            running += 1
            peak = max(peak, running)
        time.sleep(0.05)
        with lock:
            running -= 1

    pool = ThreadPool(worker_count=2, handler=handler)
    pool.start()
    try:
        for port in range(6):
            pool.submit(object(), ("127.0.0.1", port))
        assert pool.wait_for_drain(timeout=5)
    finally:
        pool.shutdown()

    assert peak == 2


def test_thread_pool_queues_jobs_beyond_worker_count() -> None:
    handled: list[int] = []
    lock = threading.Lock()

    def handler(_sock: object, address: tuple[str, int]) -> None:
        time.sleep(0.02)
        with lock:
            handled.append(address[1])

    pool = ThreadPool(worker_count=1, handler=handler)
    pool.start()
    try:
        for port in range(10):
            pool.submit(object(), ("127.0.0.1", port))
        assert pool.wait_for_drain(timeout=5)
    finally:
        pool.shutdown()

    assert handled == list(range(10))


def test_wait_for_drain_times_out_while_job_runs() -> None:
    release = threading.Event()
    pool = ThreadPool(worker_count=1, handler=lambda _sock, _addr: release.wait(5))
    pool.start()
    try:
        pool.submit(object(), ("127.0.0.1", 0))
        assert pool.wait_for_drain(timeout=0.1) is False
        release.set()
        assert pool.wait_for_drain(timeout=5) is True
    finally:
        release.set()
        pool.shutdown()


def test_graceful_shutdown_finishes_queued_jobs() -> None:
    handled: list[int] = []
    pool = ThreadPool(worker_count=1, handler=lambda _sock, address: handled.append(address[1]))
    pool.start()
    for port in range(3):
        pool.submit(object(), ("127.0.0.1", port))

    pool.shutdown(graceful=True, timeout=5)

    assert handled == [0, 1, 2]


def test_thread_pool_refuses_jobs_after_shutdown() -> None:
    pool = ThreadPool(worker_count=1, handler=lambda _sock, _addr: None)
    pool.start()
    pool.shutdown()

    with pytest.raises(RuntimeError, match="shutting down"):
        pool.submit(object(), ("127.0.0.1", 0))
