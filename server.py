"""Main HTTP server entry point and connection lifecycle orchestration."""

from __future__ import annotations

import argparse
import itertools
import json
import logging
import socket
import threading
import time

from config import (
    ACCEPT_TIMEOUT_SECS,
    HOST,
    LISTEN_BACKLOG,
    LOG_FORMAT,
    LOG_FORMATS,
    PORT,
    ServerConfig,
)
from file_store import FileStore, FileWriteError
from handlers.builtin_handlers import FileHandler
from request import HTTPRequest
from response import INTERNAL_SERVER_ERROR, HTTPResponse
from router import Router
from socket_handler import read_client_request, write_http_response_message
from thread_pool import ThreadPool

logger = logging.getLogger(__name__)

DRAIN_TIMEOUT_SECS = 5.0


class HTTPServer:
    """Accepts connections and answers exactly one request on each.

    Every connection runs on its own thread unless ``config.worker_count``
    caps concurrency, in which case connections queue for a fixed pool.
    """

    def __init__(self, config: ServerConfig | None = None, router: Router | None = None) -> None:
        self.config = config or ServerConfig()
        self.host = self.config.host
        self.port = self.config.port
        self.router = router or self._build_default_router()

        self._server_socket: socket.socket | None = None
        self._pool: ThreadPool | None = None
        self._connection_ids = itertools.count(1)
        self._running = False

    def _build_default_router(self) -> Router:
        if self.config.files_directory is None:
            return Router()
        return Router(FileHandler(FileStore(self.config.files_directory)))

    def start(self) -> None:
        """Bind, listen and serve until ``stop`` is called."""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as server_socket:
            self._server_socket = server_socket
            server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            server_socket.bind((self.host, self.port))
            server_socket.listen(LISTEN_BACKLOG)
            server_socket.settimeout(ACCEPT_TIMEOUT_SECS)
            self.port = server_socket.getsockname()[1]
            if self.config.worker_count is not None:
                self._pool = ThreadPool(
                    worker_count=self.config.worker_count,
                    handler=self._handle_client,
                )
                self._pool.start()

            logger.info("Listening on %s:%s", self.host, self.port)
            self._running = True
            try:
                while self._running:
                    try:
                        client_socket, address = server_socket.accept()
                    except socket.timeout:
                        continue
                    except OSError as exc:
                        if not self._running:
                            break
                        logger.warning("Failed to accept connection: %s", exc)
                        continue
                    self._dispatch_connection(client_socket, address)
            finally:
                if self._pool is not None:
                    self._pool.shutdown(graceful=True, timeout=DRAIN_TIMEOUT_SECS)
                    self._pool = None

    def stop(self) -> None:
        self._running = False
        if self._server_socket is not None:
            self._server_socket.close()
            self._server_socket = None

    def _dispatch_connection(self, client_socket: socket.socket, address: tuple[str, int]) -> None:
        # Client reads and writes never time out.
        client_socket.settimeout(None)
        if self._pool is not None:
            self._pool.submit(client_socket, address)
            return

        worker = threading.Thread(
            target=self._handle_client,
            args=(client_socket, address),
            name=f"http-conn-{next(self._connection_ids)}",
            daemon=True,
        )
        worker.start()

    def _handle_client(self, client_socket: socket.socket, address: tuple[str, int]) -> None:
        with client_socket:
            started_at = time.perf_counter()
            request, bytes_in = read_client_request(client_socket)
            handler = self.router.resolve(request)
            try:
                response = handler(request)
            except FileWriteError:
                logger.exception("Aborting connection from %s: file write failed", address[0])
                return
            except Exception:
                logger.exception("Unhandled error in route handler")
                response = INTERNAL_SERVER_ERROR

            bytes_sent = write_http_response_message(client_socket, response)
            self._record_and_log(
                address=address,
                request=request,
                response=response if bytes_sent else INTERNAL_SERVER_ERROR,
                bytes_in=bytes_in,
                bytes_out=bytes_sent,
                started_at=started_at,
            )

    def _record_and_log(
        self,
        *,
        address: tuple[str, int],
        request: HTTPRequest,
        response: HTTPResponse,
        bytes_in: int,
        bytes_out: int,
        started_at: float,
    ) -> None:
        duration_ms = (time.perf_counter() - started_at) * 1000
        event = {
            "client": address[0],
            "method": request.method or "-",
            "path": request.path or "-",
            "status": response.status_code,
            "bytes_in": bytes_in,
            "bytes_out": bytes_out,
            "latency_ms": round(duration_ms, 3),
        }
        if self.config.log_format == "json":
            logger.info(json.dumps(event, sort_keys=True))
            return

        logger.info(
            "client=%s method=%s path=%s status=%s bytes_in=%s bytes_out=%s duration_ms=%.2f",
            event["client"],
            event["method"],
            event["path"],
            event["status"],
            event["bytes_in"],
            event["bytes_out"],
            duration_ms,
        )


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the minimal HTTP server")
    parser.add_argument("--host", default=HOST)
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument(
        "--directory",
        default=None,
        help="Root for /files/ routes, prefixed verbatim to the file name",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Cap concurrent connections (default: one thread per connection)",
    )
    parser.add_argument("--log-format", choices=LOG_FORMATS, default=LOG_FORMAT)
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
    )
    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    return ServerConfig(
        host=args.host,
        port=args.port,
        files_directory=args.directory,
        worker_count=args.workers,
        log_format=args.log_format,
    )


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level)
    server = HTTPServer(config_from_args(args))
    try:
        server.start()
    except KeyboardInterrupt:
        server.stop()


if __name__ == "__main__":
    main()
