"""Low-level socket read/write utilities."""

from __future__ import annotations

import logging
import socket

from config import BUFFER_SIZE
from request import HTTPRequest, read_http_request
from response import INTERNAL_SERVER_ERROR, HTTPResponse

logger = logging.getLogger(__name__)


def read_client_request(client_socket: socket.socket) -> tuple[HTTPRequest, int]:
    """Parse one request off the socket and return it with the bytes consumed."""
    with client_socket.makefile("rb", buffering=BUFFER_SIZE) as reader:
        counting_reader = _CountingReader(reader)
        request = read_http_request(counting_reader)
    return request, counting_reader.bytes_read


def write_http_response(client_socket: socket.socket, payload: bytes) -> None:
    """Write the complete response payload to a client socket."""
    client_socket.sendall(payload)


def write_http_response_message(client_socket: socket.socket, response: HTTPResponse) -> int:
    """Send ``response``, falling back once to a bare 500 if the write fails.

    Returns the number of bytes of ``response`` written, which is 0 when the
    fallback path was taken. No write is retried.
    """
    payload = response.to_bytes()
    try:
        write_http_response(client_socket, payload)
    except OSError as exc:
        logger.warning("Could not write response to stream: %s", exc)
    else:
        return len(payload)

    try:
        write_http_response(client_socket, INTERNAL_SERVER_ERROR.to_bytes())
    except OSError as exc:
        logger.error("Could not write 500 to stream: %s", exc)
    return 0


class _CountingReader:
    """Wraps a binary reader and counts the bytes handed to the parser."""

    def __init__(self, reader) -> None:
        self._reader = reader
        self.bytes_read = 0

    def readline(self) -> bytes:
        line = self._reader.readline()
        self.bytes_read += len(line)
        return line

    def readinto(self, buffer) -> int:
        received = self._reader.readinto(buffer) or 0
        self.bytes_read += received
        return received
