"""HTTP request model and stream parser.

Parsing never fails: a malformed start line, header line or Content-Length
degrades to an empty or default field and the request is still produced.
"""

from __future__ import annotations

import io
import logging
import sys
from collections.abc import Iterable, Iterator, MutableMapping
from dataclasses import dataclass, field
from typing import BinaryIO

HEADER_SEPARATOR = ": "
LINE_TERMINATORS = "\r\n"

logger = logging.getLogger(__name__)


class HeaderMap(MutableMapping[str, str]):
    """Header mapping whose keys are folded to lowercase on every access."""

    def __init__(self, items: Iterable[tuple[str, str]] = ()) -> None:
        self._items: dict[str, str] = {}
        for name, value in items:
            self[name] = value

    def __getitem__(self, name: str) -> str:
        return self._items[name.lower()]

    def __setitem__(self, name: str, value: str) -> None:
        self._items[name.lower()] = value

    def __delitem__(self, name: str) -> None:
        del self._items[name.lower()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, HeaderMap):
            return self._items == other._items
        if isinstance(other, dict):
            return self._items == {str(key).lower(): value for key, value in other.items()}
        return NotImplemented

    def __repr__(self) -> str:
        return f"HeaderMap({self._items!r})"


@dataclass(slots=True, frozen=True)
class HTTPRequest:
    method: str = ""
    path: str = ""
    headers: HeaderMap = field(default_factory=HeaderMap)
    body: bytes = b""

    @property
    def content_length(self) -> int | None:
        """Declared body length, or None when absent or not a plain integer."""
        return _parse_content_length(self.headers.get("content-length"))

    @classmethod
    def from_bytes(cls, raw: bytes) -> "HTTPRequest":
        """Parse an in-memory request message."""
        return read_http_request(io.BytesIO(raw))


def read_http_request(reader: BinaryIO) -> HTTPRequest:
    """Read one request from a binary stream such as ``socket.makefile("rb")``."""
    method, path = _parse_start_line(_read_line(reader))

    headers = HeaderMap()
    while True:
        line = _read_line(reader)
        if not line.rstrip(LINE_TERMINATORS):
            break
        name, separator, value = line.partition(HEADER_SEPARATOR)
        if not separator:
            continue
        headers[name] = value.rstrip(LINE_TERMINATORS)

    body = b""
    content_length = _parse_content_length(headers.get("content-length"))
    if content_length is not None:
        body = _read_body(reader, content_length)

    return HTTPRequest(method=method, path=path, headers=headers, body=body)


def _read_line(reader: BinaryIO) -> str:
    try:
        raw_line = reader.readline()
    except OSError:
        return ""
    return raw_line.decode("utf-8", errors="replace")


def _parse_start_line(line: str) -> tuple[str, str]:
    tokens = line.split()
    if len(tokens) < 2:
        return "", ""
    return tokens[0], tokens[1]


def _parse_content_length(value: str | None) -> int | None:
    if value is None:
        return None
    digits = value[1:] if value.startswith("+") else value
    if not (digits.isascii() and digits.isdigit()):
        return None
    length = int(digits)
    if length > sys.maxsize:
        return None
    return length


def _read_body(reader: BinaryIO, length: int) -> bytes:
    try:
        body = bytearray(length)
    except (MemoryError, OverflowError):
        logger.warning("Cannot allocate a %d byte body; treating it as empty", length)
        return b""

    # Bytes the peer never sends stay zero.
    view = memoryview(body)
    filled = 0
    while filled < length:
        try:
            received = reader.readinto(view[filled:])
        except OSError:
            break
        if not received:
            break
        filled += received
    return bytes(body)
