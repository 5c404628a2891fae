"""HTTP response model and serializer."""

from __future__ import annotations

from dataclasses import dataclass

HTTP_VERSION = "HTTP/1.1"
CRLF = b"\r\n"

REASON_PHRASES: dict[int, str] = {
    200: "OK",
    201: "Created",
    404: "Not Found",
    500: "Internal Server Error",
}

TEXT_PLAIN = "text/plain"
OCTET_STREAM = "application/octet-stream"


@dataclass(slots=True, frozen=True)
class HTTPResponse:
    """A status line plus an optional typed body.

    ``body=None`` serializes to the status line and a blank line only. Any
    bytes body, empty included, gets Content-Type and Content-Length headers
    and is followed by an extra blank line that Content-Length does not count.
    """

    status_code: int
    body: bytes | None = None
    content_type: str = TEXT_PLAIN
    reason_phrase: str | None = None

    @property
    def reason(self) -> str:
        return self.reason_phrase or REASON_PHRASES.get(self.status_code, "Unknown")

    def to_bytes(self) -> bytes:
        """Serialize the response into wire format bytes."""
        status_line = f"{HTTP_VERSION} {self.status_code} {self.reason}".encode("iso-8859-1")
        if self.body is None:
            return status_line + CRLF + CRLF

        header_lines = [
            status_line,
            f"Content-Type: {self.content_type}".encode("iso-8859-1"),
            f"Content-Length: {len(self.body)}".encode("ascii"),
        ]
        head = CRLF.join(header_lines) + CRLF + CRLF
        return head + self.body + CRLF + CRLF


def text_response(text: str, status_code: int = 200) -> HTTPResponse:
    return HTTPResponse(status_code=status_code, body=text.encode("utf-8"))


def empty_response(status_code: int) -> HTTPResponse:
    return HTTPResponse(status_code=status_code)


NOT_FOUND = empty_response(404)
INTERNAL_SERVER_ERROR = empty_response(500)
