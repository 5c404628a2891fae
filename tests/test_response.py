"""Unit tests for HTTP response serialization."""

from response import HTTPResponse, empty_response, text_response


def test_response_without_body_is_status_line_only() -> None:
    assert empty_response(200).to_bytes() == b"HTTP/1.1 200 OK\r\n\r\n"
    assert empty_response(201).to_bytes() == b"HTTP/1.1 201 Created\r\n\r\n"
    assert empty_response(404).to_bytes() == b"HTTP/1.1 404 Not Found\r\n\r\n"
    assert empty_response(500).to_bytes() == b"HTTP/1.1 500 Internal Server Error\r\n\r\n"


def test_text_response_has_headers_and_trailing_blank_line() -> None:
    raw = text_response("hello").to_bytes()

    assert raw == (
        b"HTTP/1.1 200 OK\r\n"
        b"Content-Type: text/plain\r\n"
        b"Content-Length: 5\r\n"
        b"\r\n"
        b"hello\r\n\r\n"
    )


def test_empty_body_still_carries_headers() -> None:
    raw = text_response("").to_bytes()

    assert raw == b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\nContent-Length: 0\r\n\r\n\r\n\r\n"


def test_content_length_counts_encoded_bytes() -> None:
    raw = text_response("héllo").to_bytes()

    assert b"Content-Length: 6\r\n" in raw


def test_custom_content_type_and_reason_phrase() -> None:
    response = HTTPResponse(
        status_code=200,
        body=b"\x00\x01",
        content_type="application/octet-stream",
        reason_phrase="Fine",
    )

    raw = response.to_bytes()

    assert raw.startswith(b"HTTP/1.1 200 Fine\r\n")
    assert b"Content-Type: application/octet-stream\r\n" in raw
    assert raw.endswith(b"\r\n\r\n\x00\x01\r\n\r\n")
