"""Built-in route handlers."""

import logging

from file_store import FileStore
from request import HTTPRequest
from response import NOT_FOUND, OCTET_STREAM, HTTPResponse, empty_response, text_response

logger = logging.getLogger(__name__)

ECHO_PREFIX = "/echo/"
FILES_PREFIX = "/files/"


def greeting(request: HTTPRequest) -> HTTPResponse:
    _ = request
    return empty_response(200)


def echo(request: HTTPRequest) -> HTTPResponse:
    _before, separator, text = request.path.partition(ECHO_PREFIX)
    if not separator:
        text = ""
    return text_response(text)


def header_lookup(request: HTTPRequest) -> HTTPResponse:
    """Return the value of the header named by the single path segment."""
    header_name = request.path.split("/")[1] if request.path.startswith("/") else ""
    value = request.headers.get(header_name)
    if value is None:
        return NOT_FOUND
    return text_response(value)


def not_found(request: HTTPRequest) -> HTTPResponse:
    _ = request
    return NOT_FOUND


def file_name_from_path(path: str) -> str:
    _before, separator, name = path.partition(FILES_PREFIX)
    return name if separator else ""


class FileHandler:
    """Serves ``GET`` and ``POST`` on ``/files/<name>`` from a FileStore."""

    def __init__(self, store: FileStore) -> None:
        self.store = store

    def read(self, request: HTTPRequest) -> HTTPResponse:
        name = file_name_from_path(request.path)
        try:
            contents = self.store.read_bytes(name)
        except OSError as exc:
            logger.debug("File read failed for %r: %s", name, exc)
            return NOT_FOUND
        return HTTPResponse(status_code=200, body=contents, content_type=OCTET_STREAM)

    def write(self, request: HTTPRequest) -> HTTPResponse:
        # FileWriteError propagates to the connection supervisor.
        self.store.write_bytes(file_name_from_path(request.path), request.body)
        return empty_response(201)
