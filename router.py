"""Fixed-priority routing from request path and method to a handler."""

from collections.abc import Callable

from handlers.builtin_handlers import (
    ECHO_PREFIX,
    FILES_PREFIX,
    FileHandler,
    echo,
    greeting,
    header_lookup,
    not_found,
)
from request import HTTPRequest
from response import HTTPResponse

Handler = Callable[[HTTPRequest], HTTPResponse]


class Router:
    """Selects a handler; the order of the checks in ``resolve`` is significant.

    ``/files/...`` must be matched before the single-segment header lookup, and
    without a configured FileHandler every ``/files/...`` request is a 404.
    """

    def __init__(self, file_handler: FileHandler | None = None) -> None:
        self.file_handler = file_handler

    def resolve(self, request: HTTPRequest) -> Handler:
        path = request.path
        if path == "/":
            return greeting
        if path.startswith(ECHO_PREFIX):
            return echo
        if path.startswith(FILES_PREFIX):
            return self._resolve_files(request.method)
        if path.startswith("/") and "/" not in path[1:]:
            return header_lookup
        return not_found

    def _resolve_files(self, method: str) -> Handler:
        if self.file_handler is None:
            return not_found
        if method == "GET":
            return self.file_handler.read
        if method == "POST":
            return self.file_handler.write
        return not_found
