"""Byte-oriented file access under a configured root directory."""

from __future__ import annotations

import threading
from collections import defaultdict


class FileWriteError(OSError):
    """Raised when a file cannot be written; aborts the current connection."""


class FileStore:
    """Reads and writes whole files named ``root + name``.

    The root is concatenated as given, not joined or normalized, so a root of
    ``/tmp/r/`` and a name of ``a.txt`` address ``/tmp/r/a.txt``. Access to
    the same name is serialized by a per-name lock: a read never sees a
    partial write and the last writer wins.
    """

    def __init__(self, root: str) -> None:
        self.root = root
        self._locks: defaultdict[str, threading.Lock] = defaultdict(threading.Lock)
        self._locks_guard = threading.Lock()

    def resolve(self, name: str) -> str:
        return self.root + name

    def read_bytes(self, name: str) -> bytes:
        file_name = self.resolve(name)
        with self._lock_for(file_name):
            with open(file_name, "rb") as file_obj:
                return file_obj.read()

    def write_bytes(self, name: str, data: bytes) -> None:
        file_name = self.resolve(name)
        with self._lock_for(file_name):
            try:
                with open(file_name, "wb") as file_obj:
                    file_obj.write(data)
            except OSError as exc:
                raise FileWriteError(exc.errno, f"Unable to write file: {exc}", file_name) from exc

    def _lock_for(self, file_name: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks[file_name]
