"""Configuration defaults and the immutable server configuration value."""

from __future__ import annotations

from dataclasses import dataclass

HOST: str = "127.0.0.1"
PORT: int = 4221
BUFFER_SIZE: int = 4096
LISTEN_BACKLOG: int = 128
ACCEPT_TIMEOUT_SECS: float = 0.2
LOG_FORMAT: str = "plain"
LOG_FORMATS: tuple[str, ...] = ("plain", "json")


@dataclass(slots=True, frozen=True)
class ServerConfig:
    """Read-only settings shared by every connection after startup."""

    host: str = HOST
    port: int = PORT
    files_directory: str | None = None
    worker_count: int | None = None
    log_format: str = LOG_FORMAT

    def __post_init__(self) -> None:
        if self.worker_count is not None and self.worker_count <= 0:
            raise ValueError("worker_count must be positive")
        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"Unsupported log format: {self.log_format}")
