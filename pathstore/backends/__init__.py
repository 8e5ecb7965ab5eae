"""Storage backends for pathstore."""

from typing import Optional
from urllib.parse import urlparse

from .base import StorageBackend
from .memory import MemoryBackend
from .sqlite import SQLiteBackend

_default_backend: Optional[MemoryBackend] = None


def connect(url: str) -> StorageBackend:
    """Create and connect a backend from a URL.

    Supported URL schemes:
        - memory://          In-memory storage (testing)
        - sqlite:///path.db  SQLite file storage
        - sqlite:///:memory: SQLite in-memory

    Args:
        url: Connection URL

    Returns:
        Connected backend

    Example:
        backend = connect("sqlite:///settings.db")
        backend = connect("memory://")
    """
    parsed = urlparse(url)
    scheme = parsed.scheme

    if scheme == "memory":
        backend = MemoryBackend()
        backend.connect()
        return backend

    elif scheme == "sqlite":
        # Handle sqlite:///path and sqlite:///:memory:
        path = parsed.path
        if path.startswith("/"):
            path = path[1:]  # Remove leading slash from file path

        backend = SQLiteBackend()
        backend.connect(path=path if path else ":memory:")
        return backend

    else:
        raise ValueError(f"Unknown storage scheme: {scheme}")


def default_backend() -> MemoryBackend:
    """Return the process-wide in-memory backend, creating it on first use."""
    global _default_backend
    if _default_backend is None:
        _default_backend = MemoryBackend()
        _default_backend.connect()
    return _default_backend


__all__ = [
    "StorageBackend",
    "MemoryBackend",
    "SQLiteBackend",
    "connect",
    "default_backend",
]
