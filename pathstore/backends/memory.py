"""In-memory storage backend."""

import fnmatch
from typing import Dict, Iterator, Optional

from .base import StorageBackend


class MemoryBackend(StorageBackend):
    """In-memory storage backend.

    Useful for testing and for sharing state between stores in one process.
    Data is lost when the backend is closed or the process ends.

    Example:
        backend = MemoryBackend()
        backend.connect()

        backend.put("settings", '{"n":1}')
        backend.get("settings")  # '{"n":1}'
    """

    def __init__(self):
        self._data: Dict[str, str] = {}
        self._connected = False

    def connect(self, **kwargs) -> None:
        """Initialize the in-memory store."""
        self._data = {}
        self._connected = True

    def close(self) -> None:
        """Clear the in-memory store."""
        self._data.clear()
        self._connected = False

    def get(self, key: str) -> Optional[str]:
        """Read the raw source for a key."""
        return self._data.get(key)

    def put(self, key: str, source: str) -> None:
        """Write the raw source for a key."""
        self._data[key] = source

    def delete(self, key: str) -> bool:
        """Delete the value for a key."""
        if key in self._data:
            del self._data[key]
            return True
        return False

    def exists(self, key: str) -> bool:
        """Check if a key exists."""
        return key in self._data

    def query(self, pattern: str) -> Iterator[str]:
        """Query keys matching a glob pattern."""
        for key in sorted(self._data.keys()):
            if fnmatch.fnmatchcase(key, pattern):
                yield key
