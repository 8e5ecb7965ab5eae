"""Abstract base class for storage backends."""

from abc import ABC, abstractmethod
from typing import Iterator, Optional


class StorageBackend(ABC):
    """Abstract base class for storage backends.

    A backend is a synchronous key-value medium holding one raw serialized
    string per key. Backends never parse what they store; the Store owns
    serialization, validation and conflict detection.
    """

    @abstractmethod
    def connect(self, **kwargs) -> None:
        """Establish connection to storage.

        Args:
            **kwargs: Backend-specific connection parameters
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Close connection and release resources."""
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Read the raw source stored under a key.

        Args:
            key: The store name

        Returns:
            The stored string, or None if nothing is stored
        """
        pass

    @abstractmethod
    def put(self, key: str, source: str) -> None:
        """Write the raw source for a key, replacing any previous value.

        Args:
            key: The store name
            source: Serialized value
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete the value stored under a key.

        Returns:
            True if a value existed and was deleted, False if not found
        """
        pass

    def exists(self, key: str) -> bool:
        """Check if a value is stored under a key."""
        return self.get(key) is not None

    @abstractmethod
    def query(self, pattern: str) -> Iterator[str]:
        """Query keys matching a glob pattern.

        Args:
            pattern: Glob pattern (e.g., "settings.*")

        Yields:
            Matching keys in sorted order
        """
        pass
