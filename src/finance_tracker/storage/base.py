from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """String key-value storage, shaped like a browser's localStorage."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key is absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``; raises OSError if it cannot be written."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete ``key``; a missing key is not an error."""
        pass
