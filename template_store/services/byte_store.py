"""Key/value byte stores backing the local templates backend."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from template_store.config import settings
from template_store.utils.logger import logger


class ByteStore(ABC):
    """Abstract persistent store of opaque byte values addressed by key.

    Values are always read and written whole; there is no partial write.
    """

    @abstractmethod
    def read(self, key: str) -> Optional[bytes]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            Stored bytes, or None if the key has no value
        """
        pass

    @abstractmethod
    def write(self, key: str, data: bytes) -> None:
        """
        Overwrite the value stored under a key.

        Args:
            key: Storage key
            data: Bytes to store
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove the value stored under a key.

        Returns:
            True if deleted, False if the key had no value
        """
        pass

    def exists(self, key: str) -> bool:
        """Check if a key has a value."""
        return self.read(key) is not None


class FileByteStore(ByteStore):
    """Filesystem byte store: one file per key under a base directory."""

    def __init__(self, base_path: Path = None):
        """
        Initialize the file store.

        Args:
            base_path: Base directory for stored values. Defaults to settings.data_path
        """
        self.base_path = Path(base_path or settings.data_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _get_full_path(self, key: str) -> Path:
        """Get the full filesystem path for a storage key."""
        safe_key = key.lstrip("/").lstrip("\\")
        full_path = (self.base_path / safe_key).resolve()
        # Keys must not escape the base directory
        if not full_path.is_relative_to(self.base_path.resolve()):
            raise ValueError(f"Invalid storage key: {key}")
        return full_path

    def read(self, key: str) -> Optional[bytes]:
        full_path = self._get_full_path(key)
        if not full_path.is_file():
            return None
        return full_path.read_bytes()

    def write(self, key: str, data: bytes) -> None:
        full_path = self._get_full_path(key)
        full_path.parent.mkdir(parents=True, exist_ok=True)

        # Atomic replace
        tmp_path = full_path.with_name(full_path.name + ".tmp")
        tmp_path.write_bytes(data)
        tmp_path.replace(full_path)
        logger.debug(f"Wrote {len(data)} bytes to {key}")

    def delete(self, key: str) -> bool:
        full_path = self._get_full_path(key)
        if not full_path.is_file():
            return False
        full_path.unlink()
        logger.info(f"Deleted stored value: {key}")
        return True


class MemoryByteStore(ByteStore):
    """In-process byte store, used for ephemeral stores and tests."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self._values: Dict[str, bytes] = dict(initial or {})

    def read(self, key: str) -> Optional[bytes]:
        return self._values.get(key)

    def write(self, key: str, data: bytes) -> None:
        self._values[key] = bytes(data)

    def delete(self, key: str) -> bool:
        return self._values.pop(key, None) is not None
