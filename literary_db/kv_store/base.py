"""
Base key-value store interface for the literary explorer.

The store persists small JSON documents owned by the host application:
    - saved filter presets
    - session snapshots
    - cached API responses

Concrete implementations:
    - LocalFSKeyValueStore (local filesystem)
    - InMemoryKeyValueStore (process-local dict)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol


# ----------------------------------------------------------------------
# Configuration
# ----------------------------------------------------------------------

@dataclass
class KeyValueStoreConfig:
    """
    Configuration for a key-value store backend.

    Parameters
    ----------
    base_path : Optional[str]
        Root directory (unused by the in-memory store).
    read_only : bool
        If True, write operations should raise PermissionError.
    """
    base_path: Optional[str] = None
    read_only: bool = False


# ----------------------------------------------------------------------
# Protocol (interface)
# ----------------------------------------------------------------------

class KeyValueStore(Protocol):
    """
    Abstract interface used by the filter preset store and the host.

    Logical keys such as:
        "literary-explorer:saved-filters"
    map to real storage paths or dictionary slots.
    """

    config: KeyValueStoreConfig

    def exists(self, key: str) -> bool:
        """Return True if a value is stored under key."""
        raise NotImplementedError

    def get_bytes(self, key: str) -> bytes:
        """Return the stored value; raise KeyError if absent."""
        raise NotImplementedError

    def set_bytes(self, key: str, data: bytes) -> None:
        """Persist a value, replacing any previous one."""
        raise NotImplementedError

    def list(self, prefix: str = "") -> List[str]:
        """List all keys starting with prefix."""
        raise NotImplementedError

    def delete(self, key: str) -> None:
        """Delete a value if present and not read-only."""
        raise NotImplementedError
