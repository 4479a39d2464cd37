"""
In-memory key-value store backend.

Values live in a plain dict for the lifetime of the instance. Used by the
test suite and by hosts that do not need persistence across restarts.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .base import KeyValueStore, KeyValueStoreConfig


class InMemoryKeyValueStore(KeyValueStore):
    def __init__(self, config: Optional[KeyValueStoreConfig] = None):
        self.config = config or KeyValueStoreConfig()
        self._data: Dict[str, bytes] = {}

    def exists(self, key: str) -> bool:
        return key in self._data

    def get_bytes(self, key: str) -> bytes:
        return self._data[key]

    def set_bytes(self, key: str, data: bytes) -> None:
        if self.config.read_only:
            raise PermissionError("KeyValueStore is in read-only mode")
        self._data[key] = bytes(data)

    def list(self, prefix: str = "") -> List[str]:
        return sorted(k for k in self._data if k.startswith(prefix))

    def delete(self, key: str) -> None:
        if self.config.read_only:
            raise PermissionError("KeyValueStore is in read-only mode")
        self._data.pop(key, None)
