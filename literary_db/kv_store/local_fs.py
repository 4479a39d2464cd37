"""
Local filesystem key-value store backend.

Each key maps to one file under `config.base_path`. Characters that are
awkward in file names (":" and "/") are escaped so that namespaced keys
such as "literary-explorer:saved-filters" stay flat and reversible.

Example mapping:
    key = "literary-explorer:saved-filters"
    real_path = "<base_path>/literary-explorer%3Asaved-filters"
"""

from __future__ import annotations

import os
from typing import List
from urllib.parse import quote, unquote

from .base import KeyValueStore, KeyValueStoreConfig


class LocalFSKeyValueStore(KeyValueStore):
    """
    Local filesystem implementation of KeyValueStore.

    The key namespace is entirely under config.base_path.
    """

    def __init__(self, config: KeyValueStoreConfig):
        if not config.base_path:
            raise ValueError("LocalFSKeyValueStore requires config.base_path")
        self.config = config
        os.makedirs(self.config.base_path, exist_ok=True)

    # ------------------------------------------------------------------
    # Key resolution
    # ------------------------------------------------------------------

    def _resolve(self, key: str) -> str:
        """
        Translate a logical key into a physical file path under base_path.

        Ensures:
          - non-empty keys
          - no path separators survive escaping
          - no path traversal
        """
        if not key or key in (".", ".."):
            raise ValueError(f"Invalid key: {key!r}")

        name = quote(key, safe="-_.")
        path = os.path.abspath(os.path.join(self.config.base_path, name))

        base = os.path.abspath(self.config.base_path)
        if os.path.dirname(path) != base:
            raise ValueError(f"Suspicious key outside root: {key}")

        return path

    # ------------------------------------------------------------------
    # Core interface
    # ------------------------------------------------------------------

    def exists(self, key: str) -> bool:
        return os.path.exists(self._resolve(key))

    def get_bytes(self, key: str) -> bytes:
        path = self._resolve(key)
        if not os.path.exists(path):
            raise KeyError(key)
        with open(path, "rb") as f:
            return f.read()

    def set_bytes(self, key: str, data: bytes) -> None:
        if self.config.read_only:
            raise PermissionError("KeyValueStore is in read-only mode")

        path = self._resolve(key)
        tmp = path + ".tmp"
        try:
            with open(tmp, "wb") as f:
                f.write(data)
            os.replace(tmp, path)
        except OSError:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise

    def list(self, prefix: str = "") -> List[str]:
        base = os.path.abspath(self.config.base_path)
        result: List[str] = []

        for name in os.listdir(base):
            full_path = os.path.join(base, name)
            if not os.path.isfile(full_path) or name.endswith(".tmp"):
                continue
            key = unquote(name)
            if key.startswith(prefix):
                result.append(key)

        return sorted(result)

    def delete(self, key: str) -> None:
        if self.config.read_only:
            raise PermissionError("KeyValueStore is in read-only mode")

        path = self._resolve(key)
        if os.path.exists(path):
            os.remove(path)
