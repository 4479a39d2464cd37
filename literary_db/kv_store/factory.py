"""
Backend selection for the key-value store.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..config import LiteraryDBConfig, load_config
from .base import KeyValueStore, KeyValueStoreConfig
from .local_fs import LocalFSKeyValueStore
from .memory import InMemoryKeyValueStore

logger = logging.getLogger(__name__)


def open_store(config: Optional[LiteraryDBConfig] = None) -> KeyValueStore:
    """
    Construct the key-value store described by a LiteraryDBConfig.

    Unknown backend names raise ValueError.
    """
    cfg = config or load_config()

    if cfg.enable_logging:
        logging.basicConfig(level=logging.DEBUG)

    backend = cfg.store_backend.strip().lower()
    store_cfg = KeyValueStoreConfig(base_path=cfg.store_root, read_only=cfg.read_only)

    if backend == "local":
        logger.debug("Opening local key-value store at %s", cfg.store_root)
        return LocalFSKeyValueStore(store_cfg)
    if backend == "memory":
        logger.debug("Opening in-memory key-value store")
        return InMemoryKeyValueStore(store_cfg)

    raise ValueError(f"Unknown store backend: {cfg.store_backend!r}")
