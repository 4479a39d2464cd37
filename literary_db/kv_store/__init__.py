"""
Literary DB - key-value store package.

Provides:

    - KeyValueStoreConfig: backend configuration
    - KeyValueStore: protocol describing required interface
    - LocalFSKeyValueStore: default local filesystem implementation
    - InMemoryKeyValueStore: process-local store for tests and ephemeral sessions
    - open_store: build a backend from LiteraryDBConfig
"""

from .base import KeyValueStoreConfig, KeyValueStore
from .local_fs import LocalFSKeyValueStore
from .memory import InMemoryKeyValueStore
from .factory import open_store

__all__ = [
    "KeyValueStore",
    "KeyValueStoreConfig",
    "LocalFSKeyValueStore",
    "InMemoryKeyValueStore",
    "open_store",
]
