"""
literary_db

Top-level package initializer for the literary explorer storage layer.

This module does not contain any logic.
It exposes configuration utilities and ensures the package loads cleanly.

Submodules include:
    - kv_store/
    - utils/

This root package exports only the global config loader for convenience.
"""

from .config import LiteraryDBConfig, load_config

__all__ = [
    "LiteraryDBConfig",
    "load_config",
]
