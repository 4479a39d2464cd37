"""
Global configuration settings for the literary explorer store.

This module centralizes configuration for:

    - key-value store root
    - key namespace
    - read-only mode
    - feature flags (logging, etc.)

It provides:
    LiteraryDBConfig  – structured config object
    load_config()     – load from environment variables or defaults
"""

from __future__ import annotations

from dataclasses import dataclass
import os


@dataclass
class LiteraryDBConfig:
    """
    Canonical configuration for the literary_db subsystem.

    Attributes
    ----------
    store_backend:
        Name of the backend: "local" or "memory".

    store_root:
        Directory where the local key-value backend persists values.

    namespace:
        Prefix applied to every key written by the application.

    read_only:
        If True, write operations raise PermissionError.

    enable_logging:
        Whether to enable internal debug logging.
    """

    store_backend: str = "local"
    store_root: str = "./literary_store_data"
    namespace: str = "literary-explorer"
    read_only: bool = False

    enable_logging: bool = False


def _env_flag(name: str, default: bool) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip().lower() in ("1", "true", "yes", "on")


def load_config() -> LiteraryDBConfig:
    """
    Load LiteraryDBConfig from environment variables, falling back to defaults.

    Recognized variables:
        LITGRAPH_STORE_BACKEND    (local|memory)
        LITGRAPH_STORE_ROOT       (directory path)
        LITGRAPH_STORE_NAMESPACE  (key prefix)
        LITGRAPH_STORE_READ_ONLY  ("true" / "false" / "1" / "0")
        LITGRAPH_ENABLE_LOGGING   ("true" / "false" / "1" / "0")

    Returns
    -------
    LiteraryDBConfig
    """
    return LiteraryDBConfig(
        store_backend=os.getenv("LITGRAPH_STORE_BACKEND", "local"),
        store_root=os.getenv(
            "LITGRAPH_STORE_ROOT",
            "./literary_store_data"
        ),
        namespace=os.getenv("LITGRAPH_STORE_NAMESPACE", "literary-explorer"),
        read_only=_env_flag("LITGRAPH_STORE_READ_ONLY", default=False),
        enable_logging=_env_flag(
            "LITGRAPH_ENABLE_LOGGING",
            default=False
        ),
    )
