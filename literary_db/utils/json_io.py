"""
Safe JSON read/write helpers.

These functions guarantee:
- UTF-8 encoding
- deterministic indentation
- graceful failure on malformed files
- directory creation for writes
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional


def json_dumps_bytes(data: Any) -> bytes:
    """Serialise a JSON-compatible structure to UTF-8 bytes."""
    return json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")


def json_loads_bytes(raw: bytes) -> Any:
    """
    Parse UTF-8 JSON bytes.

    Raises ValueError (json.JSONDecodeError or UnicodeDecodeError) on
    malformed input; callers decide how to degrade.
    """
    return json.loads(raw.decode("utf-8"))


def json_read(path: Path) -> Optional[Any]:
    """
    Safely read and parse a JSON file.

    Parameters
    ----------
    path : Path
        Path to a JSON file.

    Returns
    -------
    Optional[Any]
        Parsed object if valid JSON, else None.
    """
    try:
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError):
        return None


def json_write(path: Path, data: Any) -> bool:
    """
    Safely write JSON with deterministic formatting.

    Parameters
    ----------
    path : Path
        Output JSON file path.
    data : Any
        JSON-serializable Python structure.

    Returns
    -------
    bool
        True if successfully written, False otherwise.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        return True
    except (OSError, TypeError, ValueError):
        return False
