from .json_io import json_dumps_bytes, json_loads_bytes, json_read, json_write

__all__ = [
    "json_dumps_bytes",
    "json_loads_bytes",
    "json_read",
    "json_write",
]
