"""
Logging and host event helpers.

Engines accept an optional ``emit(kind, payload)`` callable so a host can
surface progress in its own UI. Messages always go to the module logger
as well; a faulty emit callback never breaks the call that logged.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

EmitFn = Callable[[str, Dict[str, Any]], None]

logger = logging.getLogger("literary_graphs")


def log_event(
    msg: str,
    emit: Optional[EmitFn] = None,
    *,
    level: int = logging.DEBUG,
    log: Optional[logging.Logger] = None,
    **payload: Any,
) -> None:
    (log or logger).log(level, msg)
    if emit is None:
        return
    try:
        emit("log", {"message": msg, **payload})
    except Exception:
        (log or logger).exception("emit callback failed for %r", msg)
