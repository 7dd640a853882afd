"""Centralised logging helpers for hdlalign."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

_LOGGER_CACHE: Dict[str, logging.Logger] = {}


def get_logger(name: str = "hdlalign") -> logging.Logger:
    """Return a cached :class:`logging.Logger` instance."""

    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = logging.getLogger(name)
    return _LOGGER_CACHE[name]


def log_fallback_event(
    *,
    reason: str,
    path: Optional[str] = None,
    detail: Optional[str] = None,
    logger: Optional[logging.Logger] = None,
    extras: Optional[Dict[str, Any]] = None,
) -> None:
    """Emit a structured log entry when formatting drops to regex mode."""

    payload: Dict[str, Any] = {
        "reason": reason,
        "path": path or "<memory>",
    }
    if detail:
        payload["detail"] = detail
    if extras:
        payload.update(extras)
    target_logger = logger or get_logger("hdlalign.formatting.fallback")
    target_logger.warning(
        "Syntax tree unavailable, using regex alignment (%s)",
        reason,
        extra={"hdlalign_event": "fallback", "hdlalign_data": payload},
    )
