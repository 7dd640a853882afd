"""Observability helpers (logging) for hdlalign."""

from .logging import get_logger, log_fallback_event

__all__ = ["get_logger", "log_fallback_event"]
