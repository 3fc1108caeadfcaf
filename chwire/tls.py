"""A process-wide registry of named TLS contexts."""

from __future__ import annotations

import ssl
import threading
from typing import Dict, Optional

__all__ = ["register_tls_config", "deregister_tls_config", "get_tls_config"]

_lock = threading.Lock()
_registry: Dict[str, ssl.SSLContext] = {}


def register_tls_config(key: str, context: ssl.SSLContext) -> None:
    """Register ``context`` under ``key``, replacing any earlier one."""
    if not isinstance(context, ssl.SSLContext):
        raise TypeError(f"expected ssl.SSLContext, got {type(context).__name__}")
    with _lock:
        _registry[key] = context


def deregister_tls_config(key: str) -> None:
    """Remove the context registered under ``key``, if any."""
    with _lock:
        _registry.pop(key, None)


def get_tls_config(key: str) -> Optional[ssl.SSLContext]:
    """Return the context registered under ``key``, or None."""
    with _lock:
        return _registry.get(key)