"""Public auth exports for docportal."""

from __future__ import annotations

from .session_accessor import SessionAccessor
from .token_store import DEFAULT_SESSION_KEY, BackendTokenStore, MemoryTokenStore, TokenStore

__all__ = [
    "SessionAccessor",
    "TokenStore",
    "MemoryTokenStore",
    "BackendTokenStore",
    "DEFAULT_SESSION_KEY",
]
