"""Client-side state for docportal."""

from __future__ import annotations

from .store import PortalStore, StoreEvent

__all__ = ["PortalStore", "StoreEvent"]
