"""Single access point for the current session token."""

from __future__ import annotations

import logging
from typing import Optional

from docportal.errors import PreconditionError

from .token_store import TokenStore

logger = logging.getLogger(__name__)


class SessionAccessor:
    """
    Read/write the session token through a TokenStore.

    Nothing is cached here; every read goes to the store.
    """

    def __init__(self, store: TokenStore) -> None:
        self._store = store

    @property
    def store(self) -> TokenStore:
        return self._store

    async def get_token(self) -> Optional[str]:
        token = await self._store.get()
        if isinstance(token, str) and token.strip():
            return token
        return None

    async def require_token(self) -> str:
        """
        Raises:
            PreconditionError: if no session token is available.
        """
        token = await self.get_token()
        if token is None:
            raise PreconditionError("sessionToken required (no saved session)")
        return token

    async def set_token(self, token: str) -> bool:
        if not isinstance(token, str) or not token.strip():
            raise PreconditionError("token required")
        return await self._store.set(token)

    async def clear(self) -> bool:
        return await self._store.clear()

    async def invalidate(self) -> None:
        """Drop the token after the backend rejected the session."""
        logger.info("Session invalidated; clearing stored token")
        await self._store.clear()
