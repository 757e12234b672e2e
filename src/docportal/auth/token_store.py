"""Session token storage backends."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

from docportal.errors import DocPortalError, describe_error

if TYPE_CHECKING:  # pragma: no cover
    from docportal.controller import PortalController

logger = logging.getLogger(__name__)

DEFAULT_SESSION_KEY = "vaultguard_session_token"


@runtime_checkable
class TokenStore(Protocol):
    async def get(self) -> Optional[str]:
        ...

    async def set(self, token: str) -> bool:
        ...

    async def clear(self) -> bool:
        ...


class MemoryTokenStore:
    """Process-local token store."""

    def __init__(self, token: Optional[str] = None) -> None:
        self._token = token or None

    async def get(self) -> Optional[str]:
        return self._token

    async def set(self, token: str) -> bool:
        self._token = token
        return True

    async def clear(self) -> bool:
        self._token = None
        return True


class BackendTokenStore:
    """
    Token store backed by the backend's OS keyring commands.

    Keyring failures never raise: `get` reports None and `set`/`clear`
    report False, so a broken keyring does not block login or logout.
    """

    def __init__(self, controller: "PortalController", key: str = DEFAULT_SESSION_KEY) -> None:
        self._controller = controller
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    async def get(self) -> Optional[str]:
        try:
            token = await self._controller.session_store_get(self._key)
        except DocPortalError as exc:
            logger.error("Reading session token failed: %s", describe_error(exc))
            return None
        if not isinstance(token, str) or not token.strip():
            return None
        return token

    async def set(self, token: str) -> bool:
        try:
            res = await self._controller.session_store_set(self._key, token)
        except DocPortalError as exc:
            logger.error("Storing session token failed: %s", describe_error(exc))
            return False
        return res is True

    async def clear(self) -> bool:
        try:
            res = await self._controller.session_store_clear(self._key)
        except DocPortalError as exc:
            logger.error("Clearing session token failed: %s", describe_error(exc))
            return False
        return res is True
