"""PortalManager: wires controller, session, store, reconciler and poller."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional

from docportal.auth import BackendTokenStore, SessionAccessor, TokenStore
from docportal.config import PortalSettings
from docportal.controller import Backend, CommandTable, PortalController
from docportal.errors import DocPortalError, ResolutionExhaustedError, describe_error
from docportal.jobs import JobPoller
from docportal.jobs.poller import ProgressCallback
from docportal.local import PortalStore
from docportal.models import DirectoryEntry, Drive, IndexOutcome, MutationOutcome
from docportal.reconciler import MutationReconciler

logger = logging.getLogger(__name__)


class PortalManager:
    """
    High-level entry point for a UI.

    Policy:
        - Reads degrade to empty results on backend failure (logged).
        - Mutations go through the reconciler and raise on failure.
        - Indexing goes through the poller; the session token is required.
        - A saved session the backend rejects is invalidated (cleared).
    """

    def __init__(
        self,
        backend: Backend,
        token_store: Optional[TokenStore] = None,
        *,
        settings: Optional[PortalSettings] = None,
        table: Optional[CommandTable] = None,
    ) -> None:
        settings = settings if settings is not None else PortalSettings()
        controller = PortalController.from_backend(
            backend,
            table=table if table is not None else settings.command_table(),
            candidate_timeout=settings.candidate_timeout,
        )
        self._init(controller, token_store, settings, PortalStore(), None)

    @classmethod
    def from_controller(
        cls,
        controller: PortalController,
        token_store: Optional[TokenStore] = None,
        *,
        settings: Optional[PortalSettings] = None,
        store: Optional[PortalStore] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
    ) -> "PortalManager":
        """Create manager with an injected controller (useful for tests)."""
        obj = cls.__new__(cls)
        obj._init(
            controller,
            token_store,
            settings if settings is not None else PortalSettings(),
            store if store is not None else PortalStore(),
            sleep,
        )
        return obj

    def _init(
        self,
        controller: PortalController,
        token_store: Optional[TokenStore],
        settings: PortalSettings,
        store: PortalStore,
        sleep: Optional[Callable[[float], Awaitable[Any]]],
    ) -> None:
        if token_store is None:
            token_store = BackendTokenStore(controller, key=settings.session_key)
        self._settings = settings
        self._controller = controller
        self._store = store
        self._session = SessionAccessor(token_store)
        self._reconciler = MutationReconciler(controller, store, self._session)
        poller_kwargs: dict[str, Any] = {"store": store, "interval": settings.poll_interval}
        if sleep is not None:
            poller_kwargs["sleep"] = sleep
        self._poller = JobPoller(controller, **poller_kwargs)

    @property
    def controller(self) -> PortalController:
        return self._controller

    @property
    def session(self) -> SessionAccessor:
        return self._session

    @property
    def store(self) -> PortalStore:
        return self._store

    @property
    def reconciler(self) -> MutationReconciler:
        return self._reconciler

    @property
    def poller(self) -> JobPoller:
        return self._poller

    @property
    def settings(self) -> PortalSettings:
        return self._settings

    # ----------------------------
    # Session
    # ----------------------------
    async def restore_session(self) -> Optional[dict[str, Any]]:
        """
        Validate the saved session token and return the user profile.

        A token the backend rejects is cleared from the token store and None
        is returned. With no saved token nothing is called.
        """
        token = await self._session.get_token()
        if token is None:
            return None
        try:
            return await self._controller.validate_session(token)
        except ResolutionExhaustedError as exc:
            logger.warning("Saved session rejected: %s", describe_error(exc))
            await self._session.invalidate()
            return None

    # ----------------------------
    # Reads
    # ----------------------------
    async def load_drives(self) -> list[Drive]:
        token = await self._session.get_token()
        try:
            drives = await self._controller.list_drives(token)
        except DocPortalError as exc:
            _degraded("list_drives", exc)
            return []
        self._store.set_drives(drives)
        return drives

    async def open_directory(self, path: str) -> list[DirectoryEntry]:
        """Cached listing of `path`, fetched on first use."""
        cached = self._store.listing(path)
        if cached is not None:
            return list(cached)
        return await self.refresh_directory(path)

    async def refresh_directory(self, path: str) -> list[DirectoryEntry]:
        """Re-list `path`; on failure the cached listing is left untouched."""
        token = await self._session.get_token()
        try:
            entries = await self._controller.list_directory(token, path)
        except DocPortalError as exc:
            _degraded("list_directory", exc)
            return []
        self._store.set_listing(path, entries)
        return entries

    async def search(
        self,
        query: str,
        *,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[DirectoryEntry]:
        token = await self._session.get_token()
        try:
            return await self._controller.search_files(
                token,
                query,
                limit=limit if limit is not None else self._settings.search_limit,
                offset=offset,
            )
        except DocPortalError as exc:
            _degraded("search_files", exc)
            return []

    async def search_by_tag(
        self,
        tag_id: str,
        *,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[DirectoryEntry]:
        token = await self._session.get_token()
        try:
            return await self._controller.search_files_by_tag(
                token,
                tag_id,
                limit=limit if limit is not None else self._settings.search_limit,
                offset=offset,
            )
        except DocPortalError as exc:
            _degraded("search_files_by_tag", exc)
            return []

    async def paths_by_tag(self, tag_id: str) -> list[str]:
        token = await self._session.get_token()
        try:
            return await self._controller.list_paths_by_tag(token, tag_id)
        except DocPortalError as exc:
            _degraded("list_paths_by_tag", exc)
            return []

    async def load_tags(self, path: str) -> tuple[str, ...]:
        """
        Fetch and cache the tags of `path`.

        On failure the cached entry is kept and returned (empty if none).
        """
        token = await self._session.get_token()
        try:
            tag_ids = await self._controller.list_tags_for_path(token, path)
        except DocPortalError as exc:
            _degraded("list_tags_for_path", exc)
            return self._store.tags_for(path) or ()
        tags = tuple(tag_ids)
        self._store.set_tags(path, tags)
        return tags

    async def storage_info(self, window: str = "24h") -> list[Drive]:
        try:
            return await self._controller.get_storage_info(window)
        except DocPortalError as exc:
            _degraded("get_storage_info", exc)
            return []

    async def indexing_summary(self) -> list[tuple[str, int]]:
        try:
            return await self._controller.get_indexing_summary_global()
        except DocPortalError as exc:
            _degraded("get_indexing_summary_global", exc)
            return []

    async def open_path(self, path: str) -> Any:
        token = await self._session.get_token()
        return await self._controller.open_path(token, path)

    # ----------------------------
    # Mutations
    # ----------------------------
    async def add_tag(self, path: str, tag_id: str) -> MutationOutcome:
        return await self._reconciler.add_tag(path, tag_id)

    async def remove_tag(self, path: str, tag_id: str) -> MutationOutcome:
        return await self._reconciler.remove_tag(path, tag_id)

    async def rename(self, old_path: str, new_path: str) -> MutationOutcome:
        return await self._reconciler.rename(old_path, new_path)

    async def move(self, src_path: str, dst_path: str) -> MutationOutcome:
        return await self._reconciler.move(src_path, dst_path)

    async def copy(self, src_path: str, dst_path: str) -> MutationOutcome:
        return await self._reconciler.copy(src_path, dst_path)

    async def delete(self, path: str) -> MutationOutcome:
        return await self._reconciler.delete(path)

    async def create_directory(self, path: str) -> MutationOutcome:
        return await self._reconciler.create_directory(path)

    async def create_file(self, path: str, content: Optional[str] = None) -> MutationOutcome:
        return await self._reconciler.create_file(path, content)

    # ----------------------------
    # Indexing
    # ----------------------------
    async def index(
        self,
        scope: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> IndexOutcome:
        """Index `scope` (None = all drives) and wait for the outcome."""
        token = await self._session.require_token()
        return await self._poller.run_index_job(token, scope, on_progress)


def _degraded(operation: str, exc: DocPortalError) -> None:
    logger.warning("%s failed; returning empty result: %s", operation, describe_error(exc))
