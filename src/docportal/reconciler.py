"""MutationReconciler: mutate through the backend, then refetch what is cached."""

from __future__ import annotations

import logging
from typing import Any, Optional

from docportal.auth import SessionAccessor
from docportal.controller import PortalController
from docportal.errors import (
    DocPortalError,
    PreconditionError,
    ReconcileError,
    ResolutionExhaustedError,
    describe_error,
)
from docportal.local import PortalStore
from docportal.models import MutationOutcome
from docportal.util.paths import canonicalize, parent_of, same_path

logger = logging.getLogger(__name__)


class MutationReconciler:
    """
    Apply tag and filesystem mutations and bring the store back in line.

    Policy:
        - Preconditions (token, paths, tag) are checked before any backend call.
        - A failed mutation raises the resolver's error and changes nothing.
        - Tag mutations: the path's tags are refetched and replace the cache
          entry. A failed refetch leaves the cache alone and raises
          ReconcileError, a ResolutionExhaustedError marked `mutation_applied`.
        - Filesystem mutations: cached listings are patched (a move into
          another directory drops the source entry), then every
          affected cached directory is re-listed. A failed re-listing keeps
          the patch and is reported in `MutationOutcome.refresh_failed`.
    """

    def __init__(
        self,
        controller: PortalController,
        store: PortalStore,
        session: SessionAccessor,
    ) -> None:
        self._controller = controller
        self._store = store
        self._session = session

    # ----------------------------
    # Tags
    # ----------------------------
    async def add_tag(
        self,
        path: str,
        tag_id: str,
        *,
        session_token: Optional[str] = None,
    ) -> MutationOutcome:
        _require_path(path)
        _require_tag(tag_id)
        token = await self._token(session_token)
        result = await self._controller.tag_path(token, path, tag_id)
        tags = await self._refetch_tags("add_tag", token, path)
        return MutationOutcome(operation="add_tag", result=result, tags=tags)

    async def remove_tag(
        self,
        path: str,
        tag_id: str,
        *,
        session_token: Optional[str] = None,
    ) -> MutationOutcome:
        _require_path(path)
        _require_tag(tag_id)
        token = await self._token(session_token)
        result = await self._controller.untag_path(token, path, tag_id)
        tags = await self._refetch_tags("remove_tag", token, path)
        return MutationOutcome(operation="remove_tag", result=result, tags=tags)

    # ----------------------------
    # Filesystem
    # ----------------------------
    async def rename(
        self,
        old_path: str,
        new_path: str,
        *,
        session_token: Optional[str] = None,
    ) -> MutationOutcome:
        _require_path(old_path, "old_path")
        _require_path(new_path, "new_path")
        token = await self._token(session_token)
        result = await self._controller.rename(token, old_path, new_path)
        self._apply_relocation(old_path, new_path)
        return await self._relist("rename", token, result, [old_path, new_path])

    async def move(
        self,
        src_path: str,
        dst_path: str,
        *,
        session_token: Optional[str] = None,
    ) -> MutationOutcome:
        _require_path(src_path, "src_path")
        _require_path(dst_path, "dst_path")
        token = await self._token(session_token)
        result = await self._controller.move(token, src_path, dst_path)
        self._apply_relocation(src_path, dst_path)
        return await self._relist("move", token, result, [src_path, dst_path])

    async def copy(
        self,
        src_path: str,
        dst_path: str,
        *,
        session_token: Optional[str] = None,
    ) -> MutationOutcome:
        _require_path(src_path, "src_path")
        _require_path(dst_path, "dst_path")
        token = await self._token(session_token)
        result = await self._controller.copy(token, src_path, dst_path)
        return await self._relist("copy", token, result, [dst_path])

    async def delete(self, path: str, *, session_token: Optional[str] = None) -> MutationOutcome:
        _require_path(path)
        token = await self._token(session_token)
        result = await self._controller.delete(token, path)
        self._store.patch_listing_remove(path)
        self._store.invalidate_tags(path, recursive=True)
        return await self._relist("delete", token, result, [path])

    async def create_directory(
        self,
        path: str,
        *,
        session_token: Optional[str] = None,
    ) -> MutationOutcome:
        _require_path(path)
        token = await self._token(session_token)
        result = await self._controller.create_directory(token, path)
        return await self._relist("create_directory", token, result, [path])

    async def create_file(
        self,
        path: str,
        content: Optional[str] = None,
        *,
        session_token: Optional[str] = None,
    ) -> MutationOutcome:
        _require_path(path)
        token = await self._token(session_token)
        result = await self._controller.create_file(token, path, content)
        return await self._relist("create_file", token, result, [path])

    # ----------------------------
    # Internals
    # ----------------------------
    async def _token(self, session_token: Optional[str]) -> str:
        if session_token:
            return session_token
        return await self._session.require_token()

    async def _refetch_tags(self, operation: str, token: str, path: str) -> tuple[str, ...]:
        try:
            tag_ids = await self._controller.list_tags_for_path(token, path)
        except ResolutionExhaustedError as exc:
            # Cached tags are left untouched.
            raise ReconcileError(
                f"{operation} applied but refreshing tags failed: {describe_error(exc)}",
                operation=exc.operation,
                errors=exc.errors,
                details={
                    "operation": operation,
                    "path": canonicalize(path),
                    "mutation_applied": True,
                },
                cause=exc.cause,
            ) from exc

        tags = tuple(tag_ids)
        self._store.set_tags(path, tags)
        return tags

    def _apply_relocation(self, old_path: str, new_path: str) -> None:
        if same_path(parent_of(old_path), parent_of(new_path)):
            self._store.patch_listing_rename(old_path, new_path)
        else:
            # The source listing loses the entry; the destination is re-listed.
            self._store.patch_listing_remove(old_path)
        self._store.invalidate_tags(old_path, recursive=True)

    async def _relist(
        self,
        operation: str,
        token: str,
        result: Any,
        touched: list[str],
    ) -> MutationOutcome:
        outcome = MutationOutcome(operation=operation, result=result)

        directories: list[str] = []
        for path in touched:
            parent = parent_of(path)
            if canonicalize(parent) not in (canonicalize(d) for d in directories):
                directories.append(parent)

        for directory in directories:
            if self._store.listing(directory) is None:
                continue
            try:
                entries = await self._controller.list_directory(token, directory)
            except DocPortalError as exc:
                logger.warning(
                    "Re-listing %s after %s failed: %s",
                    directory,
                    operation,
                    describe_error(exc),
                )
                outcome.refresh_failed.append(canonicalize(directory))
                continue
            self._store.set_listing(directory, entries)
            outcome.refreshed.append(canonicalize(directory))

        return outcome


def _require_path(path: Optional[str], name: str = "path") -> None:
    if path is None or not str(path).strip():
        raise PreconditionError(f"{name} required", details={"argument": name})


def _require_tag(tag_id: Optional[str]) -> None:
    if tag_id is None or not str(tag_id).strip():
        raise PreconditionError("tagId required", details={"argument": "tag_id"})
