"""Portal backend controller (internal use only)."""

from __future__ import annotations

import logging
from typing import Any, Optional

from docportal.errors import PreconditionError, UnrecognizedResponseError
from docportal.models import DirectoryEntry, Drive
from docportal.normalize import (
    extract_paths,
    extract_tag_ids,
    normalize_counts,
    normalize_drives,
    normalize_listing,
    normalize_user,
)
from docportal.util.paths import (
    as_listing_dir,
    looks_like_path,
    to_backend_path,
    to_long_path,
)

from .backend import Backend
from .candidates import CandidateSpec
from .commands import DEFAULT_COMMAND_TABLE, CommandTable
from .resolver import CommandResolver

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 200
DEFAULT_FILES_PER_DRIVE_LIMIT = 50
DEFAULT_BY_TYPE_LIMIT = 200


class PortalController:
    """
    One coroutine per logical backend operation.

    Notes:
        - Every call goes through the command table and the resolver;
          `Backend.invoke` is never called with a hard-coded name.
        - Paths are sent in backend form (native separator, no long-path
          prefix, no trailing separator); listings use the directory form.
        - Read results are normalized; mutation results are returned as-is.
    """

    def __init__(
        self,
        backend: Backend,
        *,
        table: Optional[CommandTable] = None,
        resolver: Optional[CommandResolver] = None,
    ) -> None:
        self._backend = backend
        self._table = table if table is not None else DEFAULT_COMMAND_TABLE
        self._resolver = resolver if resolver is not None else CommandResolver()

    @classmethod
    def from_backend(
        cls,
        backend: Backend,
        *,
        table: Optional[CommandTable] = None,
        candidate_timeout: Optional[float] = None,
    ) -> "PortalController":
        """Create a controller with a fresh resolver (useful for tests)."""
        return cls(
            backend,
            table=table,
            resolver=CommandResolver(candidate_timeout=candidate_timeout),
        )

    @property
    def table(self) -> CommandTable:
        return self._table

    # ----------------------------
    # Drives / listing / search
    # ----------------------------
    async def list_drives(self, session_token: Optional[str] = None) -> list[Drive]:
        raw = await self._call("list_drives", session_token=session_token or None)
        return normalize_drives(raw)

    async def list_directory(
        self,
        session_token: Optional[str],
        path: str,
    ) -> list[DirectoryEntry]:
        _require("path", path)
        raw = await self._call(
            "list_directory",
            session_token=session_token or None,
            path=as_listing_dir(path),
        )
        return normalize_listing(raw)

    async def search_files(
        self,
        session_token: Optional[str],
        query: Optional[str],
        limit: int = DEFAULT_SEARCH_LIMIT,
        offset: int = 0,
    ) -> list[DirectoryEntry]:
        if query is None or not str(query).strip():
            return []
        raw = await self._call(
            "search_files",
            session_token=session_token or None,
            query=str(query).strip(),
            limit=limit,
            offset=offset,
        )
        return normalize_listing(raw)

    async def search_files_by_tag(
        self,
        session_token: Optional[str],
        tag_id: Optional[str],
        limit: int = DEFAULT_SEARCH_LIMIT,
        offset: int = 0,
    ) -> list[DirectoryEntry]:
        if tag_id is None or not str(tag_id).strip():
            return []
        tag = str(tag_id)
        if looks_like_path(tag):
            tag = to_long_path(tag)
        raw = await self._call(
            "search_files_by_tag",
            session_token=session_token or None,
            tag=tag,
            limit=limit,
            offset=offset,
        )
        return normalize_listing(raw)

    async def list_paths_by_tag(
        self,
        session_token: Optional[str],
        tag_id: Optional[str],
    ) -> list[str]:
        if tag_id is None or not str(tag_id).strip():
            return []
        raw = await self._call(
            "list_paths_by_tag",
            session_token=session_token or None,
            tag=str(tag_id),
        )
        if not raw:
            return []
        return extract_paths(raw)

    async def open_path(self, session_token: Optional[str], path: str) -> Any:
        _require("path", path)
        return await self._call(
            "open_path",
            session_token=session_token or None,
            path=to_backend_path(path),
        )

    # ----------------------------
    # Tags
    # ----------------------------
    async def tag_path(self, session_token: str, path: str, tag_id: str) -> Any:
        _require("session_token", session_token)
        _require("path", path)
        _require("tag_id", tag_id)
        return await self._call(
            "tag_path",
            session_token=session_token,
            path=to_backend_path(path),
            tag_id=tag_id,
        )

    async def untag_path(self, session_token: str, path: str, tag_id: str) -> Any:
        _require("session_token", session_token)
        _require("path", path)
        _require("tag_id", tag_id)
        return await self._call(
            "untag_path",
            session_token=session_token,
            path=to_backend_path(path),
            tag_id=tag_id,
        )

    async def list_tags_for_path(
        self,
        session_token: Optional[str],
        path: str,
    ) -> list[str]:
        _require("path", path)
        raw = await self._call(
            "list_tags_for_path",
            session_token=session_token or None,
            path=to_backend_path(path),
        )
        return extract_tag_ids(raw)

    # ----------------------------
    # Indexing
    # ----------------------------
    async def start_index_job(
        self,
        session_token: str,
        root_path: Optional[str] = None,
    ) -> str:
        """
        Start an index job over `root_path`, or over every drive when None.

        Raises:
            UnrecognizedResponseError: if the result is not a non-blank string
                or an integer job id.
        """
        _require("session_token", session_token)
        if root_path is None:
            raw = await self._call("start_index_all", session_token=session_token)
        else:
            _require("root_path", root_path)
            raw = await self._call(
                "start_index_path",
                session_token=session_token,
                root_path=to_backend_path(root_path),
            )

        if isinstance(raw, int) and not isinstance(raw, bool):
            job_id = str(raw)
        elif isinstance(raw, str):
            job_id = raw.strip()
        else:
            job_id = ""
        if not job_id:
            raise UnrecognizedResponseError(
                "Backend returned no job id",
                details={"root_path": root_path, "raw": raw},
            )
        return job_id

    async def get_index_status(self, job_id: str) -> Any:
        """Raw status payload (`None` when the backend does not know the job)."""
        _require("job_id", job_id)
        return await self._call("get_index_status", job_id=job_id)

    async def get_files_per_drive(
        self,
        limit: int = DEFAULT_FILES_PER_DRIVE_LIMIT,
    ) -> list[tuple[str, int]]:
        raw = await self._call("get_files_per_drive", limit=limit)
        return normalize_counts(raw, 2)

    async def get_indexing_by_drive_and_type(
        self,
        limit: int = DEFAULT_BY_TYPE_LIMIT,
    ) -> list[tuple[str, str, int]]:
        raw = await self._call("get_indexing_by_drive_and_type", limit=limit)
        return normalize_counts(raw, 3)

    async def get_indexing_summary_global(self) -> list[tuple[str, int]]:
        raw = await self._call("get_indexing_summary_global")
        return normalize_counts(raw, 2)

    async def get_storage_info(self, window: Optional[str] = "24h") -> list[Drive]:
        raw = await self._call("get_storage_info", window=window or None)
        return normalize_drives(raw)

    # ----------------------------
    # Filesystem mutations
    # ----------------------------
    async def rename(self, session_token: str, old_path: str, new_path: str) -> Any:
        _require("session_token", session_token)
        _require("old_path", old_path)
        _require("new_path", new_path)
        return await self._call(
            "rename",
            session_token=session_token,
            old_path=to_backend_path(old_path),
            new_path=to_backend_path(new_path),
        )

    async def move(self, session_token: str, src_path: str, dst_path: str) -> Any:
        _require("session_token", session_token)
        _require("src_path", src_path)
        _require("dst_path", dst_path)
        return await self._call(
            "move",
            session_token=session_token,
            src_path=to_backend_path(src_path),
            dst_path=to_backend_path(dst_path),
        )

    async def copy(self, session_token: str, src_path: str, dst_path: str) -> Any:
        _require("session_token", session_token)
        _require("src_path", src_path)
        _require("dst_path", dst_path)
        return await self._call(
            "copy",
            session_token=session_token,
            src_path=to_backend_path(src_path),
            dst_path=to_backend_path(dst_path),
        )

    async def delete(self, session_token: str, path: str) -> Any:
        _require("session_token", session_token)
        _require("path", path)
        return await self._call(
            "delete",
            session_token=session_token,
            path=to_backend_path(path),
        )

    async def create_directory(self, session_token: str, path: str) -> Any:
        _require("session_token", session_token)
        _require("path", path)
        return await self._call(
            "create_directory",
            session_token=session_token,
            path=to_backend_path(path),
        )

    async def create_file(
        self,
        session_token: str,
        path: str,
        content: Optional[str] = None,
    ) -> Any:
        _require("session_token", session_token)
        _require("path", path)
        return await self._call(
            "create_file",
            session_token=session_token,
            path=to_backend_path(path),
            content=content,
        )

    # ----------------------------
    # Session
    # ----------------------------
    async def validate_session(self, session_token: str) -> Optional[dict[str, Any]]:
        """
        Ask the backend whether `session_token` is still valid.

        Returns:
            The user profile, or None when the backend accepted the token but
            sent no recognizable profile.

        Raises:
            ResolutionExhaustedError: if the backend rejected the session.
        """
        _require("session_token", session_token)
        raw = await self._call("validate_session", session_token=session_token)
        return normalize_user(raw)

    # ----------------------------
    # Session keyring
    # ----------------------------
    async def session_store_get(self, key: str) -> Any:
        return await self._call("session_store_get", key=key)

    async def session_store_set(self, key: str, token: str) -> Any:
        return await self._call("session_store_set", key=key, token=token)

    async def session_store_clear(self, key: str) -> Any:
        return await self._call("session_store_clear", key=key)

    # ----------------------------
    # Internals
    # ----------------------------
    async def _call(self, operation: str, **params: Any) -> Any:
        specs = self._table.candidates(operation)
        thunks = []
        for spec in specs:
            args = spec.bind(params)
            if args is None:
                continue
            thunks.append(self._thunk(spec, args))

        if not thunks:
            missing = sorted(
                {
                    f.param
                    for spec in specs
                    for f in spec.fields
                    if not f.optional and params.get(f.param) is None
                }
            )
            raise PreconditionError(
                "No applicable candidate",
                details={"operation": operation, "missing": missing},
            )

        logger.debug("%s: %d candidate(s)", operation, len(thunks))
        return await self._resolver.resolve(operation, thunks)

    def _thunk(self, spec: CandidateSpec, args: dict[str, Any]):
        backend = self._backend
        command = spec.command
        payload = args if spec.takes_args else None

        def call():
            return backend.invoke(command, payload)

        return call


def _require(name: str, value: Any) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise PreconditionError(f"{name} required", details={"argument": name})
