"""Logical operation -> ordered backend command candidates."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterator, Optional, Sequence

from docportal.errors import InvalidArgumentError
from docportal.util.casing import CAMEL, SNAKE

from .candidates import CandidateSpec

_of = CandidateSpec.of
_mapped = CandidateSpec.mapped


class CommandTable(Mapping[str, tuple[CandidateSpec, ...]]):
    """
    Immutable mapping of logical operation name to candidate specs.

    Order inside each list is the resolution order.
    """

    def __init__(self, entries: Optional[Mapping[str, Sequence[CandidateSpec]]] = None) -> None:
        self._entries: dict[str, tuple[CandidateSpec, ...]] = {}
        for op, specs in (entries or {}).items():
            self._entries[str(op)] = tuple(specs)

    def __getitem__(self, operation: str) -> tuple[CandidateSpec, ...]:
        return self._entries[operation]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"CommandTable({sorted(self._entries)})"

    def candidates(self, operation: str) -> tuple[CandidateSpec, ...]:
        """
        Candidate specs for `operation`.

        Raises:
            InvalidArgumentError: if the operation is not in the table.
        """
        try:
            return self._entries[operation]
        except KeyError as exc:
            raise InvalidArgumentError(
                "Unknown operation",
                details={"operation": operation},
            ) from exc

    def merged(self, overrides: Mapping[str, Sequence[CandidateSpec]]) -> CommandTable:
        """New table where each overridden operation's list is replaced."""
        entries = dict(self._entries)
        for op, specs in overrides.items():
            entries[str(op)] = tuple(specs)
        return CommandTable(entries)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> CommandTable:
        """
        Parse `{operation: [candidate entry, ...]}` as loaded from YAML.

        Raises:
            InvalidArgumentError: on a malformed table.
        """
        if not isinstance(data, Mapping):
            raise InvalidArgumentError(
                "Command table must be a mapping",
                details={"type": type(data).__name__},
            )

        entries: dict[str, list[CandidateSpec]] = {}
        for op, raw_specs in data.items():
            if not isinstance(raw_specs, list) or not raw_specs:
                raise InvalidArgumentError(
                    "Operation needs a non-empty candidate list",
                    details={"operation": op},
                )
            entries[str(op)] = [CandidateSpec.from_mapping(item) for item in raw_specs]
        return cls(entries)


def _both(command: str, *params: str) -> list[CandidateSpec]:
    return [_of(command, *params, casing=SNAKE), _of(command, *params, casing=CAMEL)]


def _camel_first(command: str, *params: str) -> list[CandidateSpec]:
    return [_of(command, *params, casing=CAMEL), _of(command, *params, casing=SNAKE)]


def _copy_candidates() -> list[CandidateSpec]:
    shapes: list[dict[str, str]] = [
        {"session_token": "session_token", "src_path": "src_path", "dst_path": "dst_path"},
        {"session_token": "session_token", "src_path": "src_path", "dest_path": "dst_path"},
        {"sessionToken": "session_token", "srcPath": "src_path", "dstPath": "dst_path"},
        {"sessionToken": "session_token", "srcPath": "src_path", "destPath": "dst_path"},
        {"session_token": "session_token", "src": "src_path", "dst": "dst_path"},
        {"session_token": "session_token", "from": "src_path", "to": "dst_path"},
    ]
    out: list[CandidateSpec] = []
    for shape in shapes:
        for command in ("fs_copy_by_session", "fs_copy", "copy_file"):
            out.append(_mapped(command, shape))
    out.append(_of("fsCopyBySession", "session_token", "src_path", "dst_path", casing=CAMEL))
    out.append(_of("copyFile", "session_token", "src_path", "dst_path", casing=CAMEL))
    return out


def _search_candidates() -> list[CandidateSpec]:
    paging = {"limit": "limit", "offset": "offset"}
    return [
        _mapped("search_files", {"session_token": "session_token", "q": "query", **paging}),
        _mapped("search_files", {"q": "query", **paging}),
        _mapped("search_files", {"query": "query", **paging}),
        _mapped("search_files", {"session_token": "session_token", "query": "query", **paging}),
        _mapped("search_files", {"sessionToken": "session_token", "q": "query", **paging}),
    ]


def _summary_candidates(command: str, camel_command: str) -> list[CandidateSpec]:
    return [
        _of(command, "limit"),
        _mapped(command, {"Limit": "limit"}),
        _of(camel_command, "limit"),
    ]


DEFAULT_COMMAND_TABLE = CommandTable(
    {
        # Token-less fallbacks come last; with no token only they apply.
        "list_drives": [
            _of("list_drives", "session_token", casing=CAMEL),
            _of("list_drives", "session_token"),
            _of("listDrives", "session_token", casing=CAMEL),
            _of("listDrives", "session_token"),
            _of("list_drives"),
            _of("listDrives"),
        ],
        "list_directory": [
            *_both("read_dir", "session_token", "path"),
            _of("read_dir", "path"),
        ],
        "search_files": _search_candidates(),
        "search_files_by_tag": [
            _mapped("search_files_by_tag", {"tag": "tag", "limit": "limit", "offset": "offset"}),
            _mapped("search_files_by_tag", {"Tag": "tag", "limit": "limit", "offset": "offset"}),
            _of("search_files_by_tag", "session_token", "tag", "limit", "offset", casing=CAMEL),
            _of("search_files_by_tag", "session_token", "tag", "limit", "offset"),
        ],
        "list_paths_by_tag": [
            _of("list_paths_by_tag", "session_token", "tag", casing=CAMEL),
            _of("list_paths_by_tag", "session_token", "tag"),
            _of("list_paths_by_tag", "tag"),
            _of("get_paths_by_tag", "tag"),
            _of("fs_list_paths_by_tag", "tag"),
            _mapped("list_paths_by_tag", {"Tag": "tag"}),
        ],
        "tag_path": _camel_first("fs_tag_item_by_session", "session_token", "path", "tag_id"),
        "untag_path": _camel_first("fs_untag_item_by_session", "session_token", "path", "tag_id"),
        "list_tags_for_path": [
            _of("fs_list_tags_by_session", "session_token", "path", casing=CAMEL),
            _of("fs_list_tags_by_session", "session_token", "path"),
            _of("fsListTagsBySession", "session_token", "path", casing=CAMEL),
            _of("fsListTagsBySession", "session_token", "path"),
            _of("fs_list_tags_by_session", "path"),
            _of("list_tags_for_path", "path"),
            _of("list_tags_by_path", "path"),
            _of("get_tags_for_path", "path"),
        ],
        "start_index_path": [
            *_both("index_path_start", "session_token", "root_path"),
            _mapped("indexPathStart", {"session_token": "session_token", "rootPath": "root_path"}),
            _of("index_path", "session_token", "root_path"),
        ],
        "start_index_all": [
            *_both("index_all_drives_start", "session_token"),
            _of("indexAllDrivesStart", "session_token"),
        ],
        "get_index_status": [
            *_both("get_index_status", "job_id"),
            *_both("getIndexStatus", "job_id"),
        ],
        "rename": [
            *_both("fs_rename_by_session", "session_token", "old_path", "new_path"),
            *_both("fs_rename", "session_token", "old_path", "new_path"),
            _of("fs_rename_by_session", "old_path", "new_path"),
            _mapped("rename_file", {"from": "old_path", "to": "new_path"}),
        ],
        "move": [
            *_both("fs_move_by_session", "session_token", "src_path", "dst_path"),
            *_both("fs_move", "session_token", "src_path", "dst_path"),
            *_both("fs_rename_by_session", "session_token", "src_path", "dst_path"),
            _mapped(
                "fs_move",
                {"sessionToken": "session_token", "srcPath": "src_path", "destPath": "dst_path"},
            ),
        ],
        "copy": _copy_candidates(),
        "delete": _both("fs_delete_by_session", "session_token", "path"),
        "create_directory": [
            *_both("fs_mkdir_by_session", "session_token", "path"),
            *_both("fs_mkdir", "session_token", "path"),
            _of("make_dir", "session_token", "path"),
        ],
        "create_file": [
            *_both("fs_create_file_by_session", "session_token", "path", "content?"),
            *_both("fs_create_file", "session_token", "path", "content?"),
            *_both("create_file", "session_token", "path", "content?"),
        ],
        "open_path": [
            *_both("open_path_by_session", "session_token", "path"),
            *_both("openPathBySession", "session_token", "path"),
            _of("open_path_by_session", "path"),
            _of("openPathBySession", "path"),
            _of("open_path", "session_token", "path"),
            _of("open", "path"),
        ],
        "get_files_per_drive": _summary_candidates("get_files_per_drive", "getFilesPerDrive"),
        "get_indexing_by_drive_and_type": _summary_candidates(
            "get_indexing_by_drive_and_type", "getIndexingByDriveAndType"
        ),
        "get_indexing_summary_global": [
            _of("get_indexing_summary_global"),
            _of("getIndexingSummaryGlobal"),
        ],
        "get_storage_info": [
            _of("get_storage_info_with_scan", "window?"),
            _of("get_storage_info_with_scan"),
            _of("getStorageInfoWithScan"),
        ],
        "validate_session": [
            _mapped(
                "validate_session",
                {"sessionToken": "session_token", "session_token": "session_token"},
            ),
            *_both("validate_session", "session_token"),
        ],
        "session_store_get": [_of("session_store_get", "key")],
        "session_store_set": [_of("session_store_set", "key", "token")],
        "session_store_clear": [_of("session_store_clear", "key")],
    }
)
