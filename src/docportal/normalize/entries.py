"""Listing, search, tag and summary payload normalization."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from docportal.errors import UnrecognizedResponseError
from docportal.models import DirectoryEntry
from docportal.util.numbers import as_int
from docportal.util.paths import looks_like_path
from docportal.util.time import parse_timestamp

logger = logging.getLogger(__name__)

_LIST_KEYS = ("entries", "items", "rows", "files")
_TRUE_STRINGS = {"1", "true", "yes", "dir", "directory"}


def _as_bool(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _rows_of(raw: Any, what: str) -> Optional[list[Any]]:
    if isinstance(raw, list):
        return raw
    if isinstance(raw, Mapping):
        for key in _LIST_KEYS:
            if isinstance(raw.get(key), list):
                return raw[key]
    if raw is not None:
        logger.warning("Unrecognized %s shape: %s", what, type(raw).__name__)
    return None


def normalize_entry(raw: Any) -> DirectoryEntry:
    """
    Build a DirectoryEntry from a listing/search row.

    Raises:
        UnrecognizedResponseError: if the row is not a mapping or has no path.
    """
    if isinstance(raw, DirectoryEntry):
        return raw
    if not isinstance(raw, Mapping):
        raise UnrecognizedResponseError(
            "Unrecognized entry payload",
            details={"type": type(raw).__name__},
        )

    path = raw.get("path") or raw.get("Path") or raw.get("full_path")
    if not isinstance(path, str) or not path.strip():
        raise UnrecognizedResponseError("Entry has no path", details={"raw": dict(raw)})

    is_dir = _as_bool(raw.get("is_dir", raw.get("isDir", False)))
    size = as_int(raw.get("size"))
    if size is not None and size < 0:
        size = None

    modified = None
    for key in ("modified", "modified_at", "mtime", "indexed_at"):
        if raw.get(key) is not None:
            modified = parse_timestamp(raw[key])
            break

    name = raw.get("name")
    return DirectoryEntry.create(
        path,
        name=name if isinstance(name, str) and name.strip() else None,
        is_dir=is_dir,
        size=size,
        modified=modified,
        raw=raw,
    )


def normalize_listing(raw: Any) -> list[DirectoryEntry]:
    """
    Normalize a listing/search response into entries.

    Unrecognized shapes give an empty list; unreadable rows are skipped.
    """
    rows = _rows_of(raw, "listing")
    if rows is None:
        return []

    out: list[DirectoryEntry] = []
    for row in rows:
        try:
            out.append(normalize_entry(row))
        except UnrecognizedResponseError:
            logger.warning("Skipping unrecognized listing row: %r", row)
    return out


def extract_tag_ids(raw: Any) -> list[str]:
    """
    Tag ids from a tag-list response.

    Rows may be plain ids, `(id, tag, created_by, created_at)` tuples, or
    objects carrying `tag`/`tag_id`/`tagId`. Order is kept, duplicates dropped.
    """
    rows = _rows_of(raw, "tag list")
    if rows is None:
        return []

    ids: list[str] = []
    for row in rows:
        value: Any = None
        if isinstance(row, str):
            value = row
        elif isinstance(row, (list, tuple)) and row:
            value = row[1] if len(row) > 1 else row[0]
        elif isinstance(row, Mapping):
            value = row.get("tag", row.get("tag_id", row.get("tagId")))
        if value is None or (isinstance(value, str) and not value.strip()):
            logger.warning("Skipping unrecognized tag row: %r", row)
            continue
        tag = str(value)
        if tag not in ids:
            ids.append(tag)
    return ids


def extract_paths(raw: Any) -> list[str]:
    """Paths from a paths-by-tag response (strings, tuples or objects)."""
    rows = _rows_of(raw, "path list")
    if rows is None:
        return []

    out: list[str] = []
    for row in rows:
        if isinstance(row, str):
            out.append(row)
        elif isinstance(row, (list, tuple)) and row:
            found = next((x for x in row if looks_like_path(x)), None)
            if found is None:
                found = str(row[1] if len(row) > 1 else row[0])
            out.append(found)
        elif isinstance(row, Mapping):
            value = row.get("path") or row.get("Path")
            if isinstance(value, str):
                out.append(value)
            else:
                logger.warning("Skipping unrecognized path row: %r", row)
    return out


def normalize_counts(raw: Any, width: int) -> list[tuple]:
    """
    Summary rows as tuples of `width` items, the last one being an int count.

    `width=2` gives `(drive, count)`, `width=3` gives `(drive, type, count)`.
    Object rows are read from `drive`, `file_type`/`type`/`category` and
    `count`/`cnt`/`total`/`files`.
    """
    rows = _rows_of(raw, "summary")
    if rows is None:
        return []

    out: list[tuple] = []
    for row in rows:
        if isinstance(row, (list, tuple)) and len(row) >= width:
            labels = [str(x) if x is not None else "unknown" for x in row[: width - 1]]
            count = as_int(row[width - 1])
        elif isinstance(row, Mapping):
            labels = [str(row.get("drive") or "unknown")]
            if width == 3:
                kind = row.get("file_type") or row.get("type") or row.get("category")
                labels.append(str(kind or "unknown"))
            count = None
            for key in ("count", "cnt", "total", "files", "filesCount"):
                count = as_int(row.get(key))
                if count is not None:
                    break
        else:
            logger.warning("Skipping unrecognized summary row: %r", row)
            continue
        if count is None:
            logger.warning("Skipping summary row without a count: %r", row)
            continue
        out.append((*labels, count))
    return out
