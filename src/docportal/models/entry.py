"""Data model for directory listing and search entries."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Optional

from docportal.util.paths import basename_of, canonicalize, native_sep, to_backend_path


@dataclass(slots=True, frozen=True, eq=False)
class DirectoryEntry:
    """
    One filesystem object as listed by the backend.

    Identity is `canonical_path`: entries that differ only in slash
    direction, long-path prefix or trailing separators compare equal.
    """

    name: str
    path: str
    canonical_path: str
    is_dir: bool = False
    size: Optional[int] = None
    modified: Optional[datetime] = None
    raw: Any = field(default=None, repr=False)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DirectoryEntry):
            return NotImplemented
        return self.canonical_path == other.canonical_path

    def __hash__(self) -> int:
        return hash(self.canonical_path)

    @classmethod
    def create(
        cls,
        path: str,
        *,
        name: Optional[str] = None,
        is_dir: bool = False,
        size: Optional[int] = None,
        modified: Optional[datetime] = None,
        raw: Any = None,
    ) -> DirectoryEntry:
        canonical = canonicalize(path)
        return cls(
            name=name if name else basename_of(path),
            path=path,
            canonical_path=canonical,
            is_dir=is_dir,
            size=None if is_dir else size,
            modified=modified,
            raw=raw,
        )

    def with_path(self, new_path: str) -> DirectoryEntry:
        """Copy of this entry relocated to `new_path` (name follows the path)."""
        sep = native_sep(self.path)
        backend_path = to_backend_path(new_path, sep)
        return replace(
            self,
            name=basename_of(backend_path),
            path=backend_path,
            canonical_path=canonicalize(backend_path),
        )
