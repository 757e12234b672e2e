"""Backend payload normalizers."""

from __future__ import annotations

from .drives import normalize_drive, normalize_drives
from .entries import (
    extract_paths,
    extract_tag_ids,
    normalize_counts,
    normalize_entry,
    normalize_listing,
)
from .session import normalize_user

__all__ = [
    "normalize_drive",
    "normalize_drives",
    "normalize_entry",
    "normalize_listing",
    "extract_tag_ids",
    "extract_paths",
    "normalize_counts",
    "normalize_user",
]
