"""Observable in-memory client state (tag cache, listings, drives, jobs)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Literal, Optional

from docportal.models import DirectoryEntry, Drive, IndexSummaries, ProgressEvent
from docportal.util.paths import canonicalize, is_within, rebase

logger = logging.getLogger(__name__)

EventKind = Literal["tags", "listing", "drives", "summaries", "job"]


@dataclass(slots=True, frozen=True)
class StoreEvent:
    """
    Change notification.

    `key` is the canonical path for `tags`/`listing`, the job id for `job`,
    and None for `drives`/`summaries`.
    """

    kind: EventKind
    key: Optional[str] = None


Subscriber = Callable[[StoreEvent], None]


class PortalStore:
    """
    Single source of client-side truth.

    Notes:
        - Every key is a canonical path, so lookups ignore slash direction,
          long-path prefixes and trailing separators.
        - Each write notifies subscribers after the state has changed.
          Subscriber errors are logged and never undo or abort a write.
    """

    def __init__(self) -> None:
        self._tags: dict[str, tuple[str, ...]] = {}
        self._listings: dict[str, tuple[DirectoryEntry, ...]] = {}
        self._drives: tuple[Drive, ...] = ()
        self._summaries: Optional[IndexSummaries] = None
        self._jobs: dict[str, ProgressEvent] = {}
        self._subscribers: list[Subscriber] = []

    # ----------------------------
    # Subscriptions
    # ----------------------------
    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register `callback`; returns a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _emit(self, kind: EventKind, key: Optional[str] = None) -> None:
        event = StoreEvent(kind=kind, key=key)
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                logger.exception("Store subscriber failed on %s", event)

    # ----------------------------
    # Reads
    # ----------------------------
    def tags_for(self, path: str) -> Optional[tuple[str, ...]]:
        """Cached tag ids for `path`, or None when not cached."""
        return self._tags.get(canonicalize(path))

    def listing(self, directory: str) -> Optional[tuple[DirectoryEntry, ...]]:
        return self._listings.get(canonicalize(directory))

    def cached_directories(self) -> list[str]:
        return list(self._listings)

    def drives(self) -> tuple[Drive, ...]:
        return self._drives

    def summaries(self) -> Optional[IndexSummaries]:
        return self._summaries

    def job_progress(self, job_id: str) -> Optional[ProgressEvent]:
        return self._jobs.get(job_id)

    # ----------------------------
    # Tag cache
    # ----------------------------
    def set_tags(self, path: str, tag_ids: Iterable[str]) -> None:
        """Replace the cached tags of `path` wholesale."""
        key = canonicalize(path)
        self._tags[key] = tuple(tag_ids)
        self._emit("tags", key)

    def invalidate_tags(self, path: str, *, recursive: bool = False) -> None:
        key = canonicalize(path)
        if recursive:
            dropped = [k for k in self._tags if is_within(k, key)]
        else:
            dropped = [key] if key in self._tags else []
        for k in dropped:
            del self._tags[k]
            self._emit("tags", k)

    # ----------------------------
    # Listing cache
    # ----------------------------
    def set_listing(self, directory: str, entries: Iterable[DirectoryEntry]) -> None:
        key = canonicalize(directory)
        self._listings[key] = tuple(entries)
        self._emit("listing", key)

    def invalidate_listing(self, directory: str) -> None:
        key = canonicalize(directory)
        if self._listings.pop(key, None) is not None:
            self._emit("listing", key)

    def patch_listing_remove(self, path: str) -> list[str]:
        """
        Remove `path` and everything beneath it from every cached listing.

        Cached listings of removed directories are dropped too.

        Returns:
            Canonical keys of the listings that changed.
        """
        target = canonicalize(path)
        changed: list[str] = []
        for key in list(self._listings):
            if is_within(key, target):
                del self._listings[key]
                changed.append(key)
                continue
            entries = self._listings[key]
            kept = tuple(e for e in entries if not is_within(e.canonical_path, target))
            if len(kept) != len(entries):
                self._listings[key] = kept
                changed.append(key)
        for key in changed:
            self._emit("listing", key)
        return changed

    def patch_listing_rename(self, old_path: str, new_path: str) -> list[str]:
        """
        Rewrite entries at or beneath `old_path` to live under `new_path`.

        Cached listings of renamed directories are re-keyed.

        Returns:
            Canonical keys of the listings that changed (new keys for re-keyed
            listings).
        """
        old = canonicalize(old_path)
        new = canonicalize(new_path)
        changed: list[str] = []
        updated: dict[str, tuple[DirectoryEntry, ...]] = {}

        for key, entries in self._listings.items():
            new_key = rebase(key, old, new) if is_within(key, old) else key
            patched = tuple(
                e.with_path(rebase(e.canonical_path, old, new))
                if is_within(e.canonical_path, old)
                else e
                for e in entries
            )
            dirty = new_key != key or any(
                a.path != b.path for a, b in zip(entries, patched)
            )
            updated[new_key] = patched
            if dirty:
                changed.append(new_key)

        self._listings = updated
        for key in changed:
            self._emit("listing", key)
        return changed

    # ----------------------------
    # Drives / summaries / jobs
    # ----------------------------
    def set_drives(self, drives: Iterable[Drive]) -> None:
        self._drives = tuple(drives)
        self._emit("drives")

    def set_summaries(self, summaries: IndexSummaries) -> None:
        self._summaries = summaries
        self._emit("summaries")

    def set_job_progress(self, event: ProgressEvent) -> None:
        self._jobs[event.job_id] = event
        self._emit("job", event.job_id)

    def forget_job(self, job_id: str) -> None:
        if self._jobs.pop(job_id, None) is not None:
            self._emit("job", job_id)
