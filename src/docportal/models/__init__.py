"""Public model exports for docportal."""

from __future__ import annotations

from .drive import Drive
from .entry import DirectoryEntry
from .jobs import JobState, JobStatus, ProgressEvent, ProgressKind
from .results import IndexOutcome, IndexSummaries, MutationOutcome
from .tags import SYSTEM_TAGS, Tag, TagInfo, tag_id, tags_for_ids

__all__ = [
    "Drive",
    "DirectoryEntry",
    "JobState",
    "JobStatus",
    "ProgressEvent",
    "ProgressKind",
    "IndexOutcome",
    "IndexSummaries",
    "MutationOutcome",
    "Tag",
    "TagInfo",
    "SYSTEM_TAGS",
    "tag_id",
    "tags_for_ids",
]
