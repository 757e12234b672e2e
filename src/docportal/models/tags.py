"""Known tag set."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable


class Tag(str, Enum):
    """Tags the client knows how to display."""

    STAR = "star"
    IMPORTANT = "imp"
    CONFIDENTIAL = "conf"


@dataclass(frozen=True)
class TagInfo:
    id: str
    name: str


SYSTEM_TAGS: tuple[TagInfo, ...] = (
    TagInfo(id=Tag.STAR.value, name="Star"),
    TagInfo(id=Tag.IMPORTANT.value, name="Important"),
    TagInfo(id=Tag.CONFIDENTIAL.value, name="Confidential"),
)


def tag_id(tag: str | Tag) -> str:
    return tag.value if isinstance(tag, Tag) else str(tag)


def tags_for_ids(ids: Iterable[str]) -> list[TagInfo]:
    """Known tags present in `ids`, in display order. Unknown ids are dropped."""
    wanted = set(ids)
    return [t for t in SYSTEM_TAGS if t.id in wanted]
