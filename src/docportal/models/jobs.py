"""Index job state model."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Optional


class JobState(str, Enum):
    """Backend-reported job states, plus UNKNOWN for unrecognized payloads."""

    RUNNING = "running"
    FINISHED = "finished"
    FAILED = "failed"
    UNKNOWN = "unknown"

    @property
    def is_terminal(self) -> bool:
        return self is not JobState.RUNNING


@dataclass(slots=True, frozen=True)
class JobStatus:
    """One classified status observation for a job."""

    state: JobState
    processed: Optional[int] = None
    last_path: Optional[str] = None
    message: Optional[str] = None
    raw: Any = field(default=None, compare=False, repr=False)

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal


ProgressKind = Literal["started", "running", "finished", "failed", "unknown"]


@dataclass(slots=True, frozen=True)
class ProgressEvent:
    """
    Progress notification delivered to observers.

    `started` is synthetic: it means "request accepted" and is emitted before
    any backend status has been observed.
    """

    job_id: str
    kind: ProgressKind
    processed: Optional[int] = None
    last_path: Optional[str] = None
    message: Optional[str] = None
    raw: Any = field(default=None, compare=False, repr=False)

    @classmethod
    def from_status(cls, job_id: str, status: JobStatus) -> ProgressEvent:
        return cls(
            job_id=job_id,
            kind=status.state.value,  # type: ignore[arg-type]
            processed=status.processed,
            last_path=status.last_path,
            message=status.message,
            raw=status.raw,
        )
