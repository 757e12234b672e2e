"""Result models for indexing runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from docportal.errors import JobFailedError

from .jobs import JobState, JobStatus


@dataclass(slots=True)
class IndexSummaries:
    """Aggregate counts refreshed after an index job ends."""

    files_per_drive: list[tuple[str, int]] = field(default_factory=list)
    by_drive_and_type: list[tuple[str, str, int]] = field(default_factory=list)


@dataclass(slots=True)
class IndexOutcome:
    """
    Final result of one polling session.

    The summary refresh is reported separately: `summary_error` being set
    never changes `status`.
    """

    job_id: str
    status: JobStatus
    summaries: Optional[IndexSummaries] = None
    summary_error: Optional[str] = None
    cancelled: bool = False

    @property
    def state(self) -> JobState:
        return self.status.state

    @property
    def processed(self) -> Optional[int]:
        return self.status.processed

    def raise_for_status(self) -> None:
        """Raise JobFailedError if the backend reported the job as failed."""
        if self.status.state is JobState.FAILED:
            raise JobFailedError(
                self.status.message or "Index job failed",
                details={"job_id": self.job_id},
            )


@dataclass(slots=True)
class MutationOutcome:
    """
    Result of one reconciled mutation.

    The mutation itself succeeded; `refresh_failed` lists cached directories
    whose re-listing failed and which still hold the locally patched view.
    """

    operation: str
    result: Any = None
    tags: Optional[tuple[str, ...]] = None
    refreshed: list[str] = field(default_factory=list)
    refresh_failed: list[str] = field(default_factory=list)

    @property
    def fully_refreshed(self) -> bool:
        return not self.refresh_failed
