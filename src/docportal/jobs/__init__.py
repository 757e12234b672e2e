"""Index job orchestration for docportal."""

from __future__ import annotations

from .classify import classify_status
from .poller import DEFAULT_POLL_INTERVAL, JobPoller, PollHandle

__all__ = ["classify_status", "JobPoller", "PollHandle", "DEFAULT_POLL_INTERVAL"]
