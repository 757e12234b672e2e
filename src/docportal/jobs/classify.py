"""Classify raw index-status payloads into JobStatus."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from docportal.errors import describe_error
from docportal.models import JobState, JobStatus
from docportal.util.numbers import as_int

_VARIANTS: tuple[tuple[str, JobState], ...] = (
    ("Running", JobState.RUNNING),
    ("Finished", JobState.FINISHED),
    ("Failed", JobState.FAILED),
)


def _last_path(data: Mapping[str, Any]) -> Optional[str]:
    value = data.get("last_path", data.get("lastPath"))
    return value if isinstance(value, str) else None


def _message(data: Any) -> Optional[str]:
    if isinstance(data, Mapping):
        data = data.get("message")
    if data is None:
        return None
    return describe_error(data)


def _build(state: JobState, body: Any, raw: Any) -> JobStatus:
    if state is JobState.FAILED:
        return JobStatus(state=state, message=_message(body), raw=raw)
    data = body if isinstance(body, Mapping) else {}
    return JobStatus(
        state=state,
        processed=as_int(data.get("processed")),
        last_path=_last_path(data) if state is JobState.RUNNING else None,
        raw=raw,
    )


def classify_status(raw: Any) -> JobStatus:
    """
    Map a backend status payload to a JobStatus. Never raises.

    Accepted shapes:
        {"Running": {"processed": 10, "last_path": "C:\\\\x"}}
        {"Finished": {"processed": 30}}
        {"Failed": {"message": "disk error"}}
        {"state": "running", "processed": 10, "lastPath": "..."}

    Anything else (including None) is UNKNOWN.
    """
    if not isinstance(raw, Mapping):
        return JobStatus(state=JobState.UNKNOWN, raw=raw)

    for key, state in _VARIANTS:
        if key in raw and raw[key] is not None:
            return _build(state, raw[key], raw)

    flat = raw.get("state")
    if isinstance(flat, str):
        name = flat.strip().lower()
        for key, state in _VARIANTS:
            if name == key.lower():
                return _build(state, raw, raw)

    return JobStatus(state=JobState.UNKNOWN, raw=raw)
