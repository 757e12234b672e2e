"""Exception hierarchy and error-message rendering for docportal."""

from __future__ import annotations

import json
from typing import Any, Optional, Sequence


class DocPortalError(Exception):
    """
    Base exception for docportal.

    Attributes:
        details: Optional structured information (e.g., operation, path).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class PreconditionError(DocPortalError):
    """Raised when a required argument (session token, path, ...) is missing."""


class InvalidArgumentError(DocPortalError):
    """Raised on caller programming errors (empty candidate list, bad table)."""


class ConfigError(DocPortalError):
    """Raised when settings or a command table cannot be loaded."""


class CandidateTimeoutError(DocPortalError):
    """Raised for a single candidate that did not settle within its timeout."""


class ResolutionExhaustedError(DocPortalError):
    """
    Raised when every candidate for a logical operation failed.

    `cause` is always the last candidate's error; `errors` keeps every
    candidate error in attempt order for diagnostics.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        errors: Sequence[BaseException] = (),
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        merged: dict[str, Any] = {"operation": operation, "attempts": len(errors)}
        if details:
            merged.update(details)
        super().__init__(message, details=merged, cause=cause)
        self.operation = operation
        self.errors = list(errors)


class UnrecognizedResponseError(DocPortalError):
    """Raised when the backend returns a value that cannot be classified."""


class JobFailedError(DocPortalError):
    """Raised on request when the backend reported a failed index job."""


class ReconcileError(ResolutionExhaustedError):
    """
    Raised when a mutation succeeded but the authoritative refetch failed.

    It is the refetch's resolver error with `details["mutation_applied"]`
    set, so callers catching ResolutionExhaustedError see it too.
    """


def describe_error(err: object) -> str:
    """
    Render any error value as a human-readable message.

    Backends report failures as plain strings, mappings or exceptions; this
    gives all of them a stable text form.
    """
    if err is None:
        return "Unknown error"
    if isinstance(err, BaseException):
        text = str(err)
        return text if text else err.__class__.__name__
    if isinstance(err, str):
        return err
    try:
        return json.dumps(err, default=str)
    except (TypeError, ValueError):
        return str(err)
