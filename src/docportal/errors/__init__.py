"""Public error exports for docportal."""

from __future__ import annotations

from .exceptions import (
    CandidateTimeoutError,
    ConfigError,
    DocPortalError,
    InvalidArgumentError,
    JobFailedError,
    PreconditionError,
    ReconcileError,
    ResolutionExhaustedError,
    UnrecognizedResponseError,
    describe_error,
)

__all__ = [
    "DocPortalError",
    "PreconditionError",
    "InvalidArgumentError",
    "ConfigError",
    "CandidateTimeoutError",
    "ResolutionExhaustedError",
    "UnrecognizedResponseError",
    "JobFailedError",
    "ReconcileError",
    "describe_error",
]
