"""docportal public API."""

from __future__ import annotations

from docportal.auth import BackendTokenStore, MemoryTokenStore, SessionAccessor, TokenStore
from docportal.config import PortalSettings, load_command_table
from docportal.controller import (
    DEFAULT_COMMAND_TABLE,
    Backend,
    CandidateSpec,
    CommandResolver,
    CommandTable,
    FieldSpec,
    FunctionBackend,
    PortalController,
)
from docportal.errors import (
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
from docportal.jobs import JobPoller, PollHandle, classify_status
from docportal.local import PortalStore, StoreEvent
from docportal.logsetup import setup_logging
from docportal.manager import PortalManager
from docportal.models import (
    DirectoryEntry,
    Drive,
    IndexOutcome,
    IndexSummaries,
    JobState,
    JobStatus,
    MutationOutcome,
    ProgressEvent,
    Tag,
    TagInfo,
)
from docportal.reconciler import MutationReconciler

__all__ = [
    # High-level
    "PortalManager",
    "PortalStore",
    "StoreEvent",
    "MutationReconciler",
    "JobPoller",
    "PollHandle",
    "classify_status",
    # Controller
    "Backend",
    "FunctionBackend",
    "PortalController",
    "CommandResolver",
    "CommandTable",
    "CandidateSpec",
    "FieldSpec",
    "DEFAULT_COMMAND_TABLE",
    # Auth / config
    "SessionAccessor",
    "TokenStore",
    "MemoryTokenStore",
    "BackendTokenStore",
    "PortalSettings",
    "load_command_table",
    "setup_logging",
    # Models
    "Drive",
    "DirectoryEntry",
    "JobState",
    "JobStatus",
    "ProgressEvent",
    "IndexOutcome",
    "IndexSummaries",
    "MutationOutcome",
    "Tag",
    "TagInfo",
    # Errors
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
