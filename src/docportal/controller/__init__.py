"""Internal controller exports for docportal."""

from __future__ import annotations

from .backend import Backend, FunctionBackend
from .candidates import CandidateSpec, FieldSpec
from .commands import DEFAULT_COMMAND_TABLE, CommandTable
from .portal_controller import PortalController
from .resolver import CommandResolver

__all__ = [
    "Backend",
    "FunctionBackend",
    "CandidateSpec",
    "FieldSpec",
    "CommandTable",
    "DEFAULT_COMMAND_TABLE",
    "CommandResolver",
    "PortalController",
]
