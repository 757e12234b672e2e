"""Configuration for docportal."""

from __future__ import annotations

from .command_table import load_command_table
from .settings import PortalSettings

__all__ = ["PortalSettings", "load_command_table"]
