"""Settings loaded from DOCPORTAL_* environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, TypeVar

from docportal.auth import DEFAULT_SESSION_KEY
from docportal.controller import DEFAULT_COMMAND_TABLE, CommandTable

from .command_table import load_command_table

logger = logging.getLogger(__name__)

T = TypeVar("T")

ENV_PREFIX = "DOCPORTAL_"


@dataclass(frozen=True)
class PortalSettings:
    poll_interval: float = 1.2  # seconds
    candidate_timeout: Optional[float] = None  # seconds, None = wait forever
    command_table_path: Optional[str] = None
    session_key: str = DEFAULT_SESSION_KEY
    search_limit: int = 200

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> PortalSettings:
        """
        Load settings from DOCPORTAL_* variables.

        Invalid values are logged and replaced by the defaults.
        """
        env = os.environ if environ is None else environ
        portal_vars = {k: v for k, v in env.items() if k.startswith(ENV_PREFIX)}
        if portal_vars:
            logger.debug(
                "PortalSettings.from_env: overrides: %s",
                ", ".join(sorted(portal_vars)),
            )

        interval_ms = _read(env, "DOCPORTAL_POLL_INTERVAL_MS", _non_negative_float, None)
        return cls(
            poll_interval=(
                interval_ms / 1000.0 if interval_ms is not None else cls.poll_interval
            ),
            candidate_timeout=_read(
                env, "DOCPORTAL_CANDIDATE_TIMEOUT", _positive_float, cls.candidate_timeout
            ),
            command_table_path=env.get("DOCPORTAL_COMMAND_TABLE") or None,
            session_key=env.get("DOCPORTAL_SESSION_KEY") or cls.session_key,
            search_limit=_read(env, "DOCPORTAL_SEARCH_LIMIT", _positive_int, cls.search_limit),
        )

    def command_table(self) -> CommandTable:
        """
        Effective command table (defaults plus YAML overrides, if configured).

        Raises:
            ConfigError: if the configured YAML file cannot be loaded.
        """
        if not self.command_table_path:
            return DEFAULT_COMMAND_TABLE
        return load_command_table(self.command_table_path)


def _read(env: Mapping[str, str], name: str, conv: Callable[[str], T], default: T) -> T:
    value = env.get(name)
    if value is None or not value.strip():
        return default
    try:
        return conv(value.strip())
    except ValueError:
        logger.warning("Ignoring invalid %s=%r; using default %r", name, value, default)
        return default


def _non_negative_float(value: str) -> float:
    out = float(value)
    if out != out or out < 0:
        raise ValueError(value)
    return out


def _positive_float(value: str) -> float:
    out = float(value)
    if out != out or out <= 0:
        raise ValueError(value)
    return out


def _positive_int(value: str) -> int:
    out = int(value)
    if out <= 0:
        raise ValueError(value)
    return out
