"""YAML command table overrides.

Example YAML:
    tag_path:
      - command: fs_tag_item_by_session
        casing: camel
        params: [session_token, path, tag_id]
    rename:
      - command: rename_file
        fields: {from: old_path, to: new_path}
    create_file:
      - command: create_file
        params: [session_token, path, "content?"]

A `?` suffix marks an optional param; inside a `[...]` flow list the entry
must be quoted, since a bare `?` is a YAML indicator there.

Each listed operation replaces the default candidate list for that
operation; unlisted operations keep their defaults.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import yaml

from docportal.controller import DEFAULT_COMMAND_TABLE, CommandTable
from docportal.errors import ConfigError, InvalidArgumentError

logger = logging.getLogger(__name__)


def load_command_table(
    path: Union[str, Path],
    *,
    base: Optional[CommandTable] = None,
) -> CommandTable:
    """
    Load overrides from `path` and merge them over `base` (default table).

    Raises:
        ConfigError: if the file cannot be read, is not valid YAML, or does
            not describe a command table.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except OSError as exc:
        logger.error("Command table %s could not be read: %s", path, exc)
        raise ConfigError(
            "Command table could not be read",
            details={"path": str(path)},
            cause=exc,
        ) from exc
    except yaml.YAMLError as exc:
        logger.error("YAML parse error in command table %s: %s", path, exc)
        raise ConfigError(
            "Command table is not valid YAML",
            details={"path": str(path)},
            cause=exc,
        ) from exc

    try:
        overrides = CommandTable.from_mapping(raw)
    except InvalidArgumentError as exc:
        raise ConfigError(
            f"Invalid command table: {exc}",
            details={"path": str(path), **exc.details},
            cause=exc,
        ) from exc

    logger.info(
        "Loaded command table overrides from %s: %s",
        path.name,
        ", ".join(sorted(overrides)) if len(overrides) else "(empty)",
    )
    table = base if base is not None else DEFAULT_COMMAND_TABLE
    return table.merged(overrides)
