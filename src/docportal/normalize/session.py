"""Session validation payload normalization."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional


def normalize_user(raw: Any) -> Optional[dict[str, Any]]:
    """
    User profile from a `validate_session` result.

    Accepts the profile object itself, `{"user": {...}}`, or a list whose
    first element is the profile. Anything else yields None.
    """
    if isinstance(raw, list):
        raw = raw[0] if raw else None
    if isinstance(raw, Mapping) and isinstance(raw.get("user"), Mapping):
        raw = raw["user"]
    if isinstance(raw, Mapping):
        return dict(raw)
    return None
