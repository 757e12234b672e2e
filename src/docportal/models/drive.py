"""Data model for storage drives."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from docportal.util.time import to_epoch


@dataclass(slots=True)
class Drive:
    """
    A drive as reported by the backend, in one canonical unit (GB).

    Notes:
        - Capacity fields are None when the backend did not supply a parseable
          value; they are never fabricated as 0 and never negative.
        - `raw` keeps the original payload for diagnostics.
    """

    drive: str
    total_gb: Optional[float] = None
    used_gb: Optional[float] = None
    free_gb: Optional[float] = None
    last_scan: Optional[datetime] = None
    raw: Any = field(default=None, compare=False, repr=False)

    def as_dict(self) -> dict[str, Any]:
        """Payload form; normalizing it again yields the same values."""
        return {
            "drive": self.drive,
            "total_gb": self.total_gb,
            "used_gb": self.used_gb,
            "free_gb": self.free_gb,
            "last_scan_epoch": to_epoch(self.last_scan) if self.last_scan else None,
        }
