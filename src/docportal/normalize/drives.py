"""Drive payload normalization (heterogeneous backend shapes -> Drive)."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Optional

from docportal.errors import UnrecognizedResponseError
from docportal.models import Drive
from docportal.util.numbers import bytes_to_gb, gb, round2
from docportal.util.time import parse_timestamp

logger = logging.getLogger(__name__)

_TOTAL_GB_KEYS = ("total_gb", "totalGB", "total")
_USED_GB_KEYS = ("used_gb", "usedGB", "used")
_FREE_GB_KEYS = ("available_gb", "availableGB", "free_gb", "freeGB")

_TOTAL_BYTES_KEYS = ("total_bytes", "totalBytes")
_USED_BYTES_KEYS = ("used_bytes", "usedBytes")
_FREE_BYTES_KEYS = ("available_bytes", "availableBytes", "free_bytes", "freeBytes")

_LABEL_KEYS = ("id", "label", "drive", "name", "mount_point", "mountPoint")
_SCAN_KEYS = ("last_scan_epoch", "lastScanEpoch", "last_scan", "lastScan", "scanned_at")

_ROWS_KEYS = ("rows", "drives", "items")


def _first_parsed(raw: Mapping[str, Any], keys: Sequence[str], conv) -> Optional[float]:
    for key in keys:
        if key in raw:
            value = conv(raw[key])
            if value is not None:
                return value
    return None


def _pick_label(raw: Mapping[str, Any]) -> str:
    for key in _LABEL_KEYS:
        value = raw.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
    return "Unknown"


def _measure(
    raw: Mapping[str, Any],
    gb_keys: Sequence[str],
    bytes_keys: Sequence[str],
) -> Optional[float]:
    # Pre-computed GB fields win over byte counts.
    value = _first_parsed(raw, gb_keys, gb)
    if value is not None:
        return value
    return _first_parsed(raw, bytes_keys, bytes_to_gb)


def _from_row(row: Sequence[Any]) -> dict[str, Any]:
    # Row form: [drive, total_gb, used_gb, last_scan_epoch]
    keys = ("drive", "total_gb", "used_gb", "last_scan_epoch")
    return {k: row[i] for i, k in enumerate(keys) if i < len(row)}


def normalize_drive(raw: Any) -> Drive:
    """
    Build a Drive from any known backend shape.

    Raises:
        UnrecognizedResponseError: if `raw` is neither a mapping, a row, nor
            a Drive.
    """
    if isinstance(raw, Drive):
        again = normalize_drive(raw.as_dict())
        again.last_scan = raw.last_scan
        again.raw = raw.raw
        return again

    source = raw
    if isinstance(raw, (list, tuple)):
        source = _from_row(raw)
    if not isinstance(source, Mapping):
        raise UnrecognizedResponseError(
            "Unrecognized drive payload",
            details={"type": type(raw).__name__},
        )

    total = _measure(source, _TOTAL_GB_KEYS, _TOTAL_BYTES_KEYS)
    free = _measure(source, _FREE_GB_KEYS, _FREE_BYTES_KEYS)
    used = _measure(source, _USED_GB_KEYS, _USED_BYTES_KEYS)
    if used is None and total is not None and free is not None:
        used = round2(max(0.0, total - free))

    last_scan = None
    for key in _SCAN_KEYS:
        if source.get(key) is not None:
            last_scan = parse_timestamp(source[key])
            break

    return Drive(
        drive=_pick_label(source),
        total_gb=total,
        used_gb=used,
        free_gb=free,
        last_scan=last_scan,
        raw=raw,
    )


def normalize_drives(raw: Any) -> list[Drive]:
    """
    Normalize a drive list response.

    Accepts a list of mappings/rows or an object holding one under `rows`,
    `drives` or `items`. Unrecognized shapes yield an empty list; rows that
    cannot be read are skipped.
    """
    rows: Any = raw
    if isinstance(raw, Mapping):
        rows = next((raw[k] for k in _ROWS_KEYS if isinstance(raw.get(k), list)), None)
    if not isinstance(rows, list):
        if raw is not None:
            logger.warning("Unrecognized drive list shape: %s", type(raw).__name__)
        return []

    out: list[Drive] = []
    for row in rows:
        try:
            out.append(normalize_drive(row))
        except UnrecognizedResponseError:
            logger.warning("Skipping unrecognized drive row: %r", row)
    return out

