from .casing import CAMEL, CASINGS, SNAKE, to_camel, to_snake, wire_name
from .numbers import as_int, as_number, bytes_to_gb, gb
from .paths import (
    as_listing_dir,
    basename_of,
    canonicalize,
    is_within,
    join_child,
    looks_like_path,
    native_sep,
    parent_of,
    rebase,
    same_path,
    strip_long_prefix,
    to_backend_path,
    to_long_path,
)
from .time import from_epoch, now_utc, parse_rfc3339, parse_timestamp, to_epoch

__all__ = [
    "SNAKE",
    "CAMEL",
    "CASINGS",
    "to_camel",
    "to_snake",
    "wire_name",
    "as_number",
    "as_int",
    "bytes_to_gb",
    "gb",
    "canonicalize",
    "same_path",
    "native_sep",
    "strip_long_prefix",
    "to_backend_path",
    "as_listing_dir",
    "to_long_path",
    "looks_like_path",
    "is_within",
    "rebase",
    "parent_of",
    "basename_of",
    "join_child",
    "now_utc",
    "parse_rfc3339",
    "parse_timestamp",
    "from_epoch",
    "to_epoch",
]
