"""Path normalization rules.

Two forms of every path are in play:

- the canonical form, used for equality and as every cache/lookup key:
  no extended-length prefix, forward slashes only, upper-case drive letter,
  no trailing separator (a bare root keeps exactly one);
- the backend form, sent across the boundary: same cleanup, but written with
  the separator the path natively used.

Keep this module free of I/O.
"""

from __future__ import annotations

import os
import re
from typing import Optional, Union

from docportal.errors import PreconditionError

PathLike = Union[str, "os.PathLike[str]"]

CANONICAL_SEP = "/"

_LONG_UNC_PREFIXES: tuple[str, ...] = ("\\\\?\\UNC\\", "//?/UNC/")
_LONG_PREFIXES: tuple[str, ...] = ("\\\\?\\", "//?/", "\\?\\")
_DRIVE_RE = re.compile(r"^[A-Za-z]:")
_SEP_RUN_RE = re.compile(r"/{2,}")


def _as_text(path: Optional[PathLike]) -> str:
    if path is None:
        raise PreconditionError("path required")
    s = os.fspath(path)
    if not isinstance(s, str) or not s.strip():
        raise PreconditionError("path required")
    return s


def strip_long_prefix(path: str) -> str:
    """Remove a Windows extended-length prefix (`\\\\?\\`, `\\\\?\\UNC\\`)."""
    for prefix in _LONG_UNC_PREFIXES:
        if path.startswith(prefix):
            return "\\\\" + path[len(prefix):]
    for prefix in _LONG_PREFIXES:
        if path.startswith(prefix):
            return path[len(prefix):]
    return path


def canonicalize(path: Optional[PathLike]) -> str:
    """
    Return the canonical form of a path string.

    Examples:
        `\\\\?\\C:\\a\\b\\` -> `C:/a/b`
        `c:` -> `C:/`
        `\\\\server\\share\\x` -> `//server/share/x`
    """
    s = strip_long_prefix(_as_text(path)).replace("\\", CANONICAL_SEP)

    unc = s.startswith("//")
    body = _SEP_RUN_RE.sub(CANONICAL_SEP, s[2:] if unc else s)
    body = body.rstrip(CANONICAL_SEP)

    if unc:
        return "//" + body if body else "//"

    if _DRIVE_RE.match(body):
        body = body[0].upper() + body[1:]
        if len(body) == 2:
            return body + CANONICAL_SEP

    return body or CANONICAL_SEP


def same_path(a: Optional[PathLike], b: Optional[PathLike]) -> bool:
    """True if both paths refer to the same filesystem object."""
    return canonicalize(a) == canonicalize(b)


def native_sep(path: PathLike) -> str:
    """Guess the separator the path natively uses (`\\` for Windows-style)."""
    s = os.fspath(path)
    if "\\" in s or _DRIVE_RE.match(s.strip()):
        return "\\"
    return "/"


def to_backend_path(path: Optional[PathLike], sep: Optional[str] = None) -> str:
    """Path string for a boundary call, in the input's native separator."""
    canonical = canonicalize(path)
    use_sep = sep or native_sep(os.fspath(path))  # type: ignore[arg-type]
    if use_sep == CANONICAL_SEP:
        return canonical
    return canonical.replace(CANONICAL_SEP, use_sep)


def as_listing_dir(path: Optional[PathLike], sep: Optional[str] = None) -> str:
    """
    Directory form for listing calls: backend form with one trailing separator.

    Some backends tell "list this directory" from "stat this path" by the
    trailing separator.
    """
    use_sep = sep or native_sep(_as_text(path))
    s = to_backend_path(path, use_sep)
    return s if s.endswith(use_sep) else s + use_sep


def to_long_path(path: str) -> str:
    """
    Windows extended-length form of a drive or UNC path.

    Anything that is neither is returned unchanged.
    """
    if not path:
        return path
    if path.startswith("\\\\?\\"):
        return path
    s = path.replace("/", "\\")
    if re.match(r"^[A-Za-z]:\\", s):
        return "\\\\?\\" + s
    if s.startswith("\\\\"):
        return "\\\\?\\UNC\\" + s[2:]
    return path


def looks_like_path(value: object) -> bool:
    if not isinstance(value, str):
        return False
    return "/" in value or "\\" in value or bool(_DRIVE_RE.match(value))


def is_within(path: PathLike, ancestor: PathLike) -> bool:
    """True if `path` is `ancestor` itself or lies beneath it."""
    p = canonicalize(path)
    a = canonicalize(ancestor)
    if p == a:
        return True
    return p.startswith(a.rstrip(CANONICAL_SEP) + CANONICAL_SEP)


def rebase(path: PathLike, old_root: PathLike, new_root: PathLike) -> str:
    """Move `path` from under `old_root` to under `new_root` (canonical form)."""
    p = canonicalize(path)
    old = canonicalize(old_root)
    new = canonicalize(new_root)
    if p == old:
        return new
    suffix = p[len(old.rstrip(CANONICAL_SEP)):]
    return new.rstrip(CANONICAL_SEP) + suffix


def parent_of(path: PathLike) -> str:
    """Parent directory in backend form (a root is its own parent)."""
    sep = native_sep(path)
    canonical = canonicalize(path)
    head, _, tail = canonical.rpartition(CANONICAL_SEP)
    if not tail:
        parent = canonical
    elif not head:
        parent = CANONICAL_SEP if canonical.startswith(CANONICAL_SEP) else canonical
    elif _DRIVE_RE.match(head) and len(head) == 2:
        parent = head + CANONICAL_SEP
    else:
        parent = head
    return parent.replace(CANONICAL_SEP, sep) if sep != CANONICAL_SEP else parent


def basename_of(path: PathLike) -> str:
    canonical = canonicalize(path)
    return canonical.rstrip(CANONICAL_SEP).rpartition(CANONICAL_SEP)[2]


def join_child(parent: PathLike, name: str) -> str:
    """Join a child name onto `parent`, keeping the parent's native separator."""
    if not name or not name.strip():
        raise PreconditionError("name required")
    sep = native_sep(parent)
    base = to_backend_path(parent, sep).rstrip(sep)
    return f"{base}{sep}{name}"
