from __future__ import annotations

SNAKE = "snake"
CAMEL = "camel"

CASINGS: tuple[str, ...] = (SNAKE, CAMEL)


def to_camel(name: str) -> str:
    """`session_token` -> `sessionToken`. Names without underscores are kept."""
    parts = name.split("_")
    if len(parts) == 1:
        return name
    return parts[0] + "".join(p[:1].upper() + p[1:] for p in parts[1:])


def to_snake(name: str) -> str:
    """`sessionToken` -> `session_token`."""
    out: list[str] = []
    for ch in name:
        if ch.isupper():
            if out:
                out.append("_")
            out.append(ch.lower())
        else:
            out.append(ch)
    return "".join(out)


def wire_name(param: str, casing: str) -> str:
    """Field name a backend expects for `param` under the given casing."""
    if casing == SNAKE:
        return param
    if casing == CAMEL:
        return to_camel(param)
    raise ValueError(f"Unknown casing: {casing}")
