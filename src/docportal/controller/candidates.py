"""Candidate descriptors: one (command name, argument shape) guess each."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from docportal.errors import InvalidArgumentError
from docportal.util.casing import CASINGS, SNAKE, wire_name

OPTIONAL_SUFFIX = "?"


@dataclass(frozen=True)
class FieldSpec:
    """
    One argument field: send param `param` under the key `wire_name`.

    Optional fields are omitted when the param is None; a missing required
    param makes the whole candidate inapplicable.
    """

    wire_name: str
    param: str
    optional: bool = False


@dataclass(frozen=True)
class CandidateSpec:
    command: str
    fields: tuple[FieldSpec, ...] = ()

    @property
    def takes_args(self) -> bool:
        return bool(self.fields)

    def params(self) -> tuple[str, ...]:
        return tuple(f.param for f in self.fields)

    def bind(self, params: Mapping[str, Any]) -> Optional[dict[str, Any]]:
        """
        Build the argument object for `params`.

        Returns:
            The argument dict, or None when a required param is missing.
        """
        args: dict[str, Any] = {}
        for f in self.fields:
            value = params.get(f.param)
            if value is None:
                if f.optional:
                    continue
                return None
            args[f.wire_name] = value
        return args

    # ----------------------------
    # Constructors
    # ----------------------------
    @classmethod
    def of(cls, command: str, *params: str, casing: str = SNAKE) -> CandidateSpec:
        """
        Shorthand: `CandidateSpec.of("read_dir", "session_token", "path", casing="camel")`.

        A trailing `?` on a param marks it optional.
        """
        return cls(command=command, fields=tuple(_field(p, casing) for p in params))

    @classmethod
    def mapped(cls, command: str, fields: Mapping[str, str]) -> CandidateSpec:
        """Explicit `{wire_name: param}` mapping, in the mapping's order."""
        out: list[FieldSpec] = []
        for wire, param in fields.items():
            name, optional = _split_optional(param)
            out.append(FieldSpec(wire_name=str(wire), param=name, optional=optional))
        return cls(command=command, fields=tuple(out))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> CandidateSpec:
        """
        Parse one YAML-friendly candidate entry.

        Keys: `command` (required), `casing` (snake|camel), `params` (list of
        param names, `?` suffix = optional), `fields` (wire -> param mapping).

        Raises:
            InvalidArgumentError: on a malformed entry.
        """
        if not isinstance(data, Mapping):
            raise InvalidArgumentError(
                "Candidate entry must be a mapping",
                details={"entry": data},
            )

        command = data.get("command")
        if not isinstance(command, str) or not command.strip():
            raise InvalidArgumentError(
                "Candidate entry requires a command name",
                details={"entry": dict(data)},
            )

        casing = data.get("casing", SNAKE)
        if casing not in CASINGS:
            raise InvalidArgumentError(
                "Unknown casing",
                details={"casing": casing, "allowed": list(CASINGS)},
            )

        params = data.get("params") or []
        if not isinstance(params, Sequence) or isinstance(params, str):
            raise InvalidArgumentError("params must be a list", details={"command": command})
        fields = data.get("fields") or {}
        if not isinstance(fields, Mapping):
            raise InvalidArgumentError("fields must be a mapping", details={"command": command})

        spec = cls.of(command.strip(), *[str(p) for p in params], casing=casing)
        if fields:
            extra = cls.mapped(command.strip(), fields)
            spec = cls(command=spec.command, fields=spec.fields + extra.fields)
        return spec


def _split_optional(param: str) -> tuple[str, bool]:
    if param.endswith(OPTIONAL_SUFFIX):
        return param[: -len(OPTIONAL_SUFFIX)], True
    return param, False


def _field(param: str, casing: str) -> FieldSpec:
    name, optional = _split_optional(param)
    return FieldSpec(wire_name=wire_name(name, casing), param=name, optional=optional)
