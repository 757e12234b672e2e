"""Named-command boundary to the native backend."""

from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Optional, Protocol, Union, runtime_checkable

InvokeFunc = Callable[..., Union[Any, Awaitable[Any]]]


@runtime_checkable
class Backend(Protocol):
    """
    Anything that can invoke a named backend command.

    `args` is None when the command takes no argument object. Implementations
    raise on failure; the error value is opaque to callers.
    """

    async def invoke(self, command: str, args: Optional[dict[str, Any]] = None) -> Any:
        ...


class FunctionBackend:
    """Adapt a plain `invoke(command, args)` callable (sync or async) to Backend."""

    def __init__(self, func: InvokeFunc) -> None:
        self._func = func

    async def invoke(self, command: str, args: Optional[dict[str, Any]] = None) -> Any:
        if args is None:
            result = self._func(command)
        else:
            result = self._func(command, args)
        if inspect.isawaitable(result):
            result = await result
        return result
