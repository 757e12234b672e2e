"""Sequential first-success resolution over backend command candidates."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Sequence, Union

from docportal.errors import (
    CandidateTimeoutError,
    InvalidArgumentError,
    ResolutionExhaustedError,
    describe_error,
)

logger = logging.getLogger(__name__)

Candidate = Callable[[], Union[Any, Awaitable[Any]]]


class CommandResolver:
    """
    Try candidates strictly in order and return the first success.

    Each candidate is a zero-argument callable. A synchronous raise and an
    awaitable that raises are both a candidate failure. No candidate runs
    more than once per `resolve` call, and at most one is in flight.

    Args:
        candidate_timeout: Optional seconds to wait for each candidate. A
            candidate that does not settle in time counts as failed. None
            waits forever.
    """

    def __init__(self, *, candidate_timeout: Optional[float] = None) -> None:
        if candidate_timeout is not None and candidate_timeout <= 0:
            raise InvalidArgumentError(
                "candidate_timeout must be positive",
                details={"candidate_timeout": candidate_timeout},
            )
        self._candidate_timeout = candidate_timeout

    @property
    def candidate_timeout(self) -> Optional[float]:
        return self._candidate_timeout

    async def resolve(self, operation: str, candidates: Sequence[Candidate]) -> Any:
        """
        Raises:
            InvalidArgumentError: if `candidates` is empty.
            ResolutionExhaustedError: if every candidate failed; `cause` is
                the last failure.
        """
        if not candidates:
            raise InvalidArgumentError(
                "No candidates to resolve",
                details={"operation": operation},
            )

        errors: list[BaseException] = []
        for index, candidate in enumerate(candidates):
            try:
                result = await self._attempt(operation, index, candidate)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                errors.append(exc)
                logger.warning(
                    "%s candidate %d failed: %s",
                    operation,
                    index,
                    describe_error(exc),
                )
                continue
            logger.debug("%s succeeded (candidate %d)", operation, index)
            return result

        last = errors[-1]
        raise ResolutionExhaustedError(
            f"{operation} failed: {describe_error(last)}",
            operation=operation,
            errors=errors,
            cause=last,
        ) from last

    async def _attempt(self, operation: str, index: int, candidate: Candidate) -> Any:
        result = candidate()
        if not inspect.isawaitable(result):
            return result
        if self._candidate_timeout is None:
            return await result
        try:
            return await asyncio.wait_for(result, timeout=self._candidate_timeout)
        except asyncio.TimeoutError as exc:
            raise CandidateTimeoutError(
                f"{operation} candidate {index} timed out",
                details={
                    "operation": operation,
                    "index": index,
                    "timeout": self._candidate_timeout,
                },
                cause=exc,
            ) from exc
