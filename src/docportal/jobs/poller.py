"""Index job polling on asyncio."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Generator, Optional, Union

from docportal.errors import DocPortalError, InvalidArgumentError, PreconditionError, describe_error
from docportal.models import IndexOutcome, IndexSummaries, JobState, JobStatus, ProgressEvent

from .classify import classify_status

if TYPE_CHECKING:  # pragma: no cover
    from docportal.controller import PortalController
    from docportal.local import PortalStore

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1.2

ProgressCallback = Callable[[ProgressEvent], Union[None, Awaitable[None]]]
SleepFunc = Callable[[float], Awaitable[Any]]


class PollHandle:
    """
    Handle on one running poll loop.

    `await handle` (or `await handle.result()`) gives the IndexOutcome.
    `cancel()` stops the client-side loop only; the backend job keeps running.
    """

    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        self.last_status = JobStatus(state=JobState.RUNNING)
        self._task: Optional[asyncio.Task] = None
        self._cancel_requested = False

    def _attach(self, task: asyncio.Task) -> None:
        self._task = task

    @property
    def cancel_requested(self) -> bool:
        return self._cancel_requested

    def cancel(self) -> bool:
        """Stop polling. Returns False if the loop had already finished."""
        if self._task is None or self._task.done():
            return False
        self._cancel_requested = True
        self._task.cancel()
        return True

    def done(self) -> bool:
        return self._task is not None and self._task.done()

    def cancelled_outcome(self) -> IndexOutcome:
        return IndexOutcome(job_id=self.job_id, status=self.last_status, cancelled=True)

    async def result(self) -> IndexOutcome:
        """
        Raises:
            ResolutionExhaustedError: if a status fetch failed on every candidate.
        """
        if self._task is None:
            raise InvalidArgumentError(
                "PollHandle has no poll task", details={"job_id": self.job_id}
            )
        try:
            return await self._task
        except asyncio.CancelledError:
            # Cancelled before the loop body ran.
            if self._cancel_requested and self._task.cancelled():
                return self.cancelled_outcome()
            raise

    def __await__(self) -> Generator[Any, None, IndexOutcome]:
        return self.result().__await__()


class JobPoller:
    """
    Start index jobs and follow them to a terminal state.

    Notes:
        - A synthetic `started` event is emitted before the first status fetch.
        - Repeated identical RUNNING observations are emitted once.
        - FINISHED, FAILED and UNKNOWN all end the loop; none of them raises.
        - After the loop a summary refresh runs; its failure is reported in
          `IndexOutcome.summary_error` only.
        - Once the job has ended and summaries are refreshed, its progress
          entry is forgotten by the store.
    """

    def __init__(
        self,
        controller: "PortalController",
        *,
        store: Optional["PortalStore"] = None,
        interval: float = DEFAULT_POLL_INTERVAL,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        if interval < 0:
            raise InvalidArgumentError("interval must be >= 0", details={"interval": interval})
        self._controller = controller
        self._store = store
        self._interval = interval
        self._sleep = sleep

    @property
    def interval(self) -> float:
        return self._interval

    # ----------------------------
    # Public API
    # ----------------------------
    async def start_indexing(self, session_token: str, scope: Optional[str] = None) -> str:
        """Start a job over `scope` (None = all drives) and return its id."""
        if not session_token:
            raise PreconditionError("sessionToken required")
        job_id = await self._controller.start_index_job(session_token, scope)
        logger.info("Index job %s started (scope=%s)", job_id, scope or "all drives")
        return job_id

    def poll_until_terminal(
        self,
        job_id: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> PollHandle:
        """Schedule the poll loop for `job_id`. Must be called with a running loop."""
        if not job_id:
            raise PreconditionError("jobId required")
        handle = PollHandle(job_id)
        handle._attach(asyncio.ensure_future(self._poll(handle, on_progress)))
        return handle

    async def run_index_job(
        self,
        session_token: str,
        scope: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> IndexOutcome:
        job_id = await self.start_indexing(session_token, scope)
        return await self.poll_until_terminal(job_id, on_progress)

    # ----------------------------
    # Internals
    # ----------------------------
    async def _poll(
        self,
        handle: PollHandle,
        on_progress: Optional[ProgressCallback],
    ) -> IndexOutcome:
        job_id = handle.job_id
        try:
            await self._emit(ProgressEvent(job_id=job_id, kind="started"), on_progress)

            last_running: Optional[tuple[Optional[int], Optional[str]]] = None
            while True:
                await self._sleep(self._interval)
                raw = await self._controller.get_index_status(job_id)
                status = classify_status(raw)
                handle.last_status = status

                if status.state is JobState.RUNNING:
                    progress = (status.processed, status.last_path)
                    if progress != last_running:
                        last_running = progress
                        await self._emit(ProgressEvent.from_status(job_id, status), on_progress)
                    continue

                await self._emit(ProgressEvent.from_status(job_id, status), on_progress)
                break
        except asyncio.CancelledError:
            if not handle.cancel_requested:
                raise
            logger.info("Polling of index job %s cancelled", job_id)
            return handle.cancelled_outcome()

        logger.info("Index job %s ended: %s", job_id, status.state.value)
        summaries, summary_error = await self._refresh_summaries()
        if self._store is not None:
            self._store.forget_job(job_id)
        return IndexOutcome(
            job_id=job_id,
            status=status,
            summaries=summaries,
            summary_error=summary_error,
        )

    async def _emit(self, event: ProgressEvent, on_progress: Optional[ProgressCallback]) -> None:
        if self._store is not None:
            self._store.set_job_progress(event)
        if on_progress is None:
            return
        try:
            res = on_progress(event)
            if inspect.isawaitable(res):
                await res
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Progress callback failed for job %s", event.job_id)

    async def _refresh_summaries(self) -> tuple[Optional[IndexSummaries], Optional[str]]:
        try:
            files_per_drive = await self._controller.get_files_per_drive()
            by_drive_and_type = await self._controller.get_indexing_by_drive_and_type()
        except DocPortalError as exc:
            message = describe_error(exc)
            logger.warning("Summary refresh after index job failed: %s", message)
            return None, message

        summaries = IndexSummaries(
            files_per_drive=list(files_per_drive),
            by_drive_and_type=list(by_drive_and_type),
        )
        if self._store is not None:
            self._store.set_summaries(summaries)
        return summaries, None
