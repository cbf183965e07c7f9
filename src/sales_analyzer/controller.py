import asyncio
import logging
from typing import Optional, Set

from .backends import AnalysisBackend
from .errors import AnalysisBackendError, InvalidURLError
from .schemas import (
    AnalysisRequest,
    AnalysisResult,
    ControllerState,
    Failed,
    Idle,
    Loading,
    Success,
)
from .utils import ExportFile, ensure_valid_url, export_result

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred while analyzing the video. Please try again later."


class AnalysisRequestController:
    """Owns the single analysis slot: idle -> loading -> success | failed.

    Every ``submit`` starts a new cycle. A backend call that resolves after a newer
    cycle has started is dropped, so only the latest submission can change state.
    Earlier calls are left to finish on their own.
    """

    def __init__(self, backend: AnalysisBackend, timeout: Optional[float] = None):
        if timeout is not None and timeout <= 0:
            raise ValueError(f"timeout must be a positive number of seconds, got {timeout!r}.")
        self.backend = backend
        self.timeout = timeout
        self._state: ControllerState = Idle()
        self._request: Optional[AnalysisRequest] = None
        self._cycle = 0
        self._tasks: Set[asyncio.Task] = set()

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def request(self) -> Optional[AnalysisRequest]:
        return self._request

    @property
    def result(self) -> Optional[AnalysisResult]:
        if isinstance(self._state, Success):
            return self._state.result
        return None

    @property
    def error(self) -> Optional[str]:
        if isinstance(self._state, Failed):
            return self._state.error
        return None

    def submit(self, url: str) -> Optional[asyncio.Task]:
        """Start a new cycle for ``url``.

        Must be called from a running event loop. Returns the backend task, or None
        when the URL was rejected and no request was issued.
        """
        loop = asyncio.get_running_loop()
        self._cycle += 1
        cycle = self._cycle
        self._state = Idle()

        try:
            ensure_valid_url(url)
        except InvalidURLError as e:
            logging.warning(f"Rejected analysis request for {url!r}: {e}")
            self._request = AnalysisRequest(url=url, is_valid=False)
            self._state = Failed(error=str(e))
            return None

        self._request = AnalysisRequest(url=url, is_valid=True)
        self._state = Loading(url=url)
        logging.info(f"Starting analysis #{cycle} for: {url}")

        task = loop.create_task(self._run(cycle, url))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def export(self, kind) -> Optional[ExportFile]:
        """Export the current result, or do nothing when there isn't one."""
        result = self.result
        if result is None:
            logging.info("Export requested with no analysis result; nothing to export")
            return None
        return export_result(result, kind)

    async def aclose(self) -> None:
        """Cancel backend calls still in flight. Visible state is left as is."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    async def _run(self, cycle: int, url: str) -> None:
        try:
            if self.timeout is None:
                result = await self._analyze(url)
            else:
                result = await asyncio.wait_for(self._analyze(url), self.timeout)
        except asyncio.TimeoutError:
            logging.warning(f"Analysis #{cycle} for {url} timed out after {self.timeout}s")
            self._settle(cycle, Failed(error=f"Analysis timed out after {self.timeout:g} seconds"))
        except AnalysisBackendError as e:
            logging.warning(f"Backend error for video {url}: {str(e)}")
            self._settle(cycle, Failed(error=str(e)))
        except asyncio.CancelledError:
            logging.info(f"Analysis #{cycle} for {url} cancelled")
            raise
        except Exception as e:
            logging.error(f"Unexpected error analyzing video {url}: {str(e)}")
            self._settle(cycle, Failed(error=UNEXPECTED_ERROR_MESSAGE))
        else:
            self._settle(cycle, Success(result=result))

    async def _analyze(self, url: str) -> AnalysisResult:
        # Only wait_for may raise TimeoutError out of here
        try:
            return await self.backend.analyze(url)
        except asyncio.TimeoutError as e:
            raise RuntimeError(f"backend timed out on its own: {e!r}") from e

    def _settle(self, cycle: int, state: ControllerState) -> None:
        if cycle != self._cycle:
            logging.info(f"Discarding {state.status} from analysis #{cycle}; #{self._cycle} is current")
            return
        logging.info(f"Analysis #{cycle} finished: {state.status}")
        self._state = state
