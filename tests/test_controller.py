import asyncio

import pytest

from sales_analyzer.backends import MOCK_RESULT, AnalysisBackend, MockAnalysisBackend
from sales_analyzer.controller import UNEXPECTED_ERROR_MESSAGE, AnalysisRequestController
from sales_analyzer.errors import AnalysisBackendError
from sales_analyzer.schemas import Failed, Idle, Loading, Success
from sales_analyzer.utils import INVALID_URL_MESSAGE

URL_1 = "https://www.youtube.com/watch?v=first"
URL_2 = "https://youtu.be/second"

OTHER_RESULT = MOCK_RESULT.model_copy(update={"talk_time_ratio": 40, "transcript": "Customer: Hello?"})


class GatedBackend(AnalysisBackend):
    """Resolves each URL only when the test releases it."""

    def __init__(self, outcomes=None):
        self.outcomes = outcomes or {}
        self.calls = []
        self._gates = {}

    def _gate(self, url):
        return self._gates.setdefault(url, asyncio.Event())

    def release(self, url):
        self._gate(url).set()

    async def analyze(self, url):
        self.calls.append(url)
        await self._gate(url).wait()
        outcome = self.outcomes.get(url, MOCK_RESULT)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def test_starts_idle():
    controller = AnalysisRequestController(GatedBackend())

    assert controller.state == Idle()
    assert controller.request is None
    assert controller.result is None
    assert controller.error is None


@pytest.mark.asyncio
async def test_valid_submission_goes_through_loading_to_success():
    backend = GatedBackend()
    controller = AnalysisRequestController(backend)

    task = controller.submit(URL_1)

    assert controller.state == Loading(url=URL_1)
    assert controller.request.url == URL_1
    assert controller.request.is_valid is True

    backend.release(URL_1)
    await task

    assert controller.state == Success(result=MOCK_RESULT)
    assert controller.result == MOCK_RESULT
    assert backend.calls == [URL_1]


@pytest.mark.asyncio
async def test_invalid_submission_fails_without_calling_backend():
    backend = GatedBackend()
    controller = AnalysisRequestController(backend)

    task = controller.submit("https://vimeo.com/123")
    await asyncio.sleep(0)

    assert task is None
    assert controller.state == Failed(error=INVALID_URL_MESSAGE)
    assert controller.error
    assert controller.request.is_valid is False
    assert backend.calls == []


@pytest.mark.asyncio
async def test_invalid_submission_clears_previous_result():
    backend = GatedBackend()
    backend.release(URL_1)
    controller = AnalysisRequestController(backend)
    await controller.submit(URL_1)
    assert controller.result == MOCK_RESULT

    controller.submit("")

    assert controller.result is None
    assert isinstance(controller.state, Failed)


@pytest.mark.asyncio
async def test_valid_submission_clears_previous_error():
    controller = AnalysisRequestController(GatedBackend())
    controller.submit("not a url")
    assert controller.error == INVALID_URL_MESSAGE

    task = controller.submit(URL_1)

    assert controller.error is None
    assert controller.result is None
    assert controller.state == Loading(url=URL_1)
    await controller.aclose()
    assert task.cancelled()


@pytest.mark.asyncio
async def test_backend_error_becomes_failed_state():
    backend = GatedBackend({URL_1: AnalysisBackendError("This video is private.")})
    backend.release(URL_1)
    controller = AnalysisRequestController(backend)

    await controller.submit(URL_1)

    assert controller.state == Failed(error="This video is private.")
    assert controller.result is None


@pytest.mark.asyncio
async def test_unexpected_backend_exception_is_not_escalated():
    backend = GatedBackend({URL_1: RuntimeError("socket closed")})
    backend.release(URL_1)
    controller = AnalysisRequestController(backend)

    await controller.submit(URL_1)

    assert controller.state == Failed(error=UNEXPECTED_ERROR_MESSAGE)


@pytest.mark.asyncio
async def test_stale_resolution_is_discarded():
    backend = GatedBackend({URL_2: OTHER_RESULT})
    controller = AnalysisRequestController(backend)

    first = controller.submit(URL_1)
    second = controller.submit(URL_2)

    backend.release(URL_1)
    await first
    assert controller.state == Loading(url=URL_2)

    backend.release(URL_2)
    await second
    assert controller.state == Success(result=OTHER_RESULT)
    assert backend.calls == [URL_1, URL_2]


@pytest.mark.asyncio
async def test_stale_resolution_after_newer_cycle_finished():
    backend = GatedBackend({URL_2: OTHER_RESULT})
    controller = AnalysisRequestController(backend)

    first = controller.submit(URL_1)
    second = controller.submit(URL_2)
    backend.release(URL_2)
    await second
    backend.release(URL_1)
    await first

    assert controller.result == OTHER_RESULT


@pytest.mark.asyncio
async def test_stale_resolution_does_not_override_invalid_submission():
    backend = GatedBackend()
    controller = AnalysisRequestController(backend)

    first = controller.submit(URL_1)
    controller.submit("https://vimeo.com/123")
    backend.release(URL_1)
    await first

    assert controller.state == Failed(error=INVALID_URL_MESSAGE)


@pytest.mark.asyncio
async def test_timeout_becomes_failed_state():
    controller = AnalysisRequestController(GatedBackend(), timeout=0.01)

    await controller.submit(URL_1)

    assert isinstance(controller.state, Failed)
    assert "timed out" in controller.error


@pytest.mark.asyncio
async def test_export_without_result_is_a_no_op():
    controller = AnalysisRequestController(GatedBackend())

    assert controller.export("structured") is None
    assert controller.export("transcript") is None
    assert controller.state == Idle()


@pytest.mark.asyncio
async def test_export_current_result():
    backend = GatedBackend()
    backend.release(URL_1)
    controller = AnalysisRequestController(backend)
    await controller.submit(URL_1)

    export = controller.export("transcript")

    assert export.content == MOCK_RESULT.transcript.encode("utf-8")
    assert export.filename == "sales-analysis.txt"


@pytest.mark.asyncio
async def test_aclose_cancels_in_flight_calls_and_keeps_state():
    controller = AnalysisRequestController(GatedBackend())
    first = controller.submit(URL_1)
    second = controller.submit(URL_2)

    await controller.aclose()

    assert first.cancelled()
    assert second.cancelled()
    assert controller.state == Loading(url=URL_2)


@pytest.mark.asyncio
async def test_mock_backend_returns_canned_result():
    controller = AnalysisRequestController(MockAnalysisBackend(delay=0))

    await controller.submit("youtu.be/abc123")

    assert controller.result == MOCK_RESULT
    assert controller.result.sentiment == "positive"
    assert len(controller.result.insights) == 4


def test_submit_without_running_loop_leaves_state_untouched():
    backend = GatedBackend()
    controller = AnalysisRequestController(backend)

    with pytest.raises(RuntimeError):
        controller.submit(URL_1)

    assert controller.state == Idle()
    assert controller.request is None
    assert backend.calls == []


@pytest.mark.parametrize("timeout", [0, 0.0, -1])
def test_rejects_non_positive_timeout(timeout):
    with pytest.raises(ValueError, match="timeout"):
        AnalysisRequestController(GatedBackend(), timeout=timeout)


@pytest.mark.asyncio
async def test_backend_timeout_error_is_not_reported_as_deadline_expiry():
    backend = GatedBackend({URL_1: asyncio.TimeoutError("upstream read timed out")})
    backend.release(URL_1)
    controller = AnalysisRequestController(backend, timeout=30)

    await controller.submit(URL_1)

    assert controller.state == Failed(error=UNEXPECTED_ERROR_MESSAGE)


@pytest.mark.asyncio
async def test_fast_backend_succeeds_within_timeout():
    backend = GatedBackend()
    backend.release(URL_1)
    controller = AnalysisRequestController(backend, timeout=30)

    await controller.submit(URL_1)

    assert controller.result == MOCK_RESULT


@pytest.mark.asyncio
async def test_failed_cycle_accepts_new_submission():
    backend = GatedBackend(
        {
            URL_1: AnalysisBackendError("This video is private."),
            URL_2: OTHER_RESULT,
        }
    )
    backend.release(URL_1)
    backend.release(URL_2)
    controller = AnalysisRequestController(backend)

    await controller.submit(URL_1)
    assert controller.error == "This video is private."

    task = controller.submit(URL_2)
    assert controller.state == Loading(url=URL_2)
    await task

    assert controller.state == Success(result=OTHER_RESULT)
    assert controller.error is None
