import asyncio
import logging
from abc import ABC, abstractmethod

from .schemas import AnalysisResult, Sentiment

MOCK_RESULT = AnalysisResult(
    talk_time_ratio=65,
    questions_count=12,
    longest_monologue=42,
    sentiment=Sentiment.POSITIVE,
    insights=(
        "Customer showed strong interest in pricing options",
        "Sales rep effectively addressed objections",
        "Good use of open-ended questions in the first half",
        "Consider reducing monologue length to increase engagement",
    ),
    transcript=(
        "Sales Rep: Hello, thank you for calling. How can I help you today?\n"
        "Customer: Hi, I'm interested in your premium package...\n"
        "[Full transcript would be here]"
    ),
)


class AnalysisBackend(ABC):
    """
    Contract for anything that can turn a validated video URL into an analysis.
    """

    @abstractmethod
    async def analyze(self, url: str) -> AnalysisResult:
        """
        Analyse the call behind ``url``. One response per call, no partial results.
        Expected failures are raised as AnalysisBackendError.
        """
        raise NotImplementedError


class MockAnalysisBackend(AnalysisBackend):
    """Waits a fixed delay and returns the canned result."""

    def __init__(self, delay: float = 2.0, result: AnalysisResult = MOCK_RESULT):
        self.delay = delay
        self.result = result

    async def analyze(self, url: str) -> AnalysisResult:
        logging.info(f"Mock analysis for {url} (responding in {self.delay}s)")
        await asyncio.sleep(self.delay)
        return self.result
