from enum import Enum
from typing import Annotated, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class AnalyzeRequest(BaseModel):
    url: str


class ErrorResponse(BaseModel):
    detail: str


class AnalysisRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    is_valid: bool


class AnalysisResult(BaseModel):
    """Metrics for one analysed sales call. Serialized with camelCase keys."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    talk_time_ratio: int = Field(alias="talkTimeRatio", ge=0, le=100)
    questions_count: int = Field(alias="questionsCount", ge=0)
    longest_monologue: int = Field(alias="longestMonologue", ge=0)
    sentiment: Sentiment
    insights: Tuple[str, ...]
    transcript: str


# Controller states, discriminated on ``status``

class Idle(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["idle"] = "idle"


class Loading(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["loading"] = "loading"
    url: str


class Success(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["success"] = "success"
    result: AnalysisResult


class Failed(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["failed"] = "failed"
    error: str


ControllerState = Annotated[
    Union[Idle, Loading, Success, Failed],
    Field(discriminator="status"),
]
