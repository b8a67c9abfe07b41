"""Request/response schemas for the feedback intake endpoint."""

from typing import Any, Literal

from pydantic import BaseModel
from typing_extensions import TypedDict


class AnalysisResult(TypedDict, total=False):
    """Structured readout the model is asked to produce. Every key is optional."""

    summary: str
    sentiment: Literal["positive", "neutral", "negative"]
    themes: list[str]
    urgency: Literal["low", "medium", "high"]


class FeedbackRequest(BaseModel):
    text: str | None = None


class FeedbackResponse(BaseModel):
    status: Literal["saved"] = "saved"
    key: str
    stored: bool = True
    raw: Any = None
    parsed: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    error: str
