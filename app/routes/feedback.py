"""Stores a feedback submission, asks the model for a readout, returns both."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Protocol

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse

from app.analysis import normalize_analysis
from app.config import settings
from app.persistence.store import KeyValueStore
from app.prompts import build_messages
from app.responses import PrettyJSONResponse
from app.schemas.feedback import ErrorResponse, FeedbackRequest, FeedbackResponse

router = APIRouter()
logger = logging.getLogger(__name__)

KEY_PREFIX = "feedback:"

# Whitespace trimmed from submitted text: tab, line terminators, space, NBSP,
# BOM and the Unicode Zs category. \x1c-\x1f and NEL (\x85) are kept.
TRIM_CHARS = (
    "\t\n\v\f\r \u00a0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000\ufeff"
)

INDEX_HTML = (
    Path(__file__).resolve().parent.parent / "templates" / "index.html"
).read_text(encoding="utf-8")


class InferenceService(Protocol):
    async def run(self, model: str, inputs: dict[str, Any]) -> Any: ...


def _now_millis() -> int:
    return time.time_ns() // 1_000_000


def feedback_key() -> str:
    """Storage key for a submission received now.

    Millisecond resolution only: two submissions in the same millisecond get
    the same key and the later write wins.
    """
    return f"{KEY_PREFIX}{_now_millis()}"


def get_kv_store(request: Request) -> KeyValueStore:
    store = getattr(request.app.state, "kv_store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Key-value store not available")
    return store


def get_inference(request: Request) -> InferenceService:
    service = getattr(request.app.state, "inference", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Inference service not available")
    return service


def get_model_name(request: Request) -> str:
    return getattr(request.app.state, "ai_model", settings.ai_model)


def submitted_text(body: Any) -> str:
    """Trimmed ``text`` member of a decoded request body.

    A body that is not an object, or whose ``text`` is missing or null, gives
    an empty string. A null body or a non-string ``text`` raises TypeError.
    """
    if body is None:
        raise TypeError("Request body is null")
    text = body.get("text") if isinstance(body, dict) else None
    if text is None:
        return ""
    if not isinstance(text, str):
        raise TypeError(f"text must be a string, not {type(text).__name__}")
    return text.strip(TRIM_CHARS)


@router.post(
    "/",
    response_model=FeedbackResponse,
    response_class=PrettyJSONResponse,
    responses={400: {"model": ErrorResponse}},
    # Body is read by hand; document its shape for the schema only
    openapi_extra={
        "requestBody": {
            "content": {
                "application/json": {"schema": FeedbackRequest.model_json_schema()}
            },
        }
    },
)
async def submit_feedback(
    request: Request,
    store: KeyValueStore = Depends(get_kv_store),
    inference: InferenceService = Depends(get_inference),
    model: str = Depends(get_model_name),
):
    """Store feedback text, run the analysis prompt over it, return raw and parsed output."""
    # Undecodable bodies propagate as a server error
    text = submitted_text(await request.json())
    if not text:
        return JSONResponse(status_code=400, content={"error": "Missing text"})

    key = feedback_key()
    await store.put(key, text)
    logger.info("Stored feedback under %s (%d chars)", key, len(text))

    # Store write must complete before the model is called
    raw = await inference.run(model, {"messages": build_messages(text)})
    parsed = normalize_analysis(raw)

    return FeedbackResponse(key=key, raw=raw, parsed=parsed)


@router.api_route(
    "/",
    methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"],
    response_class=HTMLResponse,
    include_in_schema=False,
)
async def index_page():
    """Serve the feedback form for any non-POST request."""
    return HTMLResponse(INDEX_HTML)
