"""Normalize an inference response into a parsed analysis.

Inference backends do not agree on where the generated text lives, so the
response is treated as an open-shaped mapping and searched field by field.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from app.schemas.feedback import AnalysisResult

logger = logging.getLogger(__name__)

# Candidate fields carrying generated text, highest priority first
RESPONSE_TEXT_FIELDS: tuple[str, ...] = ("response", "result", "output")


def extract_response_text(raw: Any) -> Any:
    """Return the first present, non-null candidate field of ``raw``.

    Returns None when ``raw`` is not a mapping or carries none of the fields.
    The value is returned as-is; it is not guaranteed to be a string.
    """
    if not isinstance(raw, Mapping):
        return None
    for field_name in RESPONSE_TEXT_FIELDS:
        value = raw.get(field_name)
        if value is not None:
            return value
    return None


def parse_analysis(payload: Any) -> AnalysisResult | None:
    """Decode ``payload`` as a JSON object, or return None.

    Only strings are decoded. Anything ``json.loads`` refuses, including
    oversized integer literals and nesting past the recursion limit, yields
    None, as does a decoded value that is not a JSON object.
    """
    if not isinstance(payload, str):
        return None
    try:
        decoded = json.loads(payload)
    except (ValueError, RecursionError):
        logger.info("Model output is not valid JSON; returning parsed=null")
        return None
    if not isinstance(decoded, dict):
        logger.info(
            "Model output decoded to %s, not an object; returning parsed=null",
            type(decoded).__name__,
        )
        return None
    result: AnalysisResult = decoded  # type: ignore[assignment]
    return result


def normalize_analysis(raw: Any) -> AnalysisResult | None:
    """Extract the text payload from ``raw`` and parse it."""
    return parse_analysis(extract_response_text(raw))
