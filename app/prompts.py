"""Fixed instruction prompt for feedback analysis."""

ANALYSIS_SYSTEM_PROMPT = (
    "You are a product manager assistant. Return ONLY valid JSON with keys: "
    "summary (1-2 sentences), sentiment (positive|neutral|negative), "
    "themes (array of 3 short phrases), urgency (low|medium|high). No extra keys."
)


def build_messages(text: str) -> list[dict[str, str]]:
    """Chat messages for one analysis request: the fixed system prompt, then the feedback."""
    return [
        {"role": "system", "content": ANALYSIS_SYSTEM_PROMPT},
        {"role": "user", "content": text},
    ]
