"""Unit tests for the Anthropic-backed inference adapter."""

from unittest.mock import AsyncMock

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from app.clients.anthropic_ai import AnthropicInferenceClient, get_analysis_model
from app.config import Settings
from app.prompts import ANALYSIS_SYSTEM_PROMPT, build_messages


@pytest.fixture
def chat_model():
    model = AsyncMock()
    model.ainvoke.return_value = AIMessage(content='{"sentiment": "positive"}')
    return model


@pytest.mark.asyncio
async def test_run_returns_response_field(chat_model):
    client = AnthropicInferenceClient(chat_model)
    out = await client.run("claude-test", {"messages": build_messages("Great app")})
    assert out["response"] == '{"sentiment": "positive"}'
    assert out["model"] == "claude-test"


@pytest.mark.asyncio
async def test_run_converts_messages(chat_model):
    client = AnthropicInferenceClient(chat_model)
    await client.run("claude-test", {"messages": build_messages("Great app")})

    sent = chat_model.ainvoke.await_args.args[0]
    assert isinstance(sent[0], SystemMessage)
    assert sent[0].content == ANALYSIS_SYSTEM_PROMPT
    assert isinstance(sent[1], HumanMessage)
    assert sent[1].content == "Great app"


@pytest.mark.asyncio
async def test_run_joins_text_blocks(chat_model):
    chat_model.ainvoke.return_value = AIMessage(
        content=[
            {"type": "text", "text": '{"summary": '},
            {"type": "text", "text": '"ok"}'},
        ]
    )
    client = AnthropicInferenceClient(chat_model)
    out = await client.run("claude-test", {"messages": build_messages("x")})
    assert out["response"] == '{"summary": "ok"}'


def test_get_analysis_model_uses_settings():
    s = Settings(_env_file=None, anthropic_api_key="test-key", anthropic_model="claude-test")
    model = get_analysis_model(s)
    assert model.model == "claude-test"
