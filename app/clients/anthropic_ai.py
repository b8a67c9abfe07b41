"""Anthropic-backed inference service with the same ``run()`` contract as Workers AI."""

from typing import Any

from langchain_anthropic import ChatAnthropic
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from pydantic import SecretStr

from app.config import Settings


def get_analysis_model(settings: Settings) -> ChatAnthropic:
    return ChatAnthropic(  # type: ignore[call-arg]
        model_name=settings.anthropic_model,
        anthropic_api_key=SecretStr(settings.anthropic_api_key),
        max_tokens_to_sample=1024,
        timeout=settings.request_timeout_seconds,
    )


def _to_langchain(messages: list[dict[str, str]]) -> list[BaseMessage]:
    converted: list[BaseMessage] = []
    for msg in messages:
        if msg["role"] == "system":
            converted.append(SystemMessage(content=msg["content"]))
        elif msg["role"] == "assistant":
            converted.append(AIMessage(content=msg["content"]))
        else:
            converted.append(HumanMessage(content=msg["content"]))
    return converted


class AnthropicInferenceClient:
    """Adapts a chat model to ``run(model, {"messages": [...]})``.

    The reply is returned as ``{"response": <text>, ...}`` so it normalizes the
    same way a Workers AI text-generation result does. The ``model`` argument
    is recorded in the result; the chat model itself is fixed at construction.
    """

    def __init__(self, chat_model: ChatAnthropic) -> None:
        self.chat_model = chat_model

    async def run(self, model: str, inputs: dict[str, Any]) -> dict[str, Any]:
        reply = await self.chat_model.ainvoke(_to_langchain(inputs["messages"]))
        if isinstance(reply.content, str):
            content = reply.content
        else:
            # Content blocks: keep only the text parts
            content = "".join(
                block.get("text", "") if isinstance(block, dict) else str(block)
                for block in reply.content
            )
        return {
            "response": content,
            "model": model,
            "usage": getattr(reply, "usage_metadata", None),
        }

    async def close(self) -> None:
        return None
