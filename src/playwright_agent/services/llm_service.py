from __future__ import annotations

import json
import logging
from typing import Any, Protocol

from openai import OpenAI, OpenAIError

from playwright_agent.config import ModelConfig, get_model_config, settings
from playwright_agent.models.agent_schemas import ModelResponse, StopReason
from playwright_agent.models.conversation import (
    ContentBlock,
    Conversation,
    TextBlock,
    ToolUseBlock,
)
from playwright_agent.models.errors import ProviderError

logger = logging.getLogger(__name__)

TOOL_USE_FINISH_REASONS = {"tool_calls", "function_call"}


class LanguageModel(Protocol):
    model: str

    def complete(
        self,
        conversation: Conversation,
        tools: list[dict[str, Any]],
        system: str = "",
        model: str | None = None,
        max_tokens: int | None = None,
    ) -> ModelResponse: ...


def _create_openai_client(base_url: str = "") -> OpenAI:
    """Create an OpenAI client, optionally wrapped with PromptLayer."""
    url = base_url or settings.llm_base_url
    if settings.promptlayer_api_key:
        from promptlayer import PromptLayer

        promptlayer_client = PromptLayer(api_key=settings.promptlayer_api_key)
        return promptlayer_client.openai.OpenAI(
            api_key=settings.llm_api_key,
            base_url=url,
        )
    return OpenAI(
        api_key=settings.llm_api_key,
        base_url=url,
    )


def parse_completion(response: Any) -> ModelResponse:
    """Turn a chat-completions response into text/tool-use blocks and a stop reason."""
    if not response.choices:
        raise ProviderError("model returned no choices")
    choice = response.choices[0]
    message = choice.message

    content: list[ContentBlock] = []
    if message.content is not None:
        content.append(TextBlock(text=message.content))
    seen_ids: set[str] = set()
    for call in message.tool_calls or []:
        if not call.id or call.id in seen_ids:
            raise ProviderError(f"model returned a missing or duplicate tool call id: {call.id!r}")
        seen_ids.add(call.id)
        try:
            args = json.loads(call.function.arguments or "{}")
        except json.JSONDecodeError:
            logger.warning("Undecodable arguments for tool call %s: %r", call.id, call.function.arguments)
            args = {}
        if not isinstance(args, dict):
            args = {}
        content.append(ToolUseBlock(id=call.id, name=call.function.name, input=args))

    finish = choice.finish_reason
    has_tool_calls = any(isinstance(b, ToolUseBlock) for b in content)
    if finish in TOOL_USE_FINISH_REASONS or (finish == "stop" and has_tool_calls):
        stop_reason = StopReason.TOOL_USE
    elif finish == "stop":
        stop_reason = StopReason.END_TURN
    else:
        stop_reason = StopReason.OTHER
    return ModelResponse(stop_reason=stop_reason, content=content, raw_stop_reason=finish)


class LLMService:
    def __init__(self, config: ModelConfig | None = None) -> None:
        if config is None:
            config = get_model_config("browser")
        self._config = config
        self.client = _create_openai_client(config.base_url)
        self.model = config.model or settings.llm_model
        self._temperature = config.temperature
        self._max_tokens = config.max_tokens

    def _get_temperature(self) -> float:
        return self._temperature if self._temperature is not None else 0.2

    def generate_with_tools(
        self,
        messages: list[dict],
        tools: list[dict],
        model: str | None = None,
        max_tokens: int | None = None,
    ):
        kwargs: dict = {
            "model": model or self.model,
            "messages": messages,
            "temperature": self._get_temperature(),
        }
        if tools:
            kwargs["tools"] = tools
        max_tokens = max_tokens or self._max_tokens
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens
        if settings.promptlayer_api_key:
            kwargs["pl_tags"] = ["playwright-agent", "browser"]
        return self.client.chat.completions.create(**kwargs)

    def complete(
        self,
        conversation: Conversation,
        tools: list[dict[str, Any]],
        system: str = "",
        model: str | None = None,
        max_tokens: int | None = None,
    ) -> ModelResponse:
        messages = conversation.to_openai_messages(system)
        logger.debug("Calling %s with %d messages", model or self.model, len(messages))
        try:
            response = self.generate_with_tools(messages, tools, model=model, max_tokens=max_tokens)
        except OpenAIError as e:
            raise ProviderError(f"model call failed: {e}") from e
        return parse_completion(response)
