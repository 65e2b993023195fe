"""Model-driven browser loop: ask the model for actions, run them, repeat."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from playwright_agent.config import settings
from playwright_agent.models.agent_schemas import AgentState, RunState, StopReason
from playwright_agent.models.conversation import (
    AssistantTurn,
    Conversation,
    ToolOutcome,
    ToolResultTurn,
    ToolUseBlock,
)
from playwright_agent.models.errors import BudgetExceededError, UnexpectedStopConditionError
from playwright_agent.prompts.prompt_layer import load_prompt
from playwright_agent.services.llm_service import LanguageModel
from playwright_agent.tools import ToolRegistry
from playwright_agent.tools.executor import ToolExecutor

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = load_prompt("browser_system")

FALLBACK_ANSWER = "Task completed (no text answer)."


class StepCallback(Protocol):
    def on_step_start(self, step: int, max_steps: int) -> None: ...
    def on_thinking(self, text: str) -> None: ...
    def on_tool_call(self, name: str, args: dict[str, Any]) -> None: ...
    def on_tool_result(self, name: str, result: dict[str, Any]) -> None: ...
    def on_finish(self, text: str, steps: int, tool_calls: int) -> None: ...


class NullCallback:
    def on_step_start(self, step: int, max_steps: int) -> None: ...
    def on_thinking(self, text: str) -> None: ...
    def on_tool_call(self, name: str, args: dict[str, Any]) -> None: ...
    def on_tool_result(self, name: str, result: dict[str, Any]) -> None: ...
    def on_finish(self, text: str, steps: int, tool_calls: int) -> None: ...


class BrowserAgent:
    def __init__(
        self,
        llm: LanguageModel,
        executor: ToolExecutor,
        registry: ToolRegistry | None = None,
        max_iterations: int | None = None,
        max_tokens: int | None = None,
        system_prompt: str = SYSTEM_PROMPT,
        callback: StepCallback | None = None,
    ) -> None:
        self.llm = llm
        self.executor = executor
        self.registry = registry or executor.registry
        self.max_iterations = (
            max_iterations if max_iterations is not None else settings.agent_max_iterations
        )
        self.max_tokens = max_tokens if max_tokens is not None else settings.agent_max_tokens
        self.system_prompt = system_prompt
        self.cb: StepCallback = callback or NullCallback()
        self.last_conversation: Conversation | None = None

    def run(self, task: str, max_iterations: int | None = None, model: str | None = None) -> str:
        """Drive the browser until the model answers; return that answer.

        Raises ``BudgetExceededError`` when the model keeps requesting tools
        past the iteration limit, ``UnexpectedStopConditionError`` when it
        stops for any other reason, and ``ProviderError`` if the model call
        itself fails.
        """
        if max_iterations is not None and max_iterations < 0:
            raise ValueError(f"max_iterations must be >= 0, got {max_iterations}")
        state = RunState(
            task=task,
            max_iterations=max_iterations if max_iterations is not None else self.max_iterations,
            model=model or self.llm.model,
        )
        conversation = Conversation.start(task)
        self.last_conversation = conversation
        tools = self.registry.to_openai_tools()
        total_tool_calls = 0

        while state.iteration < state.max_iterations:
            self.cb.on_step_start(state.iteration + 1, state.max_iterations)

            response = self.llm.complete(
                conversation,
                tools,
                system=self.system_prompt,
                model=state.model,
                max_tokens=self.max_tokens,
            )
            logger.debug(
                "Step %d: stop_reason=%s (%s)",
                state.iteration + 1,
                response.stop_reason.value,
                response.raw_stop_reason,
            )
            conversation.append(AssistantTurn(content=response.content))

            if response.stop_reason is StopReason.END_TURN:
                answer = response.first_text()
                if answer is None:
                    answer = FALLBACK_ANSWER
                state.state = AgentState.DONE
                self.cb.on_finish(answer, state.iteration + 1, total_tool_calls)
                return answer

            tool_uses = response.tool_uses()
            if response.stop_reason is not StopReason.TOOL_USE or not tool_uses:
                state.state = AgentState.FAILED
                logger.error("Model stopped unexpectedly: %s", response.raw_stop_reason)
                raise UnexpectedStopConditionError(response.raw_stop_reason)

            text = response.first_text()
            if text:
                self.cb.on_thinking(text)

            state.state = AgentState.EXECUTING_TOOLS
            outcomes = [self._run_tool(block) for block in tool_uses]
            total_tool_calls += len(outcomes)
            conversation.append(ToolResultTurn(results=outcomes))

            state.iteration += 1
            state.state = AgentState.AWAITING_MODEL

        state.state = AgentState.FAILED
        logger.warning("Agent hit max iterations (%d)", state.max_iterations)
        raise BudgetExceededError(state.max_iterations)

    def _run_tool(self, block: ToolUseBlock) -> ToolOutcome:
        self.cb.on_tool_call(block.name, block.input)
        result = self.executor.execute(block.name, block.input)
        self.cb.on_tool_result(block.name, result)
        return ToolOutcome.from_result(block.id, result)
