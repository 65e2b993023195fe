"""Models for the agentic loop."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from playwright_agent.models.conversation import ContentBlock, TextBlock, ToolUseBlock


class StopReason(str, Enum):
    END_TURN = "end_turn"
    TOOL_USE = "tool_use"
    OTHER = "other"


class AgentState(str, Enum):
    AWAITING_MODEL = "awaiting_model"
    EXECUTING_TOOLS = "executing_tools"
    DONE = "done"
    FAILED = "failed"


class ModelResponse(BaseModel):
    stop_reason: StopReason
    content: list[ContentBlock] = []
    # Provider's own finish reason, kept for error messages
    raw_stop_reason: str | None = None

    def first_text(self) -> str | None:
        for block in self.content:
            if isinstance(block, TextBlock):
                return block.text
        return None

    def tool_uses(self) -> list[ToolUseBlock]:
        return [block for block in self.content if isinstance(block, ToolUseBlock)]


class RunState(BaseModel):
    task: str
    max_iterations: int
    model: str
    iteration: int = 0
    state: AgentState = AgentState.AWAITING_MODEL
