"""Conversation transcript shared between the agent loop and the model.

A transcript is a list of turns. Model turns carry content blocks; tool
requests in a model turn must be answered by exactly one tool-result turn
holding one outcome per request before anything else is appended.
"""

from __future__ import annotations

import json
from typing import Annotated, Any, Iterator, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from playwright_agent.models.errors import ConversationError


class TextBlock(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolUseBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["tool_use"] = "tool_use"
    id: str
    name: str
    input: dict[str, Any] = {}


ContentBlock = Annotated[Union[TextBlock, ToolUseBlock], Field(discriminator="type")]


class ToolOutcome(BaseModel):
    tool_use_id: str
    content: str
    is_error: bool = False

    @classmethod
    def from_result(cls, tool_use_id: str, result: dict[str, Any]) -> ToolOutcome:
        """Wrap an executor result; a result carrying ``error`` is a failure."""
        return cls(
            tool_use_id=tool_use_id,
            content=json.dumps(result),
            is_error="error" in result,
        )


class UserTurn(BaseModel):
    role: Literal["user"] = "user"
    text: str


class AssistantTurn(BaseModel):
    role: Literal["assistant"] = "assistant"
    content: list[ContentBlock] = []

    def text(self) -> str:
        return "\n".join(b.text for b in self.content if isinstance(b, TextBlock))

    def tool_uses(self) -> list[ToolUseBlock]:
        return [b for b in self.content if isinstance(b, ToolUseBlock)]


class ToolResultTurn(BaseModel):
    role: Literal["tool"] = "tool"
    results: list[ToolOutcome] = Field(min_length=1)


Turn = Annotated[Union[UserTurn, AssistantTurn, ToolResultTurn], Field(discriminator="role")]


class Conversation:
    """Append-only transcript owned by a single agent run."""

    def __init__(self) -> None:
        self._turns: list[Turn] = []

    @classmethod
    def start(cls, task: str) -> Conversation:
        conversation = cls()
        conversation.append(UserTurn(text=task))
        return conversation

    @property
    def turns(self) -> tuple[Turn, ...]:
        return tuple(self._turns)

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(self._turns)

    def pending_tool_use_ids(self) -> list[str]:
        """Identifiers requested by the last turn that still await results."""
        if self._turns and isinstance(self._turns[-1], AssistantTurn):
            return [b.id for b in self._turns[-1].tool_uses()]
        return []

    def append(self, turn: Turn) -> None:
        if not self._turns and not isinstance(turn, UserTurn):
            raise ConversationError("a conversation must open with a user turn")

        pending = self.pending_tool_use_ids()
        if isinstance(turn, ToolResultTurn):
            if not pending:
                raise ConversationError(
                    "tool results must directly follow a model turn requesting tools"
                )
            ids = [r.tool_use_id for r in turn.results]
            if len(set(ids)) != len(ids):
                raise ConversationError(f"duplicate tool results: {ids}")
            if set(ids) != set(pending):
                raise ConversationError(
                    f"tool results {ids} do not match requested tool calls {pending}"
                )
        elif pending:
            raise ConversationError(f"awaiting tool results for {pending}")
        elif isinstance(turn, AssistantTurn):
            ids = [b.id for b in turn.tool_uses()]
            if len(set(ids)) != len(ids):
                raise ConversationError(f"duplicate tool call ids in one turn: {ids}")

        self._turns.append(turn)

    def to_openai_messages(self, system: str = "") -> list[dict[str, Any]]:
        """Render the transcript as chat-completions messages."""
        messages: list[dict[str, Any]] = []
        if system:
            messages.append({"role": "system", "content": system})
        for turn in self._turns:
            if isinstance(turn, UserTurn):
                messages.append({"role": "user", "content": turn.text})
            elif isinstance(turn, AssistantTurn):
                messages.append(_assistant_message(turn))
            else:
                for result in turn.results:
                    messages.append(
                        {
                            "role": "tool",
                            "tool_call_id": result.tool_use_id,
                            "content": result.content,
                        }
                    )
        return messages


def _assistant_message(turn: AssistantTurn) -> dict[str, Any]:
    text = turn.text()
    tool_uses = turn.tool_uses()
    if not tool_uses:
        return {"role": "assistant", "content": text}
    return {
        "role": "assistant",
        "content": text or None,
        "tool_calls": [
            {
                "id": block.id,
                "type": "function",
                "function": {"name": block.name, "arguments": json.dumps(block.input)},
            }
            for block in tool_uses
        ],
    }
