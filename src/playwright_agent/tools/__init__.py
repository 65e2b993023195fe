"""Tool declarations advertised to the model."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

from pydantic import BaseModel


@dataclass(frozen=True)
class ToolDeclaration:
    name: str
    description: str
    parameters: dict[str, Any]
    input_model: type[BaseModel] | None = field(default=None, compare=False)


class ToolRegistry:
    def __init__(self) -> None:
        self._tools: dict[str, ToolDeclaration] = {}

    def register(self, tool: ToolDeclaration) -> None:
        if tool.name in self._tools:
            raise ValueError(f"tool '{tool.name}' is already registered")
        self._tools[tool.name] = tool

    def register_many(self, tools: list[ToolDeclaration]) -> None:
        for tool in tools:
            self.register(tool)

    def get(self, name: str) -> ToolDeclaration:
        return self._tools[name]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def names(self) -> list[str]:
        return list(self._tools)

    def list_all(self) -> list[ToolDeclaration]:
        return list(self._tools.values())

    def to_openai_tools(self) -> list[dict[str, Any]]:
        result = []
        for tool in self._tools.values():
            result.append(
                {
                    "type": "function",
                    "function": {
                        "name": tool.name,
                        "description": tool.description,
                        "parameters": copy.deepcopy(tool.parameters),
                    },
                }
            )
        return result


@lru_cache(maxsize=1)
def get_tool_registry() -> ToolRegistry:
    """Registry holding the six browser tools, built once per process."""
    from playwright_agent.tools.browser_tools import BROWSER_TOOLS

    registry = ToolRegistry()
    registry.register_many(list(BROWSER_TOOLS))
    return registry
