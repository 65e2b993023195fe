"""Rich console callback for the browser loop."""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from playwright_agent.tools import ToolRegistry

MAX_RESULT_LINES = 30
MAX_RESULT_CHARS = 2000


def _truncate(text: str) -> str:
    lines = text.splitlines()
    if len(lines) > MAX_RESULT_LINES or len(text) > MAX_RESULT_CHARS:
        kept = lines[:MAX_RESULT_LINES]
        truncated = "\n".join(kept)
        if len(truncated) > MAX_RESULT_CHARS:
            truncated = truncated[:MAX_RESULT_CHARS]
        omitted = len(lines) - MAX_RESULT_LINES
        if omitted > 0:
            truncated += f"\n... ({omitted} more lines)"
        return truncated
    return text


TOOL_ICONS = {
    "navigate": "🌐",
    "click": "👆",
    "fill": "⌨️ ",
    "press_key": "⏎ ",
    "get_text": "📄",
    "screenshot": "📸",
}


def _format_arg_value(value: Any) -> str:
    s = str(value)
    if len(s) > 120:
        return s[:120] + "..."
    return s


def format_result(result: dict[str, Any]) -> str:
    """Render a tool result for display, eliding image payloads."""
    shown = dict(result)
    image = shown.get("image_base64")
    if isinstance(image, str):
        shown["image_base64"] = f"<{len(image)} base64 chars>"
    if isinstance(shown.get("text"), str):
        return shown["text"]
    return json.dumps(shown, indent=2, ensure_ascii=False)


class ConsoleCallback:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def print_tools(self, registry: ToolRegistry) -> None:
        table = Table(title="Available tools", border_style="dim", show_lines=False)
        table.add_column("Tool", style="bold cyan", no_wrap=True)
        table.add_column("Description", style="dim")
        for tool in registry.list_all():
            icon = TOOL_ICONS.get(tool.name, "🔧")
            params = tool.parameters.get("properties", {})
            required = set(tool.parameters.get("required", []))
            param_names = ", ".join(p if p in required else f"{p}?" for p in params)
            table.add_row(f"{icon} {tool.name}({param_names})", tool.description)
        self.console.print(table)
        self.console.print()

    def on_step_start(self, step: int, max_steps: int) -> None:
        self.console.rule(f"[bold blue]Step {step}/{max_steps}", style="blue")

    def on_thinking(self, text: str) -> None:
        self.console.print(
            Panel(
                _truncate(text),
                title="[bold yellow]Thinking",
                border_style="yellow",
                padding=(0, 1),
            )
        )

    def on_tool_call(self, name: str, args: dict[str, Any]) -> None:
        icon = TOOL_ICONS.get(name, "🔧")
        self.console.print(f"  {icon} [bold cyan]{name}[/]")
        for k, v in args.items():
            self.console.print(f"      [dim]{k}:[/] {_format_arg_value(v)}")

    def on_tool_result(self, name: str, result: dict[str, Any]) -> None:
        truncated = _truncate(format_result(result))
        if "error" in result:
            body = Text(truncated, style="red")
            border = "red"
        elif len(truncated) > 200:
            body = Syntax(truncated, "text", theme="ansi_dark", word_wrap=True)
            border = "dim"
        else:
            body = Text(truncated, style="dim")
            border = "dim"
        self.console.print(Panel(body, title="[dim]result", border_style=border, padding=(0, 1)))

    def on_finish(self, text: str, steps: int, tool_calls: int) -> None:
        self.console.print()
        self.console.rule("[bold green]Agent finished", style="green")
        self.console.print(
            Panel(
                text,
                title=f"[bold green]Result ({steps} steps, {tool_calls} tool calls)",
                border_style="green",
                padding=(0, 1),
            )
        )
