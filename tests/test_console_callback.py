from __future__ import annotations

import json

from rich.console import Console

from playwright_agent.agents.console_callback import ConsoleCallback, _truncate, format_result
from playwright_agent.tools import get_tool_registry


def _callback() -> tuple[ConsoleCallback, Console]:
    console = Console(record=True, width=120, color_system=None)
    return ConsoleCallback(console), console


def test_format_result_hides_image_data():
    shown = format_result({"image_base64": "A" * 5000, "format": "png"})
    assert "AAAA" not in shown
    assert json.loads(shown) == {"image_base64": "<5000 base64 chars>", "format": "png"}


def test_format_result_shows_text_directly():
    assert format_result({"text": "Todo list"}) == "Todo list"


def test_truncate_long_output():
    text = "\n".join(f"line {i}" for i in range(100))
    truncated = _truncate(text)
    assert truncated.endswith("... (70 more lines)")


def test_print_tools_marks_optional_params():
    cb, console = _callback()
    cb.print_tools(get_tool_registry())
    out = console.export_text()
    assert "fill(selector, value)" in out
    assert "get_text(selector?)" in out
    assert "screenshot()" in out


def test_step_and_finish_output():
    cb, console = _callback()
    cb.on_step_start(1, 20)
    cb.on_tool_call("navigate", {"url": "https://example.com"})
    cb.on_tool_result("navigate", {"error": "NavigationError: could not navigate"})
    cb.on_finish("Example Domain", 2, 1)
    out = console.export_text()
    assert "Step 1/20" in out
    assert "url: https://example.com" in out
    assert "NavigationError" in out
    assert "Result (2 steps, 1 tool calls)" in out
