"""Shared fakes: a Playwright-like page and a scripted model."""

from __future__ import annotations

from typing import Any, Callable

import pytest
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from playwright_agent.models.agent_schemas import ModelResponse, StopReason
from playwright_agent.models.conversation import Conversation, TextBlock, ToolUseBlock

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"
KNOWN_KEYS = {"Enter", "Tab", "Escape", "Backspace", "ArrowDown", "ArrowUp"}


class FakeLocator:
    def __init__(self, page: FakePage, selector: str, by_text: bool = False) -> None:
        self._page = page
        self._selector = selector
        self._by_text = by_text

    @property
    def first(self) -> FakeLocator:
        return self

    def _resolve(self, timeout: float | None = None) -> str:
        if self._by_text:
            needle = self._selector.lower()
            for text in self._page.clickable_texts:
                if needle in text.lower():
                    return text
        elif self._selector in self._page.elements:
            return self._selector
        elif self._selector == "body":
            return "body"
        raise PlaywrightTimeoutError(
            f"Timeout {timeout or 30000}ms exceeded.\n"
            f"=========================== logs ===========================\n"
            f"waiting for locator('{self._selector}')"
        )

    def click(self, timeout: float | None = None) -> None:
        target = self._resolve(timeout)
        self._page.clicks.append(("text" if self._by_text else "css", target, timeout))

    def fill(self, value: str) -> None:
        target = self._resolve()
        self._page.filled[target] = value

    def inner_text(self) -> str:
        target = self._resolve()
        if target == "body":
            return self._page.body
        return self._page.elements[target]


class FakeKeyboard:
    def __init__(self, page: FakePage) -> None:
        self._page = page

    def press(self, key: str) -> None:
        if key not in KNOWN_KEYS:
            raise PlaywrightError(f'Keyboard.press: Unknown key: "{key}"')
        self._page.pressed.append(key)


class FakePage:
    def __init__(
        self,
        elements: dict[str, str] | None = None,
        clickable_texts: list[str] | None = None,
        body: str = "",
        sites: dict[str, str] | None = None,
        redirects: dict[str, str] | None = None,
    ) -> None:
        self.elements = elements or {}
        self.clickable_texts = clickable_texts or []
        self.body = body
        self.sites = sites or {}
        self.redirects = redirects or {}
        self.url = "about:blank"
        self._title = ""
        self.keyboard = FakeKeyboard(self)
        self.clicks: list[tuple[str, str, float | None]] = []
        self.filled: dict[str, str] = {}
        self.pressed: list[str] = []
        self.goto_calls: list[tuple[str, dict[str, Any]]] = []
        self.screenshot_calls: list[dict[str, Any]] = []
        self.screenshot_error: Exception | None = None

    def goto(self, url: str, **kwargs: Any) -> None:
        self.goto_calls.append((url, kwargs))
        final = self.redirects.get(url, url)
        if final not in self.sites:
            raise PlaywrightError(f"Page.goto: net::ERR_NAME_NOT_RESOLVED at {url}\nCall log:\n  - navigating")
        self.url = final
        self._title = self.sites[final]

    def title(self) -> str:
        return self._title

    def locator(self, selector: str, **kwargs: Any) -> FakeLocator:
        return FakeLocator(self, selector)

    def get_by_text(self, text: str, **kwargs: Any) -> FakeLocator:
        return FakeLocator(self, text, by_text=True)

    def screenshot(self, **kwargs: Any) -> bytes:
        self.screenshot_calls.append(kwargs)
        if self.screenshot_error is not None:
            raise self.screenshot_error
        return PNG_BYTES


class ScriptedModel:
    """Returns canned responses in order; records what it was sent."""

    model = "fake-model"

    def __init__(self, responses: list[ModelResponse] | Callable[[int], ModelResponse]) -> None:
        self._responses = responses
        self.calls: list[dict[str, Any]] = []

    def complete(
        self,
        conversation: Conversation,
        tools: list[dict[str, Any]],
        system: str = "",
        model: str | None = None,
        max_tokens: int | None = None,
    ) -> ModelResponse:
        index = len(self.calls)
        self.calls.append(
            {
                "turns": list(conversation.turns),
                "tools": tools,
                "system": system,
                "model": model,
                "max_tokens": max_tokens,
            }
        )
        if callable(self._responses):
            return self._responses(index)
        return self._responses[index]


def text_response(text: str, stop: StopReason = StopReason.END_TURN) -> ModelResponse:
    return ModelResponse(stop_reason=stop, content=[TextBlock(text=text)], raw_stop_reason="stop")


def tool_response(*calls: tuple[str, str, dict[str, Any]], text: str = "") -> ModelResponse:
    content: list = [TextBlock(text=text)] if text else []
    content += [ToolUseBlock(id=call_id, name=name, input=args) for call_id, name, args in calls]
    return ModelResponse(stop_reason=StopReason.TOOL_USE, content=content, raw_stop_reason="tool_calls")


@pytest.fixture
def page() -> FakePage:
    return FakePage(
        elements={
            "#new-todo": "",
            "h1": "Todo list",
            "#add": "Add",
        },
        clickable_texts=["Add todo", "Clear completed"],
        body="Todo list\nAdd todo\nClear completed",
        sites={
            "http://127.0.0.1:3000/": "Todo App",
            "https://playwright.dev/": "Fast and reliable end-to-end testing for modern web apps | Playwright",
        },
        redirects={"http://playwright.dev": "https://playwright.dev/"},
    )
