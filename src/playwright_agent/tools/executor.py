"""Runs browser tools against a Playwright page."""

from __future__ import annotations

import base64
import logging
from typing import Any, Callable

from playwright.sync_api import Error as PlaywrightError
from pydantic import BaseModel, ValidationError

from playwright_agent.config import settings
from playwright_agent.models.errors import (
    ElementNotFoundError,
    InvalidKeyError,
    InvalidToolInputError,
    NavigationError,
    ScreenshotError,
    ToolError,
    UnknownToolError,
)
from playwright_agent.services.browser_service import PageProvider
from playwright_agent.tools import ToolDeclaration, ToolRegistry, get_tool_registry
from playwright_agent.tools.browser_tools import (
    ClickInput,
    FillInput,
    GetTextInput,
    NavigateInput,
    PressKeyInput,
    ScreenshotInput,
)

logger = logging.getLogger(__name__)


def _short(value: Any, limit: int = 120) -> str:
    s = str(value)
    return s if len(s) <= limit else s[:limit] + "..."


def _first_line(exc: Exception) -> str:
    # Playwright messages carry a multi-line call log after the first line
    text = str(exc).strip()
    return text.splitlines()[0] if text else type(exc).__name__


class ToolExecutor:
    """Maps tool invocations onto a single page.

    ``execute`` never raises: failures come back as ``{"error": ...}`` so the
    model can see them and pick another action.
    """

    def __init__(
        self,
        page: PageProvider,
        registry: ToolRegistry | None = None,
        click_timeout_ms: int | None = None,
        text_limit: int | None = None,
    ) -> None:
        self.page = page
        self.registry = registry or get_tool_registry()
        self.click_timeout_ms = (
            click_timeout_ms if click_timeout_ms is not None else settings.click_timeout_ms
        )
        self.text_limit = text_limit if text_limit is not None else settings.text_limit
        self._handlers: dict[str, Callable[[Any], dict[str, Any]]] = {
            "navigate": self._navigate,
            "click": self._click,
            "fill": self._fill,
            "press_key": self._press_key,
            "get_text": self._get_text,
            "screenshot": self._screenshot,
        }

    def execute(self, name: str, args: dict[str, Any] | None) -> dict[str, Any]:
        logger.info(
            "Tool %s(%s)",
            name,
            ", ".join(f"{k}={_short(v)}" for k, v in (args or {}).items()),
        )
        try:
            return self.dispatch(name, args)
        except ToolError as e:
            logger.warning("Tool '%s' failed: %s", name, e)
            return {"error": f"{type(e).__name__}: {e}"}
        except Exception as e:
            logger.error("Tool '%s' failed unexpectedly: %s", name, e, exc_info=True)
            return {"error": f"{type(e).__name__}: {e}"}

    def dispatch(self, name: str, args: dict[str, Any] | None) -> dict[str, Any]:
        """Run a tool, raising ``ToolError`` subclasses on failure."""
        handler = self._handlers.get(name)
        if handler is None or name not in self.registry:
            raise UnknownToolError(name)
        params = self._validate(self.registry.get(name), args or {})
        return handler(params)

    @staticmethod
    def _validate(tool: ToolDeclaration, args: dict[str, Any]) -> BaseModel:
        if tool.input_model is None:
            raise InvalidToolInputError(tool.name, "tool declares no input model")
        try:
            return tool.input_model.model_validate(args)
        except ValidationError as e:
            reason = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'input'}: {err['msg']}"
                for err in e.errors()
            )
            raise InvalidToolInputError(tool.name, reason) from e

    def _navigate(self, params: NavigateInput) -> dict[str, Any]:
        try:
            self.page.goto(params.url, wait_until="domcontentloaded")
            return {"success": True, "url": self.page.url, "title": self.page.title()}
        except PlaywrightError as e:
            raise NavigationError(params.url, _first_line(e)) from e

    def _click(self, params: ClickInput) -> dict[str, Any]:
        try:
            self.page.locator(params.selector).first.click(timeout=self.click_timeout_ms)
            return {"success": True}
        except PlaywrightError as e:
            logger.debug("CSS click on %r failed (%s), trying text match", params.selector, _first_line(e))

        try:
            self.page.get_by_text(params.selector, exact=False).first.click(
                timeout=self.click_timeout_ms
            )
        except PlaywrightError as e:
            raise ElementNotFoundError(params.selector, _first_line(e)) from e
        return {"success": True}

    def _fill(self, params: FillInput) -> dict[str, Any]:
        try:
            self.page.locator(params.selector).first.fill(params.value)
        except PlaywrightError as e:
            raise ElementNotFoundError(params.selector, _first_line(e)) from e
        return {"success": True}

    def _press_key(self, params: PressKeyInput) -> dict[str, Any]:
        try:
            self.page.keyboard.press(params.key)
        except PlaywrightError as e:
            raise InvalidKeyError(params.key, _first_line(e)) from e
        return {"success": True}

    def _get_text(self, params: GetTextInput) -> dict[str, Any]:
        if params.selector:
            try:
                text = self.page.locator(params.selector).first.inner_text()
            except PlaywrightError as e:
                raise ElementNotFoundError(params.selector, _first_line(e)) from e
        else:
            text = self.page.locator("body").inner_text()
        return {"text": text[: self.text_limit]}

    def _screenshot(self, params: ScreenshotInput) -> dict[str, Any]:
        try:
            data = self.page.screenshot(type="png", full_page=False)
        except PlaywrightError as e:
            raise ScreenshotError(f"could not capture the page: {_first_line(e)}") from e
        return {"image_base64": base64.b64encode(data).decode("ascii"), "format": "png"}
