"""The fixed set of browser tools: schemas sent to the model and input models used to validate calls."""

from __future__ import annotations

from pydantic import BaseModel

from playwright_agent.tools import ToolDeclaration


class NavigateInput(BaseModel):
    url: str


class ClickInput(BaseModel):
    selector: str


class FillInput(BaseModel):
    selector: str
    value: str


class PressKeyInput(BaseModel):
    key: str


class GetTextInput(BaseModel):
    selector: str | None = None


class ScreenshotInput(BaseModel):
    pass


NAVIGATE = ToolDeclaration(
    name="navigate",
    description="Navigate the browser to a URL.",
    parameters={
        "type": "object",
        "properties": {
            "url": {
                "type": "string",
                "description": "Absolute URL to open, e.g. https://example.com",
            },
        },
        "required": ["url"],
    },
    input_model=NavigateInput,
)

CLICK = ToolDeclaration(
    name="click",
    description=(
        "Click an element. Tries the selector as a CSS selector first, "
        "then as visible text on the page."
    ),
    parameters={
        "type": "object",
        "properties": {
            "selector": {
                "type": "string",
                "description": "CSS selector or visible text of the element",
            },
        },
        "required": ["selector"],
    },
    input_model=ClickInput,
)

FILL = ToolDeclaration(
    name="fill",
    description="Replace the value of a text input with the given text.",
    parameters={
        "type": "object",
        "properties": {
            "selector": {"type": "string", "description": "CSS selector of the input field"},
            "value": {"type": "string", "description": "Text to type into the field"},
        },
        "required": ["selector", "value"],
    },
    input_model=FillInput,
)

PRESS_KEY = ToolDeclaration(
    name="press_key",
    description="Press a key on the focused element, e.g. Enter, Tab, Escape.",
    parameters={
        "type": "object",
        "properties": {
            "key": {
                "type": "string",
                "description": 'Key name in Playwright notation, e.g. "Enter"',
            },
        },
        "required": ["key"],
    },
    input_model=PressKeyInput,
)

GET_TEXT = ToolDeclaration(
    name="get_text",
    description="Read the text of the page or of one element (at most 3000 characters).",
    parameters={
        "type": "object",
        "properties": {
            "selector": {
                "type": "string",
                "description": "Optional CSS selector; omit to read the whole page",
            },
        },
    },
    input_model=GetTextInput,
)

SCREENSHOT = ToolDeclaration(
    name="screenshot",
    description="Take a screenshot of the visible viewport. Returns a base64-encoded PNG.",
    parameters={"type": "object", "properties": {}},
    input_model=ScreenshotInput,
)

BROWSER_TOOLS: tuple[ToolDeclaration, ...] = (
    NAVIGATE,
    CLICK,
    FILL,
    PRESS_KEY,
    GET_TEXT,
    SCREENSHOT,
)
