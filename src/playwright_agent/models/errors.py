"""Error taxonomy for the browser agent.

``ToolError`` subclasses describe a single failed browser action. They are
caught at the executor boundary and reported back to the model as that
action's outcome. The remaining errors end a run.
"""

from __future__ import annotations


class BrowserAgentError(Exception):
    """Base class for every error raised by this package."""


class ToolError(BrowserAgentError):
    """A single tool invocation failed."""


class NavigationError(ToolError):
    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"could not navigate to {url}: {reason}")


class ElementNotFoundError(ToolError):
    def __init__(self, selector: str, reason: str = "") -> None:
        self.selector = selector
        self.reason = reason
        message = f"no element matches '{selector}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class UnknownToolError(ToolError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"unknown tool '{name}'")


class InvalidKeyError(ToolError):
    def __init__(self, key: str, reason: str = "") -> None:
        self.key = key
        super().__init__(f"cannot press key '{key}'" + (f": {reason}" if reason else ""))


class ScreenshotError(ToolError):
    """The page could not be captured."""


class InvalidToolInputError(ToolError):
    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        super().__init__(f"invalid input for '{name}': {reason}")


class ProviderError(BrowserAgentError):
    """The language model provider call failed."""


class BudgetExceededError(BrowserAgentError):
    def __init__(self, max_iterations: int) -> None:
        self.max_iterations = max_iterations
        super().__init__(
            f"Agent reached the maximum number of iterations ({max_iterations}) "
            "without completing the task."
        )


class UnexpectedStopConditionError(BrowserAgentError):
    def __init__(self, stop_reason: str | None) -> None:
        self.stop_reason = stop_reason
        super().__init__(f"Model stopped with an unexpected stop reason: {stop_reason!r}")


class ConversationError(BrowserAgentError, ValueError):
    """A turn would break the tool-call/tool-result pairing of the transcript."""
