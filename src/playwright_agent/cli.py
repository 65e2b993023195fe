import logging

import typer
from rich.console import Console

app = typer.Typer(name="playwright-agent", help="LLM-driven browser agent built on Playwright.")
console = Console()


def _build_agent(page, max_iterations: int = 0):
    """Create a BrowserAgent bound to ``page`` with console reporting."""
    from playwright_agent.agents.browser_agent import BrowserAgent
    from playwright_agent.agents.console_callback import ConsoleCallback
    from playwright_agent.config import get_model_config, settings
    from playwright_agent.services.llm_service import LLMService
    from playwright_agent.tools import get_tool_registry
    from playwright_agent.tools.executor import ToolExecutor

    registry = get_tool_registry()
    callback = ConsoleCallback(console)
    callback.print_tools(registry)

    llm = LLMService(get_model_config("browser"))
    executor = ToolExecutor(page, registry=registry)
    return BrowserAgent(
        llm=llm,
        executor=executor,
        registry=registry,
        max_iterations=max_iterations or settings.agent_max_iterations,
        callback=callback,
    )


@app.command()
def run(
    task: str = typer.Argument(..., help="Task for the agent, in plain language"),
    url: str = typer.Option("", "--url", help="Open this URL before handing over to the agent"),
    max_iterations: int = typer.Option(0, "--max-iterations", help="Max agent iterations (0 = use config)"),
    model: str = typer.Option("", "--model", help="Model identifier (empty = use config)"),
    headed: bool = typer.Option(False, "--headed", help="Show the browser window"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable detailed logging"),
) -> None:
    """Run a browser task and print the agent's answer."""
    from playwright_agent.models.errors import (
        BudgetExceededError,
        ProviderError,
        UnexpectedStopConditionError,
    )
    from playwright_agent.services.browser_service import BrowserSession

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(name)s | %(levelname)s | %(message)s")

    console.print(f"[bold]Task:[/bold] {task}")
    with BrowserSession(headless=False if headed else None) as page:
        if url:
            console.print(f"[dim]Opening {url}[/dim]")
            page.goto(url, wait_until="domcontentloaded")

        agent = _build_agent(page, max_iterations)
        try:
            answer = agent.run(task, model=model or None)
        except BudgetExceededError as e:
            console.print(f"\n[red]Agent exceeded {e.max_iterations} iterations without completing.[/red]")
            raise typer.Exit(1)
        except UnexpectedStopConditionError as e:
            console.print(f"\n[red]Model stopped unexpectedly ({e.stop_reason}).[/red]")
            raise typer.Exit(1)
        except ProviderError as e:
            console.print(f"\n[red]Model provider error: {e}[/red]")
            raise typer.Exit(1)

    typer.echo(answer)


@app.command()
def tools() -> None:
    """List the tools offered to the model."""
    from playwright_agent.agents.console_callback import ConsoleCallback
    from playwright_agent.tools import get_tool_registry

    ConsoleCallback(console).print_tools(get_tool_registry())


if __name__ == "__main__":
    app()
