#!/usr/bin/env python3
"""Agent Switchboard CLI.

Command-line interface for talking to the switchboard agents.
Provides commands for single messages, interactive chat, agent suggestions
and shared project coordination.
"""

import asyncio
import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import SwitchboardSettings, get_settings, validate_configuration
from .core.agent_registry import UnknownAgentError
from .core.router import AgentRouter
from .core.shared_state import SharedStateStore
from .integrations.completion_client import CompletionClient, CompletionService
from .schemas import AgentId, Response
from .utils.project_calculations import ProjectCalculations


# Initialize CLI and console
app = typer.Typer(help="Agent Switchboard CLI")
console = Console()

logger = logging.getLogger(__name__)


class SwitchboardCLI:
    """CLI interface holding one store and one router per invocation."""

    def __init__(self, settings: SwitchboardSettings | None = None):
        """Initialize CLI with settings; components are built lazily."""
        self.settings = settings or get_settings()
        self.store: SharedStateStore | None = None
        self.router: AgentRouter | None = None

    def build_completion_service(self) -> CompletionService | None:
        """Completion client when enabled and an API key is configured."""
        if not self.settings.use_completion_service:
            return None
        try:
            validate_configuration(self.settings)
        except ValueError as e:
            console.print(f"[yellow]{e}[/yellow]\n[yellow]Using built-in responses[/yellow]")
            return None
        return CompletionClient(self.settings.openai)

    def initialize_router(self, auto_switch: bool | None = None) -> AgentRouter:
        """Build the store and router if not already done."""
        if self.router is None:
            self.store = SharedStateStore(self.settings.state.broadcast_log_size)
            self.router = AgentRouter(
                store=self.store,
                settings=self.settings,
                completion_service=self.build_completion_service(),
                auto_switch=auto_switch,
            )
        return self.router

    def cleanup(self):
        """Release store subscriptions held by agents."""
        if self.router is not None:
            self.router.close()
        self.router = None
        self.store = None


# Global CLI instance
cli_instance = SwitchboardCLI()


def configure_logging(level: int) -> None:
    """Install a rich logging handler on the root logger."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def print_response(response: Response, agent_id: str) -> None:
    """Render an agent response as a panel."""
    is_error = response.metadata.get("error", False)
    console.print(
        Panel(
            Markdown(response.content),
            title=f"🤖 {agent_id} {escape(f'[{response.kind}]')}",
            border_style="red" if is_error else "green",
        )
    )


def print_agents(router: AgentRouter) -> None:
    """Render the agent roster with the active agent marked."""
    agent_table = Table(title="Agents", show_header=True, header_style="bold magenta")
    agent_table.add_column("", style="green")
    agent_table.add_column("Id", style="cyan")
    agent_table.add_column("Name", style="white")
    agent_table.add_column("Capabilities", style="yellow")

    for info in router.list_agent_descriptors():
        agent_table.add_row(
            "▶" if info.is_current else "",
            str(info.id),
            info.display_name,
            ", ".join(info.capabilities),
        )

    console.print(agent_table)


def print_suggestion(router: AgentRouter, message: str) -> None:
    """Render the heuristic recommendation for a message."""
    suggestion = router.suggest(message)
    if suggestion is None:
        console.print("[yellow]No agent suggestion for this message[/yellow]")
        return
    console.print(
        f"[bold cyan]Suggested agent:[/bold cyan] {suggestion.suggested_agent_id} "
        f"({suggestion.confidence:.0%})\n[dim]{suggestion.reason}[/dim]"
    )


def print_project(store: SharedStateStore) -> None:
    """Render the shared project with its task list."""
    project = store.get_current_project()
    if project is None:
        console.print("[yellow]No active project[/yellow]")
        return

    percentage = ProjectCalculations.completion_percentage(project)
    console.print(
        Panel.fit(
            f"[bold green]{project.name}[/bold green]\n"
            f"Status: {project.status} | Priority: {project.priority}\n"
            f"Progress: {percentage}% "
            f"({ProjectCalculations.completed_count(project)}/{len(project.tasks)} tasks)",
            title="📁 Shared Project",
        )
    )

    if project.tasks:
        task_table = Table(title="Tasks", show_header=True, header_style="bold blue")
        task_table.add_column("Title", style="cyan")
        task_table.add_column("Status", style="green")
        task_table.add_column("Priority", style="yellow")
        task_table.add_column("Assignee", style="white")
        for task in project.tasks:
            task_table.add_row(
                task.title, task.status.label, str(task.priority), task.assignee or "-"
            )
        console.print(task_table)

    broadcasts = store.get_recent_broadcasts(5)
    for broadcast in broadcasts:
        console.print(f"[dim]📢 [{broadcast.level}] {broadcast.text}[/dim]")


@app.command()
def agents():
    """List the available agents."""
    try:
        router = cli_instance.initialize_router()
        print_agents(router)
    finally:
        cli_instance.cleanup()


@app.command()
def ask(
    message: str = typer.Argument(..., help="Message to send"),
    agent: str | None = typer.Option(None, "--agent", "-a", help="Agent id to use"),
    auto_switch: bool = typer.Option(
        False, "--auto-switch", help="Switch agents on confident suggestions"
    ),
):
    """Send a single message and print the response."""

    async def _ask():
        try:
            router = cli_instance.initialize_router(auto_switch or None)
            response = await router.dispatch(message, agent)
            print_response(response, str(router.get_current_agent_id()))
            if response.metadata.get("error"):
                raise typer.Exit(code=1)
        finally:
            cli_instance.cleanup()

    asyncio.run(_ask())


@app.command()
def suggest(message: str = typer.Argument(..., help="Message to analyze")):
    """Show which agent the heuristic recommends for a message."""
    try:
        print_suggestion(cli_instance.initialize_router(), message)
    finally:
        cli_instance.cleanup()


@app.command()
def chat(
    agent: str | None = typer.Option(None, "--agent", "-a", help="Starting agent id"),
    auto_switch: bool = typer.Option(
        False, "--auto-switch", help="Switch agents on confident suggestions"
    ),
):
    """Interactive chat session.

    Slash commands: /agents, /switch ID, /history, /suggest TEXT, /quit
    """

    async def _chat():
        try:
            router = cli_instance.initialize_router(auto_switch or None)
            if agent:
                router.switch_agent(agent, "Selected at startup")

            console.print(
                Panel.fit(
                    "[bold green]Agent Switchboard[/bold green]\n"
                    "Type a message, or /agents, /switch ID, /history, "
                    "/suggest TEXT, /quit",
                    title="💬 Chat",
                )
            )

            while True:
                try:
                    line = console.input(
                        f"[bold cyan]{router.get_current_agent_id()}> [/bold cyan]"
                    )
                except EOFError:
                    break

                text = line.strip()
                if not text:
                    continue
                if text in ("/quit", "/exit"):
                    break
                if text == "/agents":
                    print_agents(router)
                elif text.startswith("/switch"):
                    target = text.removeprefix("/switch").strip()
                    try:
                        router.switch_agent(target, "User requested")
                        console.print(f"[green]Switched to {target}[/green]")
                    except UnknownAgentError as e:
                        console.print(f"[bold red]{e}[/bold red]")
                elif text == "/history":
                    for entry in router.get_conversation_history():
                        console.print(
                            f"[dim]{entry.id}[/dim] [bold]{entry.role}[/bold] "
                            f"({entry.agent_tag}): {escape(entry.content[:80])}"
                        )
                elif text.startswith("/suggest"):
                    print_suggestion(router, text.removeprefix("/suggest").strip())
                else:
                    response = await router.dispatch(text)
                    print_response(response, str(router.get_current_agent_id()))

            console.print("[dim]Goodbye![/dim]")

        except UnknownAgentError as e:
            console.print(f"[bold red]{e}[/bold red]")
            raise typer.Exit(code=1) from e
        finally:
            cli_instance.cleanup()

    asyncio.run(_chat())


@app.command()
def project(
    messages: list[str] = typer.Argument(
        None, help="Messages for the coordination agent, processed in order"
    ),
):
    """Run messages through the coordination agent and show the project."""

    async def _project():
        try:
            router = cli_instance.initialize_router()
            for message in messages or []:
                response = await router.dispatch(message, AgentId.SHARED_STATE)
                print_response(response, str(AgentId.SHARED_STATE))
            print_project(cli_instance.store)
        finally:
            cli_instance.cleanup()

    asyncio.run(_project())


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Agent Switchboard CLI.

    Route messages to specialized agents and coordinate shared project state.
    """
    level = logging.DEBUG if verbose else cli_instance.settings.numeric_log_level
    configure_logging(level)


if __name__ == "__main__":
    app()
