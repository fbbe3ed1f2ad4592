"""
Learning Tutor: interactive command-line dialogue.

A Rich terminal interface for the cognitive-level tutoring dialogue.

Commands:
- learning-tutor chat       - Start or resume a learning dialogue
- learning-tutor sessions   - List stored sessions

Inside a chat, type ``status`` to inspect the learning item and ``quit`` or
``exit`` to leave; anything else is your answer.
"""
from __future__ import annotations

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from src.agents.base_agent import BaseAgent
from src.agents.learning import (
    CognitiveLevel,
    LearningGraphState,
    LearningItem,
    TeachingIntent,
    latest_assistant_message,
    resolve_active_item,
    run_turn,
    start_session,
)
from src.logging import configure_logging, get_logger, set_console_level
from src.services.config import get_system_language
from src.services.storage import SessionStore, get_session_store

logger = get_logger("CLI")


# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="learning-tutor",
    help="Cognitive-level tutoring dialogue in your terminal",
    no_args_is_help=True,
)
console = Console()


# =============================================================================
# Styling
# =============================================================================

LEVEL_NAMES = {
    CognitiveLevel.INTUITION_ONLY: "intuition only",
    CognitiveLevel.CAN_DESCRIBE: "can describe",
    CognitiveLevel.STRUCTURED: "structured",
    CognitiveLevel.TRANSFERABLE: "transferable",
}

INTENT_NAMES = {
    TeachingIntent.ELICIT_INTUITION: "drawing out intuition",
    TeachingIntent.FORCE_CLARIFICATION: "pressing for clarity",
    TeachingIntent.INTRODUCE_STRUCTURE: "introducing structure",
    TeachingIntent.TEST_TRANSFER: "testing transfer",
}

QUIT_COMMANDS = {"quit", "exit"}


def _level_label(item: LearningItem) -> str:
    return f"{item.current_level.value}/{len(CognitiveLevel)} ({LEVEL_NAMES[item.current_level]})"


def display_tutor_message(state: LearningGraphState) -> None:
    message = latest_assistant_message(state)
    if message:
        console.print(Panel(message, title="Tutor", border_style="cyan"))


def display_status(state: LearningGraphState) -> None:
    """Show every field of the active learning item."""
    item = resolve_active_item(state)
    if item is None:
        console.print("[yellow]No active learning item yet.[/yellow]")
        return

    table = Table(show_header=False, box=None)
    table.add_column("Field", style="dim")
    table.add_column("Value", style="bold")

    table.add_row("Goal", item.goal)
    table.add_row("Level", _level_label(item))
    table.add_row("Summary", item.cognitive_state.summary)
    table.add_row("Missing", item.cognitive_state.missing_parts or "-")
    table.add_row("Intent", INTENT_NAMES[item.next_intent])
    table.add_row("Evidence", str(item.evidence_count))
    table.add_row("Status", item.status.phase)

    console.print(table)


def display_progress(state: LearningGraphState) -> None:
    item = resolve_active_item(state)
    if item is None:
        return
    console.print(
        f"[dim]level {_level_label(item)} · {INTENT_NAMES[item.next_intent]} · "
        f"{item.evidence_count} evidence[/dim]"
    )


def display_summary(state: LearningGraphState) -> None:
    item = resolve_active_item(state)
    goal = item.goal if item else "-"
    level = _level_label(item) if item else "-"
    turns = sum(1 for m in state.get("messages") or [] if m["role"] == "user")
    console.print(Panel(
        f"[bold]Session Complete![/bold]\n\n"
        f"Goal: {goal}\n"
        f"Final level: {level}\n"
        f"Your answers: {turns}",
        title="Summary",
        border_style="green",
    ))


# =============================================================================
# Chat Loop
# =============================================================================


def _save(store: Optional[SessionStore], session_id: Optional[str], state: LearningGraphState) -> None:
    if store is not None and session_id:
        store.save(session_id, state)


async def _chat_loop(
    state: Optional[LearningGraphState],
    config: dict,
    store: Optional[SessionStore],
    session_id: Optional[str],
) -> None:
    if state is None:
        with console.status("[cyan]Preparing your tutor...[/cyan]"):
            state = await start_session(config=config)
        _save(store, session_id, state)
    else:
        console.print(f"[dim]Resumed session {session_id}[/dim]")
        display_progress(state)

    display_tutor_message(state)

    while True:
        try:
            line = Prompt.ask("\n[bold green]You[/bold green]")
        except (EOFError, KeyboardInterrupt):
            console.print("\n[yellow]Session interrupted.[/yellow]")
            break

        text = line.strip()
        if not text:
            console.print("[dim]Type your answer, 'status' or 'quit'.[/dim]")
            continue

        command = text.lower()
        if command in QUIT_COMMANDS:
            console.print("[yellow]Goodbye.[/yellow]")
            break
        if command == "status":
            display_status(state)
            continue

        try:
            with console.status("[cyan]Thinking...[/cyan]"):
                state = await run_turn(state, line, config=config)
        except Exception as e:
            logger.error(f"Turn failed: {e}")
            console.print("[red]Something went wrong, please try again.[/red]")
            continue

        _save(store, session_id, state)

        if state.get("next_action") == "end":
            display_summary(state)
            break

        display_tutor_message(state)
        display_progress(state)


@app.command()
def chat(
    session_id: Optional[str] = typer.Option(
        None,
        "--session-id", "-s",
        help="Resume (or create) a stored session with this id",
    ),
    language: Optional[str] = typer.Option(
        None,
        "--language", "-l",
        help="Prompt language (zh | en), defaults to config/main.yaml",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Show log output on the console",
    ),
) -> None:
    """Start or resume a learning dialogue."""
    configure_logging()
    set_console_level("INFO" if verbose else "WARNING")
    BaseAgent.reset_stats("learning")

    config = {"configurable": {"language": language or get_system_language()}}

    store: Optional[SessionStore] = None
    state: Optional[LearningGraphState] = None
    if session_id:
        store = get_session_store()
        state = store.load(session_id)
        if state is not None and state.get("next_action") == "end":
            console.print(f"[yellow]Session {session_id} has already ended.[/yellow]")
            display_summary(state)
            raise typer.Exit(0)

    console.print("\n[bold cyan]Learning Tutor[/bold cyan]")
    console.print("=" * 40)

    asyncio.run(_chat_loop(state, config, store, session_id))

    if verbose:
        BaseAgent.print_stats("learning")


@app.command()
def sessions(
    limit: int = typer.Option(10, "--limit", "-n", help="Number of sessions to list"),
) -> None:
    """List stored sessions, most recent first."""
    from datetime import datetime

    store = get_session_store()
    rows = store.list_sessions(limit=limit)
    if not rows:
        console.print("[dim]No stored sessions.[/dim]")
        return

    table = Table()
    table.add_column("Session")
    table.add_column("Created")
    table.add_column("Updated")
    for row in rows:
        table.add_row(
            row["session_id"],
            datetime.fromtimestamp(row["created_at"]).strftime("%Y-%m-%d %H:%M"),
            datetime.fromtimestamp(row["updated_at"]).strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


def run() -> None:
    """Console-script entry point."""
    app()


if __name__ == "__main__":
    run()
