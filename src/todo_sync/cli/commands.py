# src/todo_sync/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from ..connectors.formatting import format_counter, render_view
from ..core.models import TaskId
from ..core.state import AppState

CommandHandler = Callable[[AppState, list[str]], Awaitable[str]]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string ("" for nothing to print) or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return await handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  Any other text is added as a new task.")
        return "\n".join(lines)


registry = CommandRegistry()


def _task_at(state: AppState, raw: str) -> TaskId:
    """Map a 1-based position in the current view to a task id."""
    try:
        pos = int(raw)
    except ValueError:
        raise ValueError(f"Not a task number: {raw!r}") from None

    tasks = state.coordinator.view().tasks
    if pos < 1 or pos > len(tasks):
        raise ValueError(f"No task #{pos} in the current view ({len(tasks)} shown).")
    return tasks[pos - 1].id


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list            -> show the current view
    /list completed  -> switch filter, then show
    """
    coordinator = state.coordinator
    if args:
        try:
            return render_view(coordinator.set_filter(args[0]))
        except ValueError as e:
            return str(e)
    return render_view(coordinator.view())


async def cmd_filter(state: AppState, args: list[str]) -> str:
    if not args:
        return f"Current filter: {state.coordinator.current_filter.value}. Use /filter all|active|completed."
    return await cmd_list(state, args[:1])


async def cmd_add(state: AppState, args: list[str]) -> str:
    await state.coordinator.add(" ".join(args))
    return ""


async def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <n>"
    try:
        task_id = _task_at(state, args[0])
    except ValueError as e:
        return str(e)
    await state.coordinator.toggle_complete(task_id)
    return ""


async def cmd_edit(state: AppState, args: list[str]) -> str:
    if len(args) < 1:
        return "Usage: /edit <n> <new title>"
    try:
        task_id = _task_at(state, args[0])
    except ValueError as e:
        return str(e)
    await state.coordinator.edit(task_id, " ".join(args[1:]))
    return ""


async def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <n>"
    try:
        task_id = _task_at(state, args[0])
    except ValueError as e:
        return str(e)
    await state.coordinator.delete(task_id)
    return ""


async def cmd_clear_all(state: AppState, args: list[str]) -> str:
    await state.coordinator.clear_all()
    return ""


async def cmd_clear_completed(state: AppState, args: list[str]) -> str:
    await state.coordinator.clear_completed()
    return ""


async def cmd_reload(state: AppState, args: list[str]) -> str:
    await state.coordinator.load()
    return ""


async def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    store = "in-memory demo store" if getattr(settings, "offline_mode", False) else getattr(
        settings, "api_base_url", "?"
    )
    view = state.coordinator.view()
    return (
        "Status:\n"
        f"  Store: {store}\n"
        f"  Filter: {view.filter.value}\n"
        f"  Tasks: {format_counter(view.counts)}\n"
        f"  Requests in flight: {state.busy.in_flight}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show tasks: /list [all|active|completed].", aliases=["ls"])
registry.register("filter", cmd_filter, help_text="Switch the view: /filter all|active|completed.")
registry.register("add", cmd_add, help_text="Add a task: /add <title>.")
registry.register("done", cmd_done, help_text="Toggle completion: /done <n>.", aliases=["toggle"])
registry.register("edit", cmd_edit, help_text="Rename a task: /edit <n> <new title>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <n>.", aliases=["del", "delete"])
registry.register("clear-all", cmd_clear_all, help_text="Delete every task (asks first).")
registry.register(
    "clear-completed", cmd_clear_completed, help_text="Delete completed tasks (asks first)."
)
registry.register("reload", cmd_reload, help_text="Reload the list from the store.")
registry.register("status", cmd_status, help_text="Show store, filter and counters.")
