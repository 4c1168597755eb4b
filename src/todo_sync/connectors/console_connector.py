# src/todo_sync/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.errors import TodoSyncError, friendly_error_message
from ..core.state import AppState
from ..sync.notifications import Notice, NoticeKind
from .formatting import render_view

logger = logging.getLogger(__name__)

LineReader = Callable[[str], Awaitable[str]]

_NOTICE_TAGS = {
    NoticeKind.INFO: "[INFO]",
    NoticeKind.SUCCESS: "[OK]",
    NoticeKind.ERROR: "[ERROR]",
}


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


async def read_stdin_line(prompt: str) -> str:
    # input() blocks; keep the event loop free for in-flight store calls.
    return await asyncio.to_thread(input, prompt)


class ConsoleConfirmPrompt:
    """Asks y/N on the console before bulk clears."""

    def __init__(self, read_line: LineReader = read_stdin_line) -> None:
        self._read_line = read_line

    async def confirm(self, message: str, affected: int) -> bool:
        try:
            answer = await self._read_line(f"{message} ({affected} tasks) [y/N]: ")
        except (EOFError, KeyboardInterrupt):
            return False
        return answer.strip().lower() in {"y", "yes"}


def print_notice(notice: Notice) -> None:
    _print_ts(f"{_NOTICE_TAGS.get(notice.kind, '[INFO]')} {notice.text}")


async def run_console_loop(state: AppState, read_line: LineReader = read_stdin_line) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type a task to add it. Use /help for commands. Use /exit to quit.\n")

    unsubscribe = state.notifier.subscribe(print_notice)
    try:
        await state.coordinator.load()
        print(render_view(state.coordinator.view()))

        while True:
            try:
                user_input = (await read_line(">>> ")).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            try:
                reply = await command_registry.handle(state, user_input)
                if reply is None:
                    await state.coordinator.add(user_input)
                    reply = ""
            except TodoSyncError as e:
                reply = friendly_error_message(e)
            except Exception:
                logger.exception("Command handler crashed.")
                reply = "Internal error while handling a command."

            # Commands that changed something print nothing themselves; show the list.
            print(reply if reply else render_view(state.coordinator.view()))
    finally:
        unsubscribe()

    logger.info("Console connector finished.")
