# src/todo_sync/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import cast

from ..core.state import AppState
from ..tasks.task_models import Task, TaskStatus
from ..tasks.task_view import FilterMode, ViewSnapshot

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], Awaitable[str]]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], Awaitable[str]]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /list, ...)."""

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

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
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

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return await h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return await h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering ----


def render_task_list(snapshot: ViewSnapshot) -> str:
    counts = snapshot.counts
    f = snapshot.task_filter
    header = f"{snapshot.shown} shown / {counts.total} total ({counts.pending} pending, {counts.completed} completed)"
    if f.mode is not FilterMode.ALL or f.query.strip():
        header += f"  [filter: {f.mode.value}, search: {f.query.strip()!r}]"

    lines = [header]
    if snapshot.load_error:
        lines.append(f"! Couldn't load tasks. {snapshot.load_error}  (use /refresh to retry)")

    if snapshot.loading:
        lines.append("  Loading tasks...")
    elif not snapshot.rows:
        lines.append("  No tasks match your view. Try /filter all, /search, or /add a task.")

    for row in snapshot.rows:
        t = row.task
        mark = "x" if t.status is TaskStatus.COMPLETED else " "
        suffix = "  (deleting...)" if row.deleting else ""
        lines.append(f"  [{mark}] #{t.id} {t.title}{suffix}")
        if t.description:
            lines.append(f"        {t.description}")
    return "\n".join(lines)


def _split_title_description(args: list[str]) -> tuple[str, str]:
    text = " ".join(args)
    title, sep, description = text.partition("|")
    return title.strip(), description.strip() if sep else ""


def _find_task(state: AppState, raw: str) -> Task | None:
    raw = raw.lstrip("#")
    repo = state.repository
    if raw.isdigit():
        found = repo.get(int(raw))
        if found is not None:
            return found
    return repo.get(raw)


def _form_result(state: AppState, ok: bool, done_text: str) -> str:
    if ok:
        return done_text
    return f"Couldn't save. {state.form.error}\nFix and /retry, or /cancel."


# ---- handlers ----


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_list(state: AppState, args: list[str]) -> str:
    return render_task_list(state.snapshot())


async def cmd_refresh(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit:
        emit("Refreshing...")
    await state.repository.refresh()
    return render_task_list(state.snapshot())


async def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter            -> show current filter
    /filter pending    -> only pending tasks (also: all, completed)
    """
    if not args:
        return f"Filter is '{state.view.task_filter.mode.value}'. Use /filter all|pending|completed."
    try:
        state.view.set_filter(args[0].lower())
    except ValueError:
        return "Usage: /filter all|pending|completed."
    return render_task_list(state.snapshot())


async def cmd_search(state: AppState, args: list[str]) -> str:
    state.view.set_query(" ".join(args))
    return render_task_list(state.snapshot())


async def cmd_add(state: AppState, args: list[str]) -> str:
    """/add Buy milk | two litres"""
    title, description = _split_title_description(args)
    state.form.open_add()
    ok = await state.form.submit({"title": title, "description": description})
    return _form_result(state, ok, f"Added: {title}")


async def cmd_edit(state: AppState, args: list[str]) -> str:
    """/edit 7 New title | new description"""
    if len(args) < 2:
        return "Usage: /edit <id> <title> [| description]."
    task = _find_task(state, args[0])
    if task is None:
        return f"No task with id {args[0]}."
    if state.repository.is_deleting(task.id):
        return f"Task #{task.id} is being deleted."

    title, description = _split_title_description(args[1:])
    state.form.open_edit(task)
    ok = await state.form.submit(
        {"title": title, "description": description, "status": state.form.fields.status}
    )
    return _form_result(state, ok, f"Saved #{task.id}.")


async def cmd_retry(state: AppState, args: list[str]) -> str:
    form = state.form
    if not form.is_open:
        return "Nothing to retry."
    ok = await form.submit()
    return _form_result(state, ok, "Saved.")


async def cmd_cancel(state: AppState, args: list[str]) -> str:
    if not state.form.is_open:
        return "No open edit session."
    if not state.form.close():
        return "A save is in progress; wait for it to finish."
    return "Edit session closed."


async def cmd_toggle(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /toggle <id>."
    task = _find_task(state, args[0])
    if task is None:
        return f"No task with id {args[0]}."
    if state.repository.is_deleting(task.id):
        return f"Task #{task.id} is being deleted."

    state.spawn(state.repository.toggle_status(task), name=f"toggle-{task.id}")
    return f"Marking #{task.id} as {task.status.toggled().value}."


async def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /delete <id>."
    task = _find_task(state, args[0])
    if task is None:
        return f"No task with id {args[0]}."
    if state.repository.is_deleting(task.id):
        return f"Task #{task.id} is already being deleted."

    state.spawn(state.repository.delete(task), name=f"delete-{task.id}")
    return f'Deleting "{task.title}".'


async def cmd_status(state: AppState, args: list[str]) -> str:
    counts = state.snapshot().counts
    form = state.form
    session = "closed"
    if form.is_open:
        session = f"{form.mode.value}{' (saving)' if form.busy else ''}"
        if form.error:
            session += f", error: {form.error}"
    base_url = getattr(state.gateway, "base_url", "?")
    return (
        "Status:\n"
        f"  Service: {base_url}\n"
        f"  Tasks: {counts.total} ({counts.pending} pending, {counts.completed} completed)\n"
        f"  Pending operations: {len(state.background)}\n"
        f"  Edit session: {session}\n"
        f"  Load error: {state.repository.load_error or '-'}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show tasks for the current filter/search.", aliases=["ls"])
registry.register("refresh", cmd_refresh, help_text="Reload all tasks from the server.")
registry.register("filter", cmd_filter, help_text="Filter by status: /filter all|pending|completed.")
registry.register("search", cmd_search, help_text="Search title/description: /search <text> (empty clears).")
registry.register("add", cmd_add, help_text="Add a task: /add <title> [| description].")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> <title> [| description].")
registry.register("retry", cmd_retry, help_text="Resubmit the open add/edit session.")
registry.register("cancel", cmd_cancel, help_text="Close the open add/edit session.")
registry.register("toggle", cmd_toggle, help_text="Flip pending/completed: /toggle <id>.", aliases=["done"])
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("status", cmd_status, help_text="Show service, counts and pending operations.")
