# src/taskmasterra/engine/reminder.py

"""
Reminders.app mirroring.

Active task lines ("- [ ] !! ...") are copied into a dedicated Reminders
list through AppleScript (`osascript -e <script>`). The list is cleared
first, so it always mirrors the current set of active tasks.

The process runner is injected into ReminderService so tests can replace
`subprocess.run` without touching module globals.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from .model import Priority
from .parse import is_active, parse_task_info


log = logging.getLogger(__name__)

Runner = Callable[..., subprocess.CompletedProcess]


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ReminderError(Exception):
    """
    Raised when an AppleScript call against Reminders.app fails.
    """

    action: str
    message: str

    def __str__(self) -> str:
        return f"{self.action}: {self.message}"


# ---------------------------------------------------------------------
# AppleScript helpers
# ---------------------------------------------------------------------

def escape_applescript(s: str) -> str:
    """Escape backslashes first, then double quotes."""
    return s.replace("\\", "\\\\").replace('"', '\\"')


def _clear_script(list_name: str) -> str:
    name = escape_applescript(list_name)
    return f"""
tell application "Reminders"
    if exists list "{name}" then
        tell list "{name}"
            delete reminders
        end tell
    end if
end tell
"""


def _add_script(list_name: str, title: str, note: str, due: Optional[tuple[int, int]]) -> str:
    name = escape_applescript(list_name)
    props = f'name:"{escape_applescript(title)}", body:"{escape_applescript(note)}"'

    due_setup = ""
    if due is not None:
        hour, minute = due
        due_setup = (
            "set dueDate to (current date)\n"
            f"    set hours of dueDate to {hour}\n"
            f"    set minutes of dueDate to {minute}\n"
            "    set seconds of dueDate to 0\n    "
        )
        props += ", due date:dueDate"

    return f"""
tell application "Reminders"
    {due_setup}if exists list "{name}" then
        tell list "{name}"
            make new reminder with properties {{{props}}}
        end tell
    else
        error "List '{name}' does not exist"
    end if
end tell
"""


# ---------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------

class ReminderService:
    """
    Thin wrapper around one Reminders list.

    `runner` must behave like `subprocess.run` (argv list, capture_output,
    text keyword arguments; returns a CompletedProcess).
    """

    def __init__(
        self,
        list_name: str,
        *,
        due_hour: int = 16,
        due_minute: int = 0,
        runner: Runner = subprocess.run,
    ) -> None:
        self.list_name = list_name
        self.due_hour = due_hour
        self.due_minute = due_minute
        self._runner = runner

    def _run(self, action: str, script: str) -> None:
        try:
            p = self._runner(
                ["osascript", "-e", script],
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise ReminderError(action, f"cannot run osascript: {e}") from e

        if p.returncode != 0:
            stderr = (p.stderr or "").strip()
            raise ReminderError(action, f"osascript exited with {p.returncode} (stderr: {stderr})")

    def clear_list(self) -> None:
        self._run(f"clear list '{self.list_name}'", _clear_script(self.list_name))

    def add_reminder(self, title: str, due_today: bool, note: str) -> None:
        due = (self.due_hour, self.due_minute) if due_today else None
        self._run(
            f"add reminder '{title}' to list '{self.list_name}'",
            _add_script(self.list_name, title, note, due),
        )


# ---------------------------------------------------------------------
# Mirroring
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ReminderFailure:
    line: int
    title: str
    error: ReminderError


@dataclass(slots=True)
class ReminderSyncResult:
    added: int = 0
    failures: list[ReminderFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def active(self) -> int:
        return self.added + len(self.failures)


def reminder_note(priority: Priority, effort: int) -> str:
    note = f"Priority: {priority.value}"
    if effort > 0:
        note += f", Effort: {effort}"
    return note


def update_reminders(lines: Iterable[str], service: ReminderService) -> ReminderSyncResult:
    """
    Replace the list's reminders with one reminder per active task.

    Clearing the list is all-or-nothing (ReminderError propagates). A failed
    add is recorded with its line number and the remaining tasks still run.
    Critical and High priority tasks are due today.
    """
    service.clear_list()

    result = ReminderSyncResult()
    for num, line in enumerate(lines, start=1):
        if not is_active(line):
            continue

        info = parse_task_info(line)
        due_today = info.priority in (Priority.CRITICAL, Priority.HIGH)
        note = reminder_note(info.priority, info.effort)

        try:
            service.add_reminder(info.title, due_today, note)
        except ReminderError as e:
            log.warning("line %d: %s", num, e)
            result.failures.append(ReminderFailure(line=num, title=info.title, error=e))
            continue

        result.added += 1

    return result
