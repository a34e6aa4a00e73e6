# src/taskmasterra/engine/parse.py

"""
Task-line grammar.

Recognised shapes:

    <indent?>- [<status>] [!! ]<title text>
      <indent+>- <detail text>

This module contains:
- the line classifier (task / sub-task / detail / completed / active / touched),
- the task field parser (status, title, priority, effort).

Every function here is pure and total: anomalies degrade to "not a task",
"not active", Priority.NONE or effort 0. Reporting them is the validator's job.
"""

import re
from typing import Final, Optional

from .model import LineKind, Priority, TaskInfo, TaskPrefix


# ---------------------------------------------------------------------
# Grammar constants
# ---------------------------------------------------------------------

INDENT_CHARS: Final[str] = " \t"
TASK_OPEN: Final[str] = "- ["
TASK_CLOSE: Final[str] = "]"
DETAIL_OPEN: Final[str] = "- "
ACTIVE_MARKER: Final[str] = "!!"

COMPLETED_STATUSES: Final[frozenset[str]] = frozenset("xX")
TOUCHED_STATUSES: Final[frozenset[str]] = frozenset("BWX")
KNOWN_STATUSES: Final[frozenset[str]] = frozenset(" bBwWxX")

FIBONACCI_EFFORTS: Final[tuple[int, ...]] = (1, 2, 3, 5, 8, 13, 21, 34, 55, 89)

# One uppercase letter + digits as a whole (ASCII) word, e.g. "A1", "C13".
PRIORITY_EFFORT_RE = re.compile(r"(?<![0-9A-Za-z_])([A-Z])([0-9]+)(?![0-9A-Za-z_])")


# ---------------------------------------------------------------------
# Prefix scanner
# ---------------------------------------------------------------------

def _indent_width(line: str) -> int:
    i = 0
    while i < len(line) and line[i] in INDENT_CHARS:
        i += 1
    return i


def scan_task_prefix(line: str) -> Optional[TaskPrefix]:
    """
    Scan `<indent>- [<content>]` at the start of a line.

    Returns None when the line does not open with "- [" after its indent,
    or when no closing bracket follows. The bracket content is returned
    verbatim, so callers can tell "- [ ]" from "- []" or "- [ab]".
    """
    indent = _indent_width(line)
    if not line.startswith(TASK_OPEN, indent):
        return None

    start = indent + len(TASK_OPEN)
    close = line.find(TASK_CLOSE, start)
    if close == -1:
        return None

    return TaskPrefix(indent=indent, status=line[start:close], end=close + 1)


def _task_prefix(line: str) -> Optional[TaskPrefix]:
    """Return the prefix only for well-formed task lines (one status char)."""
    prefix = scan_task_prefix(line)
    if prefix is None or not prefix.is_single:
        return None
    return prefix


# ---------------------------------------------------------------------
# Line classifier
# ---------------------------------------------------------------------

def is_task(line: str) -> bool:
    return _task_prefix(line) is not None


def is_sub_task(line: str) -> bool:
    """A task line with at least one leading space or tab."""
    prefix = _task_prefix(line)
    return prefix is not None and prefix.indent > 0


def is_task_detail(line: str) -> bool:
    """
    An indented "- " bullet.

    Bracket presence is not checked: an indented "- [ ]" line is both a
    task and a detail line. The record-keeping pass only asks this question
    for lines trailing an item it is already consuming.
    """
    indent = _indent_width(line)
    return indent > 0 and line.startswith(DETAIL_OPEN, indent)


def is_completed(line: str) -> bool:
    prefix = _task_prefix(line)
    return prefix is not None and prefix.status in COMPLETED_STATUSES


def is_touched(line: str) -> bool:
    """Uppercase B, W or X: worked on, blocked or completed today."""
    prefix = _task_prefix(line)
    return prefix is not None and prefix.status in TOUCHED_STATUSES


def is_active(line: str) -> bool:
    """
    Exactly " !! " right after the status bracket, and no other "!!"
    anywhere after it.
    """
    prefix = _task_prefix(line)
    if prefix is None:
        return False

    marker = f" {ACTIVE_MARKER} "
    if not line.startswith(marker, prefix.end):
        return False

    rest = line[prefix.end + len(marker):]
    return ACTIVE_MARKER not in rest


def classify_line(line: str) -> LineKind:
    if is_task(line):
        return LineKind.TASK
    if is_task_detail(line):
        return LineKind.DETAIL
    return LineKind.PLAIN


# ---------------------------------------------------------------------
# Field parser
# ---------------------------------------------------------------------

def _first_priority_token(line: str) -> Optional[tuple[str, str]]:
    m = PRIORITY_EFFORT_RE.search(line)
    if m is None:
        return None
    return m.group(1), m.group(2)


def parse_priority(line: str) -> Priority:
    token = _first_priority_token(line)
    if token is None:
        return Priority.NONE
    return Priority.from_letter(token[0])


def parse_effort(line: str) -> int:
    token = _first_priority_token(line)
    if token is None:
        return 0
    try:
        return int(token[1])
    except ValueError:
        # digit run beyond the interpreter's int conversion limit
        return 0


def parse_task_info(line: str) -> Optional[TaskInfo]:
    """
    Parse a task line into TaskInfo.

    Returns None for anything that is not a task line.
    """
    prefix = _task_prefix(line)
    if prefix is None:
        return None

    return TaskInfo(
        line=line,
        status=prefix.status,
        title=line[prefix.end:].strip(),
        priority=parse_priority(line),
        effort=parse_effort(line),
    )


def format_task_info(info: Optional[TaskInfo]) -> str:
    """
    One-line summary: "<priority> | Effort: <n> | Status: <s> | <title>".

    Parts that carry no information are omitted.
    """
    if info is None:
        return ""

    parts: list[str] = []
    if info.priority is not Priority.NONE:
        parts.append(info.priority.value)
    if info.effort > 0:
        parts.append(f"Effort: {info.effort}")
    if info.status:
        parts.append(f"Status: {info.status}")
    if info.title:
        parts.append(info.title)

    return " | ".join(parts)
