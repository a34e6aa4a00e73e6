# src/taskmasterra/engine/validate.py

"""
Task list validation rules.

This module checks a task list for format problems and reports them as
issues with a severity level:

- ERROR   : must be fixed (malformed brackets, misplaced / repeated "!!"),
- WARNING : probably wrong (unknown status or priority letter, empty title),
- INFO    : suggestions (non-fibonacci effort, deep headers).

It never modifies content and never raises for bad input.
"""

import re
from dataclasses import dataclass
from typing import Sequence

from .model import IssueLevel
from .parse import (
    ACTIVE_MARKER,
    FIBONACCI_EFFORTS,
    KNOWN_STATUSES,
    PRIORITY_EFFORT_RE,
    scan_task_prefix,
)


# ---------------------------------------------------------------------
# Result objects
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """
    A single validation problem.

    `code` names the rule that fired (e.g. "active_misplaced");
    `line` is the 1-based line number it fired on.
    """

    line: int
    level: IssueLevel
    code: str
    message: str


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """
    Aggregated validation result for a single task list.
    """

    issues: Sequence[ValidationIssue]

    def _by_level(self, level: IssueLevel) -> list[ValidationIssue]:
        return [i for i in self.issues if i.level is level]

    @property
    def errors(self) -> list[ValidationIssue]:
        return self._by_level(IssueLevel.ERROR)

    @property
    def warnings(self) -> list[ValidationIssue]:
        return self._by_level(IssueLevel.WARNING)

    @property
    def info(self) -> list[ValidationIssue]:
        return self._by_level(IssueLevel.INFO)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    @property
    def ok(self) -> bool:
        return not self.issues


# ---------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------

_HEADER_RE = re.compile(r"^(#{1,6})\s+(.+)$")

_VALID_PRIORITY_LETTERS = frozenset("ABCD")
_ACTIVE_STATUSES = frozenset(" wW")
_MAX_HEADER_DEPTH = 3


def validate_content(content: str) -> ValidationResult:
    """
    Validate a task list and return all issues found.

    Line rules run first (in line order), then the file-wide rules.
    """
    issues: list[ValidationIssue] = []
    lines = content.split("\n")

    for i, line in enumerate(lines, start=1):
        _validate_line(line, i, issues)

    _validate_global(lines, issues)

    return ValidationResult(issues=tuple(issues))


def _issue(
    issues: list[ValidationIssue],
    line: int,
    level: IssueLevel,
    code: str,
    message: str,
) -> None:
    issues.append(ValidationIssue(line=line, level=level, code=code, message=message))


def _validate_line(line: str, num: int, issues: list[ValidationIssue]) -> None:
    s = line.strip()
    if not s:
        return

    if s.startswith("- ["):
        _validate_task_line(line, num, issues)
    elif s.startswith("#"):
        _validate_header_line(line, num, issues)
    elif s.startswith("- "):
        _validate_detail_line(line, num, issues)


def _validate_task_line(line: str, num: int, issues: list[ValidationIssue]) -> None:
    prefix = scan_task_prefix(line)
    if prefix is None or not prefix.status:
        _issue(issues, num, IssueLevel.ERROR, "task_format", "Invalid task format")
        return

    status = prefix.status
    title = line[prefix.end:].strip()

    if status not in KNOWN_STATUSES:
        _issue(issues, num, IssueLevel.WARNING, "status_unknown", f"Unknown status '{status}'")

    if not title:
        _issue(issues, num, IssueLevel.WARNING, "title_empty", "Task has no title")

    if ACTIVE_MARKER in line:
        _validate_active_marker(line, prefix.end, num, issues)
        if status not in _ACTIVE_STATUSES:
            _issue(
                issues,
                num,
                IssueLevel.WARNING,
                "active_status",
                "Active task (!!) should have empty or 'w' status",
            )

    m = PRIORITY_EFFORT_RE.search(line)
    if m is not None:
        letter, effort = m.group(1), m.group(2)
        if letter not in _VALID_PRIORITY_LETTERS:
            _issue(issues, num, IssueLevel.WARNING, "priority_unknown", f"Unknown priority '{letter}'")
        if not _is_fibonacci(effort):
            _issue(
                issues,
                num,
                IssueLevel.INFO,
                "effort_not_fibonacci",
                f"Effort '{effort}' is not a standard fibonacci number",
            )


def _validate_active_marker(line: str, end: int, num: int, issues: list[ValidationIssue]) -> None:
    marker = f" {ACTIVE_MARKER} "
    if not line.startswith(marker, end):
        _issue(
            issues,
            num,
            IssueLevel.ERROR,
            "active_misplaced",
            "Active marker (!!) must come immediately after the status bracket "
            "and before any priority/effort markers",
        )
        return

    if ACTIVE_MARKER in line[end + len(marker):]:
        _issue(
            issues,
            num,
            IssueLevel.ERROR,
            "active_multiple",
            "Multiple active markers (!!) are not allowed",
        )


def _is_fibonacci(effort: str) -> bool:
    # "01" is not accepted: the token must be written the standard way.
    return effort in {str(n) for n in FIBONACCI_EFFORTS}


def _validate_header_line(line: str, num: int, issues: list[ValidationIssue]) -> None:
    m = _HEADER_RE.match(line)
    if m is None:
        _issue(issues, num, IssueLevel.WARNING, "header_format", "Invalid header format")
        return

    level = len(m.group(1))
    title = m.group(2).strip()

    if not title:
        _issue(issues, num, IssueLevel.WARNING, "header_empty", "Header has no title")

    if level > _MAX_HEADER_DEPTH:
        _issue(
            issues,
            num,
            IssueLevel.INFO,
            "header_depth",
            "Consider using fewer header levels for better organization",
        )


def _validate_detail_line(line: str, num: int, issues: list[ValidationIssue]) -> None:
    if not (line.startswith("  ") or line.startswith("\t")):
        _issue(issues, num, IssueLevel.WARNING, "detail_indent", "Detail line should be indented")

    content = line.strip()[len("- "):].strip()
    if not content:
        _issue(issues, num, IssueLevel.WARNING, "detail_empty", "Detail line has no content")


def _validate_global(lines: Sequence[str], issues: list[ValidationIssue]) -> None:
    has_tasks = False
    has_headers = False
    all_completed = True

    for line in lines:
        s = line.strip()
        if s.startswith("- ["):
            has_tasks = True
            if "[x]" not in s and "[X]" not in s:
                all_completed = False
        elif s.startswith("#"):
            has_headers = True

    if not has_tasks:
        _issue(issues, 1, IssueLevel.WARNING, "no_tasks", "No tasks found in file")

    if not has_headers:
        _issue(issues, 1, IssueLevel.INFO, "no_headers", "Consider adding a header to organize your tasks")

    if has_tasks and all_completed:
        _issue(
            issues,
            1,
            IssueLevel.INFO,
            "all_completed",
            "All tasks are completed - consider archiving or creating new tasks",
        )
