# src/taskmasterra/engine/model.py

"""
Core domain models.

This module defines the small value types shared by the line grammar,
the record-keeping engine, and the read-only consumers (validator,
statistics, reminder mirroring).

Everything here is plain data; parsing and file handling live elsewhere.
"""

from dataclasses import dataclass
from enum import Enum


# ---------------------------------------------------------------------
# Line classification
# ---------------------------------------------------------------------

class LineKind(str, Enum):
    """
    Mutually exclusive classification of a document line.

    Precedence is fixed: TASK first, then DETAIL, then PLAIN.
    """

    TASK = "task"
    DETAIL = "detail"
    PLAIN = "plain"


# ---------------------------------------------------------------------
# Priority
# ---------------------------------------------------------------------

class Priority(str, Enum):
    """
    Task priority derived from a leading letter token (A1, B3, ...).

    critical > high > medium > low > none
    """

    NONE = "None"
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"

    @classmethod
    def from_letter(cls, letter: str) -> "Priority":
        return _PRIORITY_LETTERS.get(letter, cls.NONE)

    @classmethod
    def sort_key(cls, priority: "Priority") -> int:
        """
        Return numeric rank for report ordering.

        Lower value = more urgent.
        """
        order = {
            cls.CRITICAL: 0,
            cls.HIGH: 1,
            cls.MEDIUM: 2,
            cls.LOW: 3,
            cls.NONE: 4,
        }
        return order[priority]


_PRIORITY_LETTERS = {
    "A": Priority.CRITICAL,
    "B": Priority.HIGH,
    "C": Priority.MEDIUM,
    "D": Priority.LOW,
}


# ---------------------------------------------------------------------
# Task prefix / info
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class TaskPrefix:
    """
    Result of scanning the `<indent>- [<status>]` prefix of a line.

    `status` is the raw bracket content and may be empty or longer than
    one character; only single-character content makes a task line.
    `end` is the offset just past the closing bracket.
    """

    indent: int
    status: str
    end: int

    @property
    def is_single(self) -> bool:
        return len(self.status) == 1


@dataclass(frozen=True, slots=True)
class TaskInfo:
    """
    Parsed view of a single task line.

    Notes:
    - status is kept verbatim (not normalised to lowercase).
    - priority and effort come from the same first letter+digits token.
    """

    line: str
    status: str
    title: str
    priority: Priority = Priority.NONE
    effort: int = 0

    @property
    def is_completed(self) -> bool:
        return self.status in ("x", "X")

    @property
    def is_blocked(self) -> bool:
        return self.status in ("b", "B")

    @property
    def is_worked(self) -> bool:
        return self.status in ("w", "W")


# ---------------------------------------------------------------------
# Validation levels
# ---------------------------------------------------------------------

class IssueLevel(str, Enum):
    """
    Severity of a validation issue.

    INFO = suggestion, WARNING = potential issue, ERROR = must fix.
    """

    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
