# src/taskmasterra/engine/stats.py

"""
Task statistics.

Read-only aggregation over the task-line grammar: status counts plus
priority and effort breakdowns. Rendering lives in render.py.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from .model import Priority
from .ops import read_document
from .parse import is_active, is_task, parse_task_info


@dataclass(slots=True)
class TaskStats:
    """
    Counters for a single task list.

    Each task lands in at most one of completed / active / blocked / worked,
    checked in that order.
    """

    total: int = 0
    completed: int = 0
    active: int = 0
    blocked: int = 0
    worked: int = 0
    priorities: Counter = field(default_factory=Counter)
    efforts: Counter = field(default_factory=Counter)
    generated: datetime = field(default_factory=datetime.now)

    def percentage(self, part: int) -> float:
        if self.total == 0:
            return 0.0
        return part / self.total * 100

    def sorted_priorities(self) -> list[tuple[Priority, int]]:
        return sorted(self.priorities.items(), key=lambda kv: Priority.sort_key(kv[0]))

    def sorted_efforts(self) -> list[tuple[int, int]]:
        return sorted(self.efforts.items())


def analyze_lines(lines: Iterable[str], *, now: Optional[datetime] = None) -> TaskStats:
    stats = TaskStats(generated=now or datetime.now())

    for line in lines:
        if not is_task(line):
            continue

        info = parse_task_info(line)
        stats.total += 1

        if info.is_completed:
            stats.completed += 1
        elif is_active(line):
            stats.active += 1
        elif info.is_blocked:
            stats.blocked += 1
        elif info.is_worked:
            stats.worked += 1

        stats.priorities[info.priority] += 1
        if info.effort > 0:
            stats.efforts[info.effort] += 1

    return stats


def analyze_file(path: str | Path, *, now: Optional[datetime] = None) -> TaskStats:
    """Read a task list and aggregate its statistics (raises DocumentError)."""
    return analyze_lines(read_document(path).split("\n"), now=now)
