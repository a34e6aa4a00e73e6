# src/taskmasterra/engine/render.py

"""
Rendering helpers for CLI output.

This module is responsible for:
- the validation report (validate / recordkeep / updatereminders),
- the markdown statistics report (stats).

It is presentation-only: it returns strings and never touches files.
"""

from __future__ import annotations

from typing import Sequence

from .model import Priority
from .stats import TaskStats
from .validate import ValidationIssue, ValidationResult


# ---------------------------------------------------------------------
# Validation report
# ---------------------------------------------------------------------

def _issue_block(header: str, issues: Sequence[ValidationIssue]) -> list[str]:
    out = [header]
    for issue in issues:
        out.append(f"  Line {issue.line}: {issue.message}")
    return out


def render_validation(result: ValidationResult) -> str:
    """
    Render validation results grouped by severity.

    Format:
      ❌ N errors:
        Line L: message
    """
    if result.ok:
        return "✅ No issues found\n"

    lines: list[str] = []

    errors = result.errors
    if errors:
        lines += _issue_block(f"❌ {len(errors)} errors:", errors)

    warnings = result.warnings
    if warnings:
        lines += _issue_block(f"⚠️  {len(warnings)} warnings:", warnings)

    info = result.info
    if info:
        lines += _issue_block(f"ℹ️  {len(info)} suggestions:", info)

    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------
# Statistics report
# ---------------------------------------------------------------------

def render_stats_report(stats: TaskStats) -> str:
    """
    Render a markdown statistics report.

    Priority breakdown is ordered Critical -> Low and skips tasks without a
    priority; effort breakdown is ordered by effort.
    """
    pct = stats.percentage
    out: list[str] = [
        "# Task Statistics Report",
        f"Generated: {stats.generated.strftime('%Y-%m-%d %H:%M:%S')}",
        "",
        "## Overall Statistics",
        f"- Total Tasks: {stats.total}",
        f"- Completed: {stats.completed} ({pct(stats.completed):.1f}%)",
        f"- Active: {stats.active} ({pct(stats.active):.1f}%)",
        f"- Blocked: {stats.blocked} ({pct(stats.blocked):.1f}%)",
        f"- Worked On: {stats.worked} ({pct(stats.worked):.1f}%)",
        "",
    ]

    if stats.priorities:
        out.append("## Priority Breakdown")
        for priority, count in stats.sorted_priorities():
            if priority is Priority.NONE:
                continue
            out.append(f"- {priority.value}: {count} ({pct(count):.1f}%)")
        out.append("")

    if stats.efforts:
        out.append("## Effort Breakdown")
        for effort, count in stats.sorted_efforts():
            out.append(f"- Effort {effort}: {count} tasks")
        out.append("")

    out.append("## Progress Summary")
    out.append(f"- Completion Rate: {pct(stats.completed):.1f}%")
    if stats.total > 0:
        out.append(f"- Active Rate: {pct(stats.active):.1f}%")

    return "\n".join(out) + "\n"
