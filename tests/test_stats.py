"""Tests for task statistics and the markdown report."""

from datetime import datetime

from taskmasterra.engine.model import Priority
from taskmasterra.engine.render import render_stats_report
from taskmasterra.engine.stats import analyze_file, analyze_lines


NOW = datetime(2024, 5, 6, 7, 8, 9)

SAMPLE = [
    "# Tasks",
    "- [x] A1 done",
    "- [ ] !! B2 active",
    "- [b] C3 blocked",
    "- [W] worked",
    "- [ ] D5 open",
    "  - detail is not a task",
]


def test_analyze_lines_counts():
    stats = analyze_lines(SAMPLE, now=NOW)

    assert stats.total == 5
    assert stats.completed == 1
    assert stats.active == 1
    assert stats.blocked == 1
    assert stats.worked == 1
    assert stats.priorities[Priority.CRITICAL] == 1
    assert stats.priorities[Priority.NONE] == 1
    assert stats.sorted_efforts() == [(1, 1), (2, 1), (3, 1), (5, 1)]


def test_completed_wins_over_active():
    stats = analyze_lines(["- [x] !! both"], now=NOW)
    assert stats.completed == 1
    assert stats.active == 0


def test_oversized_effort_is_not_counted():
    stats = analyze_lines(["- [ ] B" + "8" * 5000 + " huge"], now=NOW)

    assert stats.total == 1
    assert stats.priorities[Priority.HIGH] == 1
    assert stats.sorted_efforts() == []


def test_empty_input():
    stats = analyze_lines([], now=NOW)
    assert stats.total == 0
    assert stats.percentage(0) == 0.0


def test_analyze_file(tmp_path):
    p = tmp_path / "todo.md"
    p.write_text("\n".join(SAMPLE), encoding="utf-8")
    assert analyze_file(p, now=NOW).total == 5


def test_report():
    report = render_stats_report(analyze_lines(SAMPLE, now=NOW))

    assert report.startswith("# Task Statistics Report\nGenerated: 2024-05-06 07:08:09\n")
    assert "- Total Tasks: 5\n" in report
    assert "- Completed: 1 (20.0%)\n" in report
    assert "## Priority Breakdown\n- Critical: 1 (20.0%)\n- High: 1 (20.0%)\n- Medium: 1 (20.0%)\n- Low: 1 (20.0%)\n" in report
    assert "None:" not in report
    assert "- Effort 1: 1 tasks\n" in report
    assert report.endswith("- Completion Rate: 20.0%\n- Active Rate: 20.0%\n")


def test_report_without_tasks_skips_breakdowns():
    report = render_stats_report(analyze_lines(["# nothing"], now=NOW))

    assert "## Priority Breakdown" not in report
    assert "## Effort Breakdown" not in report
    assert "Active Rate" not in report
