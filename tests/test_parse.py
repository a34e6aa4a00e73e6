"""Tests for the task-line grammar (classifier + field parser)."""

import pytest

from taskmasterra.engine.model import LineKind, Priority
from taskmasterra.engine.parse import (
    classify_line,
    format_task_info,
    is_active,
    is_completed,
    is_sub_task,
    is_task,
    is_task_detail,
    is_touched,
    parse_effort,
    parse_priority,
    parse_task_info,
    scan_task_prefix,
)


@pytest.mark.parametrize(
    "line, task, touched, active, completed",
    [
        ("- [W] task", True, True, False, False),
        ("- [w] task", True, False, False, False),
        ("- [B] task", True, True, False, False),
        ("- [b] task", True, False, False, False),
        ("- [X] task", True, True, False, True),
        ("- [x] task", True, False, False, True),
        ("- [ ] task", True, False, False, False),
        ("- task", False, False, False, False),
        ("- [w] !! task", True, False, True, False),
        ("- [W] !! task", True, True, True, False),
        ("  - [W] subtask", True, True, False, False),
    ],
)
def test_status_facets(line, task, touched, active, completed):
    assert is_task(line) is task
    assert is_touched(line) is touched
    assert is_active(line) is active
    assert is_completed(line) is completed


@pytest.mark.parametrize(
    "line",
    [
        "",
        "# Header",
        "plain prose",
        "- [",
        "- []",
        "- [ab] two letters",
        "-[ ] missing space",
        "* [x] other bullet",
        "  - detail",
        "x - [x] not at start",
    ],
)
def test_non_task_lines_have_no_facets(line):
    assert not is_task(line)
    assert not is_completed(line)
    assert not is_active(line)
    assert not is_touched(line)
    assert parse_task_info(line) is None


def test_active_requires_single_spaces_around_marker():
    assert is_active("- [ ] !! go")
    assert not is_active("- [ ]  !! two spaces before")
    assert not is_active("- [ ] !!go")
    assert not is_active("- [ ] !!! three bangs")
    assert not is_active("- [ ] !!")
    assert not is_active("- [ ] A1 !! late marker")


def test_active_invalidated_by_second_marker():
    assert not is_active("- [ ] !! first !! second")
    assert not is_active("- [ ] !! shout!!")


def test_sub_task_and_detail():
    assert is_sub_task("  - [ ] indented")
    assert is_sub_task("\t- [x] tabbed")
    assert not is_sub_task("- [ ] top level")

    assert is_task_detail("  - note")
    assert is_task_detail("\t- note")
    assert is_task_detail("    - [ ] indented task counts too")
    assert not is_task_detail("- note")
    assert not is_task_detail("  -note")
    assert not is_task_detail("  plain indented text")


def test_classify_line_precedence():
    assert classify_line("- [ ] task") is LineKind.TASK
    assert classify_line("  - [ ] nested task") is LineKind.TASK
    assert classify_line("  - detail") is LineKind.DETAIL
    assert classify_line("## Section") is LineKind.PLAIN
    assert classify_line("") is LineKind.PLAIN


def test_scan_task_prefix_keeps_raw_content():
    prefix = scan_task_prefix("  - [ab] title")
    assert prefix is not None
    assert prefix.indent == 2
    assert prefix.status == "ab"
    assert not prefix.is_single

    assert scan_task_prefix("- [ no close") is None
    assert scan_task_prefix("- []").status == ""


@pytest.mark.parametrize(
    "line, priority, effort",
    [
        ("- [ ] !! A1 Critical task", Priority.CRITICAL, 1),
        ("- [ ] Regular task", Priority.NONE, 0),
        ("- [ ] A1 B2 multiple", Priority.CRITICAL, 1),
        ("- [ ] B3 high", Priority.HIGH, 3),
        ("- [ ] C5 medium", Priority.MEDIUM, 5),
        ("- [ ] D13 low", Priority.LOW, 13),
        ("- [ ] E8 unknown letter", Priority.NONE, 8),
        ("- [ ] XA1 not a whole word", Priority.NONE, 0),
        ("- [ ] A1b not a whole word", Priority.NONE, 0),
        ("- [ ] a1 lowercase", Priority.NONE, 0),
        ("- [ ] (B21) punctuation is a boundary", Priority.HIGH, 21),
    ],
)
def test_priority_and_effort(line, priority, effort):
    assert parse_priority(line) is priority
    assert parse_effort(line) == effort


def test_parse_task_info():
    info = parse_task_info("- [W] !! A1 Ship it  ")
    assert info is not None
    assert info.status == "W"
    assert info.title == "!! A1 Ship it"
    assert info.priority is Priority.CRITICAL
    assert info.effort == 1
    assert info.is_worked
    assert not info.is_completed


def test_oversized_effort_degrades_to_zero():
    line = "- [ ] A" + "1" * 5000 + " big"

    assert parse_effort(line) == 0
    assert parse_priority(line) is Priority.CRITICAL

    info = parse_task_info(line)
    assert info is not None
    assert info.effort == 0


def test_parse_task_info_keeps_status_verbatim():
    info = parse_task_info("  - [q] odd status")
    assert info.status == "q"
    assert info.title == "odd status"


def test_format_task_info():
    info = parse_task_info("- [w] B2 write docs")
    assert format_task_info(info) == "High | Effort: 2 | Status: w | B2 write docs"
    assert format_task_info(parse_task_info("- [ ] plain")) == "Status:   | plain"
    assert format_task_info(None) == ""
