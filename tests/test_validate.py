"""Tests for task list validation and its rendering."""

from taskmasterra.engine.model import IssueLevel
from taskmasterra.engine.render import render_validation
from taskmasterra.engine.validate import validate_content


def _codes(result, level=None):
    return [i.code for i in result.issues if level is None or i.level is level]


def test_clean_file_has_no_issues():
    content = "# Tasks\n- [ ] !! A1 write tests\n  - start with parser\n- [w] B2 review\n"
    result = validate_content(content)

    assert result.ok
    assert render_validation(result) == "✅ No issues found\n"


def test_unknown_status_is_warning():
    result = validate_content("# T\n- [?] odd\n")
    issue = result.warnings[0]
    assert issue.code == "status_unknown"
    assert issue.line == 2
    assert not result.has_errors


def test_multi_char_status_is_warning_not_error():
    result = validate_content("# T\n- [ab] odd\n")
    assert "status_unknown" in _codes(result, IssueLevel.WARNING)


def test_malformed_bracket_is_error():
    result = validate_content("# T\n- [ never closed\n- [] empty\n")
    errors = result.errors
    assert [e.code for e in errors] == ["task_format", "task_format"]
    assert [e.line for e in errors] == [2, 3]


def test_misplaced_active_marker_is_error():
    result = validate_content("# T\n- [ ] A1 !! late\n")
    assert "active_misplaced" in _codes(result, IssueLevel.ERROR)


def test_multiple_active_markers_is_error():
    result = validate_content("# T\n- [ ] !! now !! really\n")
    assert "active_multiple" in _codes(result, IssueLevel.ERROR)


def test_active_with_blocked_status_is_warning():
    result = validate_content("# T\n- [b] !! stuck\n")
    assert "active_status" in _codes(result, IssueLevel.WARNING)


def test_priority_and_effort_rules():
    result = validate_content("# T\n- [ ] E3 odd letter\n- [ ] A4 odd effort\n")
    assert _codes(result, IssueLevel.WARNING) == ["priority_unknown"]
    assert _codes(result, IssueLevel.INFO) == ["effort_not_fibonacci"]
    assert result.info[0].line == 3


def test_empty_title_is_warning():
    result = validate_content("# T\n- [ ]\n")
    assert "title_empty" in _codes(result)


def test_header_and_detail_rules():
    content = "#NoSpace\n#### Deep\n- [ ] task\n- unindented detail\n"
    result = validate_content(content)

    assert "header_format" in _codes(result, IssueLevel.WARNING)
    assert "header_depth" in _codes(result, IssueLevel.INFO)
    assert "detail_indent" in _codes(result, IssueLevel.WARNING)


def test_global_rules():
    assert "no_tasks" in _codes(validate_content("just prose\n"))
    assert "no_headers" in _codes(validate_content("- [ ] task\n"))
    assert "all_completed" in _codes(validate_content("# T\n- [x] a\n- [X] b\n"))


def test_validation_never_raises_on_garbage():
    validate_content("- [\n\t- \n####\n- [!!] !!!! !!\n")


def test_render_validation_groups_by_level():
    result = validate_content("- [ ] A1 !! late\n- [?] odd\n")
    text = render_validation(result)

    assert text.startswith("❌ 1 errors:\n  Line 1: Active marker (!!) must come")
    assert "⚠️  1 warnings:\n  Line 2: Unknown status '?'" in text
    assert "ℹ️  1 suggestions:\n  Line 1: Consider adding a header" in text
