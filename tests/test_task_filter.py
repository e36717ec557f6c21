"""Tests for periodic_para/task_filter.py."""

from datetime import date

from periodic_para.models import DateRange, TaskMode, TaskNode, TaskQuery, TaskSection
from periodic_para.task_filter import TaskTreeFilter, completion_date, recorded_date, strip_marker

DONE = TaskQuery(TaskMode.COMPLETED_ON, date(2024, 1, 1), date(2024, 1, 7))
RECORDED = TaskQuery(TaskMode.RECORDED_ON, date(2024, 1, 1), date(2024, 1, 7))
HABIT = TaskSection("header", "Habit")
LOG = TaskSection("header", "Log")


def _task(text, completed=False, path="PeriodicNotes/2024-01-03.md", section=LOG, children=None):
    return TaskNode(text=text, completed=completed, path=path, section=section, children=children or [])


def test_completion_and_recorded_dates():
    assert completion_date("Write ✅ 2024-01-05") == date(2024, 1, 5)
    assert completion_date("Write [completion:: 2024-01-06]") == date(2024, 1, 6)
    assert completion_date("Due 2024-01-05") is None
    assert completion_date("✅ 2024-13-40") is None
    assert recorded_date("PeriodicNotes/2024-01-03.md") == date(2024, 1, 3)
    assert recorded_date("Topics/Work.md") is None


def test_strip_marker():
    assert strip_marker("- [ ] a") == "a"
    assert strip_marker("a") == "a"


def test_no_bounds_never_matches():
    f = TaskTreeFilter("Habit")
    node = _task("Write ✅ 2024-01-05", completed=True, children=[_task("x ✅ 2024-01-05", completed=True)])
    for mode in TaskMode:
        assert f.matches(node, TaskQuery(mode)) is False
    assert f.matches(None, DONE) is False


def test_completed_in_window():
    f = TaskTreeFilter("Habit")
    assert f.matches(_task("Write ✅ 2024-01-05", completed=True), DONE) is True
    assert f.matches(_task("Write ✅ 2024-01-08", completed=True), DONE) is False
    assert f.matches(_task("Write ✅ 2023-12-31", completed=True), DONE) is False


def test_completed_requires_checked_box():
    f = TaskTreeFilter("Habit")
    assert f.matches(_task("Write ✅ 2024-01-05", completed=False), DONE) is False


def test_completed_requires_marker():
    f = TaskTreeFilter("Habit")
    assert f.matches(_task("Write 2024-01-05", completed=True), DONE) is False


def test_open_ended_bounds():
    f = TaskTreeFilter("Habit")
    node = _task("Write ✅ 2020-06-01", completed=True)
    assert f.matches(node, TaskQuery(TaskMode.COMPLETED_ON, None, date(2024, 1, 1))) is True
    assert f.matches(node, TaskQuery(TaskMode.COMPLETED_ON, date(2024, 1, 1), None)) is False


def test_recorded_uses_note_date():
    f = TaskTreeFilter("Habit")
    assert f.matches(_task("Plan week"), RECORDED) is True
    assert f.matches(_task("Plan week", path="PeriodicNotes/2024-02-01.md"), RECORDED) is False
    assert f.matches(_task("Plan week", path="Topics/Work.md"), RECORDED) is False


def test_trivial_text_never_matches():
    f = TaskTreeFilter("Habit")
    assert f.matches(_task("x"), RECORDED) is False
    assert f.matches(_task(""), RECORDED) is False


def test_excluded_header_does_not_self_match():
    f = TaskTreeFilter(" habit ")
    assert f.matches(_task("Run ✅ 2024-01-02", completed=True, section=HABIT), DONE) is False
    assert f.matches(_task("Run", section=TaskSection("header", "HABIT")), RECORDED) is False


def test_excluded_header_only_applies_to_headers():
    f = TaskTreeFilter("Habit")
    assert f.matches(_task("Run", section=TaskSection("block", "Habit")), RECORDED) is True


def test_child_in_non_excluded_section_still_matches():
    f = TaskTreeFilter("Habit")
    child = _task("Draft ✅ 2024-01-02", completed=True, section=LOG)
    parent = _task("Plan", completed=False, section=HABIT, children=[child])
    assert f.matches(child, DONE) is True
    assert f.matches(parent, DONE) is True
    assert f.matches(_task("Plan ✅ 2024-01-02", completed=True, section=HABIT), DONE) is False


def test_parent_retained_through_matching_descendant():
    f = TaskTreeFilter("Habit")
    grandchild = _task("Outline ✅ 2024-01-04", completed=True)
    parent = _task("Plan week", completed=False, children=[_task("Research", children=[grandchild])])
    assert f.matches(parent, DONE) is True


def test_parent_without_date_checks_children():
    f = TaskTreeFilter("Habit")
    child = _task("Draft ✅ 2024-01-02", completed=True)
    parent = _task("Plan", completed=True, children=[child])
    assert f.matches(parent, DONE) is True


def test_window_contains():
    w = DateRange(date(2024, 1, 1), date(2024, 1, 7))
    assert w.contains(date(2024, 1, 1)) and w.contains(date(2024, 1, 7))
    assert not w.contains(date(2024, 1, 8))
