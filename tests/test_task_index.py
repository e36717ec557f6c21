"""Tests for periodic_para/task_index.py and the task views."""

from datetime import date

from periodic_para.models import DateRange, TaskNode
from periodic_para.periods import parse_period
from periodic_para.task_filter import TaskTreeFilter, done_tasks, recorded_tasks, tagged_tasks
from periodic_para.task_index import VaultTaskIndex, parse_tasks, render_tasks
from periodic_para.tags import build_tag_predicate
from periodic_para.vault import FileVault


def test_parse_tasks_builds_forest():
    text = """# Log
- [x] Write report ✅ 2024-01-01
- [ ] Plan week #focus
    - [x] Draft outline ✅ 2024-01-02
        - [ ] Deep item
    - [ ] Second child
* [X] Star bullet
Not a task
"""
    roots = parse_tasks(text, "n.md", ["work"])
    assert [r.text for r in roots] == ["Write report ✅ 2024-01-01", "Plan week #focus", "Star bullet"]
    assert roots[0].completed is True
    assert roots[0].completion == date(2024, 1, 1)
    assert roots[0].section.label == "Log"
    assert roots[0].line == 1
    plan = roots[1]
    assert [c.text for c in plan.children] == ["Draft outline ✅ 2024-01-02", "Second child"]
    assert plan.children[0].children[0].text == "Deep item"
    assert plan.tags == ["#work", "#focus"]
    assert roots[2].completed is True
    assert len(list(plan.walk())) == 4


def test_header_resets_nesting():
    roots = parse_tasks("- [ ] a\n# Habit\n  - [ ] b\n")
    assert [r.text for r in roots] == ["a", "b"]
    assert roots[1].section.label == "Habit"


def test_render_tasks_groups_by_document():
    tasks = [
        TaskNode(text="a", path="x/One.md", children=[TaskNode(text="b", completed=True, path="x/One.md")]),
        TaskNode(text="c", path="Two.md"),
    ]
    assert render_tasks(tasks).splitlines() == [
        "### [[x/One]]",
        "- [ ] a",
        "  - [x] b",
        "",
        "### [[Two]]",
        "- [ ] c",
    ]


def test_done_tasks_in_week(vault):
    index = VaultTaskIndex(FileVault(vault))
    tf = TaskTreeFilter("Habit")
    tasks = done_tasks(index, tf, DateRange(date(2024, 1, 1), date(2024, 1, 7)))
    assert [t.text for t in tasks] == ["Write report ✅ 2024-01-01", "Plan week"]


def test_done_tasks_open_window(vault):
    index = VaultTaskIndex(FileVault(vault))
    assert done_tasks(index, TaskTreeFilter("Habit"), DateRange()) == []


def test_recorded_tasks_include_related_notes(vault):
    index = VaultTaskIndex(FileVault(vault))
    tf = TaskTreeFilter("Habit")
    week = parse_period("2024-W01.md")
    tasks = recorded_tasks(index, tf, week, ["PeriodicNotes/2024/Weekly/2024-W01.md"])
    texts = [t.text for t in tasks]
    assert texts == [
        "Write report ✅ 2024-01-01",
        "Plan week",
        "Call dentist",
        "Weekly review",
    ]
    assert recorded_tasks(index, tf, None) == []


def test_tagged_tasks(vault):
    index = VaultTaskIndex(FileVault(vault))
    predicate = build_tag_predicate(["work"])
    tasks = tagged_tasks(index, "Topics/Work.md", predicate)
    paths = {t.path for t in tasks}
    # source note, templates and the 'work2' project are left out
    assert paths == {"1. Projects/Alpha/Alpha.README.md"}
    assert [t.completed for t in tasks] == [False, True]


def test_query_without_tags_filters_nothing_but_folders(vault):
    index = VaultTaskIndex(FileVault(vault))
    tasks = index.query('TASK\nFROM -"Templates"\nWHERE file.path != "Topics/Work.md"')
    paths = {t.path for t in tasks}
    assert "Templates/Task template.md" not in paths
    assert "Topics/Work.md" not in paths
    assert "1. Projects/Beta/Beta.README.md" in paths


def test_tasks_skip_unreadable_documents(vault):
    (vault / "Topics" / "legacy.md").write_bytes(b"- [x] caf\xe9 \xff\n")
    index = VaultTaskIndex(FileVault(vault))
    paths = {t.path for t in index.tasks()}
    assert "Topics/legacy.md" not in paths
    assert "Topics/Work.md" in paths
