"""Date-window filtering of checklist trees, and the task views built on it."""

from __future__ import annotations

import logging
import re
from datetime import date

from periodic_para.models import DateRange, Period, TaskMode, TaskNode, TaskQuery

logger = logging.getLogger(__name__)

COMPLETION_RE = re.compile(r"(?:✅|\[completion::)\s*(\d{4}-\d{2}-\d{2})")
RECORD_RE = re.compile(r"\d{4}-\d{2}-\d{2}")
_MARKER_RE = re.compile(r"^\s*(?:[-*+]|\d+[.)])?\s*\[.\]\s?")


def _to_date(text: str) -> date | None:
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def completion_date(text: str) -> date | None:
    """Date of a '✅ 2024-01-05' or '[completion:: 2024-01-05]' marker."""
    m = COMPLETION_RE.search(text or "")
    return _to_date(m.group(1)) if m else None


def recorded_date(path: str) -> date | None:
    """First bare YYYY-MM-DD in a note path (daily notes)."""
    m = RECORD_RE.search(path or "")
    return _to_date(m.group(0)) if m else None


def strip_marker(text: str) -> str:
    return _MARKER_RE.sub("", text, count=1)


class TaskTreeFilter:
    """Decides whether a task, or any task beneath it, falls in a date window.

    Tasks under the excluded header (the habit tracker) never match on
    their own, though their subtasks still may.
    """

    def __init__(self, excluded_header: str = "") -> None:
        self.excluded_header = excluded_header

    def _excluded(self, node: TaskNode) -> bool:
        if node.section is None or node.section.kind != "header":
            return False
        return node.section.label.strip().lower() == self.excluded_header.strip().lower()

    def _self_matches(self, node: TaskNode, query: TaskQuery) -> bool:
        if query.mode is TaskMode.COMPLETED_ON:
            when = completion_date(node.text)
            if when is None or not node.completed:
                return False
        else:
            when = recorded_date(node.path)
            if when is None:
                return False
        if len(strip_marker(node.text)) <= 1:
            return False
        return query.window.contains(when)

    def matches(self, node: TaskNode | None, query: TaskQuery) -> bool:
        if node is None:
            return False
        if query.start is None and query.end is None:
            return False
        if not self._excluded(node) and self._self_matches(node, query):
            return True
        return any(self.matches(child, query) for child in node.children)


# ── Task views ────────────────────────────────────────────────


def done_tasks(index, tree_filter: TaskTreeFilter, window: DateRange) -> list[TaskNode]:
    """Tasks completed inside *window*, oldest completion first."""
    if window.is_open:
        return []
    query = TaskQuery(TaskMode.COMPLETED_ON, window.start, window.end)
    tasks = index.tasks(lambda t: tree_filter.matches(t, query))
    return index.sort(tasks, key=lambda t: t.completion or date.max)


def recorded_tasks(
    index,
    tree_filter: TaskTreeFilter,
    period: Period | None,
    related_paths: list[str] | None = None,
) -> list[TaskNode]:
    """Tasks written in daily notes inside the period, then every task of
    the week/month/quarter notes that fall inside it."""
    if period is None:
        return []
    query = TaskQuery(TaskMode.RECORDED_ON, period.start, period.end)
    tasks = index.tasks(lambda t: tree_filter.matches(t, query))
    if related_paths:
        tasks = tasks + index.tasks(paths=related_paths)
    return tasks


def tagged_tasks(index, source_path: str, predicate: str) -> list[TaskNode]:
    """Tasks in documents carrying any of the source note's tags."""
    query = (
        "TASK\n"
        'FROM -"Templates"\n'
        f'WHERE ({predicate}) AND file.path != "{source_path}"\n'
        "SORT completed ASC"
    )
    logger.debug("Task query: %s", query)
    return index.query(query)
