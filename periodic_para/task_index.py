"""Checklist task source over a vault.

Recognizes nested markdown checkboxes:
    - [ ] Task label
    - [x] Done ✅ 2024-01-05
        - [ ] Subtask
Each top-level checkbox becomes a TaskNode owning its indented subtasks.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Iterable, Protocol

from periodic_para.errors import MissingDocument
from periodic_para.models import DocumentRef, TaskNode, TaskSection
from periodic_para.tags import normalize_tags, parse_tag_predicate
from periodic_para.task_filter import completion_date
from periodic_para.vault import FileVault

logger = logging.getLogger(__name__)

CHECKBOX_RE = re.compile(r"^(\s*)(?:[-*+]|\d+[.)])\s+\[(.)\]\s*(.*)$")
HEADER_RE = re.compile(r"^#{1,6}\s+(.*?)\s*#*\s*$")
INLINE_TAG_RE = re.compile(r"(?<![\w#])#([\w/-]+)")

_EXCLUDE_RE = re.compile(r'-"([^"]+)"')
_PATH_NE_RE = re.compile(r'file\.path\s*!=\s*"([^"]*)"')
_SORT_RE = re.compile(r"SORT\s+completed\s+(ASC|DESC)", re.IGNORECASE)


class TaskIndex(Protocol):
    def tasks(
        self,
        predicate: Callable[[TaskNode], bool] | None = None,
        paths: Iterable[str] | None = None,
    ) -> list[TaskNode]: ...

    def sort(self, tasks: list[TaskNode], key: Callable[[TaskNode], Any], reverse: bool = False) -> list[TaskNode]: ...

    def query(self, text: str) -> list[TaskNode]: ...

    def render(self, tasks: list[TaskNode]) -> str: ...


def parse_tasks(text: str, path: str = "", tags: list[str] | None = None) -> list[TaskNode]:
    """Build the checklist forest of one document."""
    roots: list[TaskNode] = []
    stack: list[tuple[int, TaskNode]] = []
    section: TaskSection | None = None
    doc_tags = [f"#{t}" for t in (tags or [])]

    for i, line in enumerate(text.splitlines()):
        header = HEADER_RE.match(line)
        if header:
            section = TaskSection("header", header.group(1))
            stack = []
            continue
        m = CHECKBOX_RE.match(line)
        if not m:
            continue
        indent = len(m.group(1).expandtabs(4))
        label = m.group(3).strip()
        inline = [f"#{t}" for t in INLINE_TAG_RE.findall(label)]
        node = TaskNode(
            text=label,
            completed=m.group(2).lower() == "x",
            path=path,
            section=section,
            line=i,
            tags=doc_tags + [t for t in inline if t not in doc_tags],
            completion=completion_date(label),
        )
        while stack and stack[-1][0] >= indent:
            stack.pop()
        if stack:
            stack[-1][1].children.append(node)
        else:
            roots.append(node)
        stack.append((indent, node))
    return roots


def _has_tag(node: TaskNode, tag: str) -> bool:
    tag = f"#{tag.lstrip('#')}"
    return any(t == tag or t.startswith(tag + "/") for t in node.tags)


class VaultTaskIndex:
    """TaskIndex backed by the markdown files of a FileVault."""

    def __init__(self, vault: FileVault) -> None:
        self.vault = vault

    def _forest(self, ref: DocumentRef) -> list[TaskNode]:
        text = self.vault.read_sync(ref)
        tags = normalize_tags(self.vault.frontmatter(ref.path).get("tags"))
        return parse_tasks(text, ref.path, tags)

    def tasks(
        self,
        predicate: Callable[[TaskNode], bool] | None = None,
        paths: Iterable[str] | None = None,
    ) -> list[TaskNode]:
        if paths is None:
            refs = self.vault.documents()
        else:
            refs = [DocumentRef(p) for p in paths]
        out: list[TaskNode] = []
        for ref in refs:
            try:
                forest = self._forest(ref)
            except MissingDocument:
                logger.warning("Skipping tasks of unreadable document %s", ref.path)
                continue
            for node in forest:
                if predicate is None or predicate(node):
                    out.append(node)
        return out

    def sort(self, tasks: list[TaskNode], key: Callable[[TaskNode], Any], reverse: bool = False) -> list[TaskNode]:
        return sorted(tasks, key=key, reverse=reverse)

    def query(self, text: str) -> list[TaskNode]:
        """Run a TASK query.

        Understood: FROM -"folder" exclusions, contains(tags, "#t") clauses
        (OR-ed), file.path != "..." and SORT completed ASC|DESC.
        """
        excluded = _EXCLUDE_RE.findall(text)
        wanted = parse_tag_predicate(text)
        not_path = _PATH_NE_RE.search(text)

        def keep(node: TaskNode) -> bool:
            if any(node.path == f or node.path.startswith(f.rstrip("/") + "/") for f in excluded):
                return False
            if not_path and node.path == not_path.group(1):
                return False
            if wanted and not any(_has_tag(node, t) for t in wanted):
                return False
            return True

        tasks = self.tasks(keep)
        sort = _SORT_RE.search(text)
        if sort:
            tasks = self.sort(tasks, key=lambda t: t.completed, reverse=sort.group(1).upper() == "DESC")
        return tasks

    def render(self, tasks: list[TaskNode]) -> str:
        return render_tasks(tasks)


def _render_node(node: TaskNode, depth: int, out: list[str]) -> None:
    mark = "x" if node.completed else " "
    out.append(f"{'  ' * depth}- [{mark}] {node.text}")
    for child in node.children:
        _render_node(child, depth + 1, out)


def render_tasks(tasks: list[TaskNode]) -> str:
    """Markdown checklist grouped under each task's source document."""
    out: list[str] = []
    current = None
    for node in tasks:
        if node.path != current:
            if out:
                out.append("")
            current = node.path
            name = node.path[:-3] if node.path.endswith(".md") else node.path
            out.append(f"### [[{name}]]")
        _render_node(node, 0, out)
    return "\n".join(out)
