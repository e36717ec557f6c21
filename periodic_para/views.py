"""Content-block views.

A note embeds a view with a fenced block whose body is the view name:

    ```PeriodicPARA
    ProjectListByTime
    ```

Every handler takes (source, target, ctx): the raw block body, the surface
to mount markdown into, and the context of the note being rendered.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Protocol

from periodic_para.aggregator import PeriodicAggregator
from periodic_para.errors import (
    NoQueryBlockContent,
    NoTagsDeclared,
    ParaError,
    UnknownViewName,
    UnrecognizedPeriod,
    render_error,
)
from periodic_para.locator import DocumentLocator
from periodic_para.models import Period, Settings, TaskNode
from periodic_para.periods import parse_period, period_range, related_period_keys
from periodic_para.tags import build_tag_predicate
from periodic_para.task_filter import TaskTreeFilter, done_tasks, recorded_tasks, tagged_tasks
from periodic_para.task_index import TaskIndex

logger = logging.getLogger(__name__)

BLOCK_LANGUAGES = ("PeriodicPARA", "periodic-para")


class ViewName(str, Enum):
    PROJECT_LIST_BY_TIME = "ProjectListByTime"
    AREA_LIST_BY_TIME = "AreaListByTime"
    TASK_RECORD_LIST_BY_TIME = "TaskRecordListByTime"
    TASK_DONE_LIST_BY_TIME = "TaskDoneListByTime"
    TASK_LIST_BY_TAG = "TaskListByTag"
    PROJECT_LIST_BY_TAG = "ProjectListByTag"
    AREA_LIST_BY_TAG = "AreaListByTag"
    RESOURCE_LIST_BY_TAG = "ResourceListByTag"
    ARCHIVE_LIST_BY_TAG = "ArchiveListByTag"
    PROJECT_LIST_BY_FOLDER = "ProjectListByFolder"
    AREA_LIST_BY_FOLDER = "AreaListByFolder"
    RESOURCE_LIST_BY_FOLDER = "ResourceListByFolder"
    ARCHIVE_LIST_BY_FOLDER = "ArchiveListByFolder"

    @classmethod
    def lookup(cls, raw: str) -> ViewName:
        """Exact name, or the legacy spelling without 'ByTime'."""
        name = raw.strip()
        if not name:
            raise NoQueryBlockContent()
        for candidate in (name, f"{name}ByTime"):
            try:
                return cls(candidate)
            except ValueError:
                continue
        raise UnknownViewName(name)


_FENCE_RE = re.compile(r"^```[ \t]*(\S+)[ \t]*\n(.*?)^```[ \t]*$", re.MULTILINE | re.DOTALL)


def find_blocks(note_text: str) -> list[str]:
    """Bodies of the note's PeriodicPARA / periodic-para fenced blocks."""
    return [m.group(2) for m in _FENCE_RE.finditer(note_text) if m.group(1) in BLOCK_LANGUAGES]


# ── Mount surfaces ────────────────────────────────────────────


class Disposable(Protocol):
    def unload(self) -> None: ...


class MountTarget(Protocol):
    def mount(self, markdown: str) -> Disposable: ...


@dataclass(eq=False)
class RenderedBlock:
    """A mounted piece of markdown. Unloading clears it from its target."""

    target: MarkdownTarget
    markdown: str
    loaded: bool = True

    def unload(self) -> None:
        if self.loaded and self in self.target.blocks:
            self.target.blocks.remove(self)
        self.loaded = False


@dataclass(eq=False)
class MarkdownTarget:
    """In-memory mount target collecting markdown blocks."""

    blocks: list[RenderedBlock] = field(default_factory=list)

    def mount(self, markdown: str) -> RenderedBlock:
        block = RenderedBlock(self, markdown)
        self.blocks.append(block)
        return block

    @property
    def text(self) -> str:
        return "\n\n".join(b.markdown for b in self.blocks)


@dataclass
class SourceContext:
    source_path: str
    children: list[Disposable] = field(default_factory=list)

    def add_child(self, child: Disposable) -> None:
        self.children.append(child)

    def unload(self) -> None:
        for child in self.children:
            child.unload()
        self.children.clear()


Handler = Callable[[str, MountTarget, SourceContext], Awaitable[None]]


# ── Registry ──────────────────────────────────────────────────


class ViewRegistry:
    def __init__(
        self,
        settings: Settings,
        locator: DocumentLocator,
        aggregator: PeriodicAggregator,
        index: TaskIndex,
    ) -> None:
        self.settings = settings
        self.locator = locator
        self.aggregator = aggregator
        self.index = index
        self.tree_filter = TaskTreeFilter(settings.habit_header)

        s = settings
        self.handlers: dict[ViewName, Handler] = {
            ViewName.PROJECT_LIST_BY_TIME: self.project_list_by_time,
            ViewName.AREA_LIST_BY_TIME: self.area_list_by_time,
            ViewName.TASK_RECORD_LIST_BY_TIME: self.task_record_list_by_time,
            ViewName.TASK_DONE_LIST_BY_TIME: self.task_done_list_by_time,
            ViewName.TASK_LIST_BY_TAG: self.task_list_by_tag,
            ViewName.PROJECT_LIST_BY_TAG: self._by_tag(s.projects_path),
            ViewName.AREA_LIST_BY_TAG: self._by_tag(s.areas_path),
            ViewName.RESOURCE_LIST_BY_TAG: self._by_tag(s.resources_path),
            ViewName.ARCHIVE_LIST_BY_TAG: self._by_tag(s.archives_path),
            ViewName.PROJECT_LIST_BY_FOLDER: self._by_folder(s.projects_path),
            ViewName.AREA_LIST_BY_FOLDER: self._by_folder(s.areas_path),
            ViewName.RESOURCE_LIST_BY_FOLDER: self._by_folder(s.resources_path),
            ViewName.ARCHIVE_LIST_BY_FOLDER: self._by_folder(s.archives_path),
        }

    async def handle(self, source: str, target: MountTarget, ctx: SourceContext) -> None:
        """Entry point for a fenced block. Errors become an inline diagnostic."""
        try:
            view = ViewName.lookup(source)
            await self.handlers[view](source, target, ctx)
        except ParaError as e:
            logger.info("View failed in %s: %s", ctx.source_path, e.message)
            ctx.add_child(target.mount(render_error(e.message, ctx.source_path)))

    async def render(self, source_path: str, view: str) -> str:
        target = MarkdownTarget()
        await self.handle(view, target, SourceContext(source_path))
        return target.text

    @staticmethod
    def _mount(text: str, target: MountTarget, ctx: SourceContext) -> None:
        ctx.add_child(target.mount(text))

    # ── By time ───────────────────────────────────────────────

    async def project_list_by_time(self, source: str, target: MountTarget, ctx: SourceContext) -> None:
        try:
            window = period_range(parse_period(ctx.source_path))
        except UnrecognizedPeriod:
            return
        result = await self.aggregator.aggregate_projects(window, self.settings.project_list_header)
        self._mount(self.aggregator.render_projects(result), target, ctx)

    async def area_list_by_time(self, source: str, target: MountTarget, ctx: SourceContext) -> None:
        try:
            period = parse_period(ctx.source_path)
        except UnrecognizedPeriod:
            return
        areas = await self.aggregator.aggregate_areas(period, self.settings.area_list_header)
        text = await asyncio.to_thread(self.aggregator.render_areas, areas)
        self._mount(text, target, ctx)

    async def task_done_list_by_time(self, source: str, target: MountTarget, ctx: SourceContext) -> None:
        try:
            window = period_range(parse_period(ctx.source_path))
        except UnrecognizedPeriod:
            return
        tasks = await asyncio.to_thread(done_tasks, self.index, self.tree_filter, window)
        self._mount(self.index.render(tasks), target, ctx)

    async def task_record_list_by_time(self, source: str, target: MountTarget, ctx: SourceContext) -> None:
        try:
            period = parse_period(ctx.source_path)
        except UnrecognizedPeriod:
            return
        tasks = await asyncio.to_thread(self._recorded, period)
        self._mount(self.index.render(tasks), target, ctx)

    def _recorded(self, period: Period) -> list[TaskNode]:
        related = []
        for keys in related_period_keys(period).values():
            for key in keys:
                ref = self.locator.resolve(f"{key}.md", "", self.settings.periodic_notes_path)
                if ref is not None:
                    related.append(ref.path)
        return recorded_tasks(self.index, self.tree_filter, period, related)

    # ── By tag / folder ───────────────────────────────────────

    async def task_list_by_tag(self, source: str, target: MountTarget, ctx: SourceContext) -> None:
        tags = await asyncio.to_thread(self.locator.tags_of, ctx.source_path)
        predicate = build_tag_predicate(tags)
        tasks = await asyncio.to_thread(tagged_tasks, self.index, ctx.source_path, predicate)
        self._mount(self.index.render(tasks), target, ctx)

    def _by_tag(self, folder: str) -> Handler:
        async def handler(source: str, target: MountTarget, ctx: SourceContext) -> None:
            tags = await asyncio.to_thread(self.locator.tags_of, ctx.source_path)
            if not tags:
                raise NoTagsDeclared()
            text = await asyncio.to_thread(self.locator.render_collection, folder, tags)
            self._mount(text, target, ctx)

        return handler

    def _by_folder(self, folder: str) -> Handler:
        async def handler(source: str, target: MountTarget, ctx: SourceContext) -> None:
            text = await asyncio.to_thread(self.locator.render_collection, folder)
            self._mount(text, target, ctx)

        return handler
