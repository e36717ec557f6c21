"""Rollups across periodic notes: project time tracking and area membership.

Project List sections in daily notes look like:

    # Project List
    1. [[Alpha.README|Alpha]] 4hr20
    2. [[1. Projects/Beta/README|Beta]] 1hr
    5hr20

A line with a duration and no link is the day's total. Linked lines add
their duration to the linked project.
"""

from __future__ import annotations

import asyncio
import logging
import re
from datetime import date

from periodic_para.duration import (
    DURATION_RE,
    add_durations,
    duration_percent,
    format_duration,
    parse_duration,
)
from periodic_para.errors import MissingDocument
from periodic_para.locator import DocumentLocator
from periodic_para.models import (
    AggregationResult,
    DateRange,
    DocumentRef,
    Duration,
    Granularity,
    Period,
    Settings,
)
from periodic_para.periods import enumerate_subperiods, iter_days, period_containing
from periodic_para.section import extract_section
from periodic_para.vault import DocumentStore

logger = logging.getLogger(__name__)

LINK_RE = re.compile(r"\[\[([^\]|]+)(?:\|[^\]]*)?\]\]")
FOLDER_RE = re.compile(r"/(.*)/")


def link_target(line: str) -> tuple[str, int] | None:
    """First [[target|display]] in *line*: (target, end offset)."""
    m = LINK_RE.search(line)
    if not m:
        return None
    target = m.group(1).strip()
    if not target:
        return None
    return target, m.end()


def folder_label(path: str) -> str:
    """'1. Projects/Alpha/README.md' -> 'Alpha' (text between outer slashes)."""
    m = FOLDER_RE.search(path)
    return m.group(1) if m else ""


class PeriodicAggregator:
    def __init__(self, store: DocumentStore, locator: DocumentLocator, settings: Settings) -> None:
        self.store = store
        self.locator = locator
        self.settings = settings

    def _periodic_note(self, key: str) -> DocumentRef | None:
        ref = self.locator.resolve(f"{key}.md", "", self.settings.periodic_notes_path)
        if ref is None:
            logger.debug("No periodic note for %s", key)
        return ref

    async def _section(self, ref: DocumentRef, header: str) -> list[str]:
        try:
            text = await self.store.read(ref)
        except MissingDocument:
            logger.debug("Skipping unreadable periodic note %s", ref.path)
            return []
        return extract_section(text, header)

    async def _sections(self, keys: list[str], header: str) -> list[list[str]]:
        """Read every existing note's section concurrently, in *keys* order."""
        refs = await asyncio.to_thread(lambda: [self._periodic_note(k) for k in keys])
        found = [r for r in refs if r is not None]
        return list(await asyncio.gather(*(self._section(r, header) for r in found)))

    # ── Projects ──────────────────────────────────────────────

    async def aggregate_projects(self, window: DateRange, header: str) -> AggregationResult:
        """Time spent per project over every day of *window*."""
        result = AggregationResult()
        if window.start is None or window.end is None:
            return result

        keys = [d.isoformat() for d in iter_days(window.start, window.end)]
        spent: dict[str, Duration] = {}
        for lines in await self._sections(keys, header):
            day_total = self._merge_day(lines, result.entities, spent)
            result.total = add_durations(result.total, day_total)

        for path, part in spent.items():
            result.duration_by_entity[path] = self._display(part, result.total)
        return result

    def _merge_day(
        self,
        lines: list[str],
        entities: list[str],
        spent: dict[str, Duration],
    ) -> Duration:
        # runs between awaits only, so merges never interleave
        day_total = Duration()
        for line in lines:
            if not line.strip():
                continue
            link = link_target(line)
            if link is None:
                declared = parse_duration(line)
                if declared is not None:
                    day_total = declared
                continue

            target, end = link
            ref = self.locator.resolve(target)
            if ref is None:
                logger.debug("Unresolved project link %s", target)
                continue
            if ref.path not in entities:
                entities.append(ref.path)
            trailing = DURATION_RE.search(line, end)
            if trailing:
                spent[ref.path] = add_durations(spent.get(ref.path), parse_duration(trailing.group(0)))
        return day_total

    @staticmethod
    def _display(part: Duration, total: Duration | None) -> str:
        total = total or Duration()
        return f"{format_duration(part)}/{format_duration(total)}={duration_percent(part, total) or ''}"

    def render_projects(self, result: AggregationResult) -> str:
        lines = []
        for i, path in enumerate(result.entities, start=1):
            line = f"{i}. [[{path}|{folder_label(path)}]]"
            spent = result.duration_by_entity.get(path)
            if spent:
                line += f" {spent}"
            lines.append(line)
        return "\n".join(lines)

    # ── Areas ─────────────────────────────────────────────────

    async def aggregate_areas(self, year: Period | date | int, header: str) -> list[str]:
        """Area link targets listed in the year's four quarterly notes."""
        if isinstance(year, Period):
            year = year.start
        if isinstance(year, int):
            year = date(year, 1, 1)
        keys = list(enumerate_subperiods(period_containing(Granularity.YEAR, year), Granularity.QUARTER))

        areas: list[str] = []
        for lines in await self._sections(keys, header):
            for line in lines:
                if not line:
                    continue
                link = link_target(line)
                if link and link[0] not in areas:
                    areas.append(link[0])
        return areas

    def render_areas(self, areas: list[str]) -> str:
        lines = []
        for i, area in enumerate(areas, start=1):
            ref = self.locator.resolve(area)
            label = folder_label(ref.path) if ref else ""
            lines.append(f"{i}. [[{area}|{label}]]")
        return "\n".join(lines)
