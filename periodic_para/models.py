"""Typed dataclasses for the Periodic PARA data model.

Settings use from_dict/to_dict for YAML serialization.
camelCase in YAML is kept as-is in the keys, mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any


# ── Periods ───────────────────────────────────────────────────


class Granularity(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


@dataclass(frozen=True)
class Period:
    """A calendar period backed by the periodic note named ``{key}.md``."""

    granularity: Granularity
    key: str
    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"Period {self.key!r} starts after it ends")


@dataclass(frozen=True)
class DateRange:
    """Inclusive date window. Either bound may be open."""

    start: date | None = None
    end: date | None = None

    @property
    def is_open(self) -> bool:
        return self.start is None and self.end is None

    def contains(self, day: date) -> bool:
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True


# ── Durations ─────────────────────────────────────────────────


@dataclass(frozen=True)
class Duration:
    """Time spent, always normalized so that 0 <= minutes < 60."""

    hours: int = 0
    minutes: int = 0

    @classmethod
    def from_minutes(cls, total: int) -> Duration:
        return cls(hours=total // 60, minutes=total % 60)

    def total_minutes(self) -> int:
        return self.hours * 60 + self.minutes

    def __str__(self) -> str:
        return f"{self.hours}hr{self.minutes}"


# ── Documents ─────────────────────────────────────────────────


@dataclass(frozen=True)
class DocumentRef:
    path: str  # vault-relative, POSIX separators

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def stem(self) -> str:
        name = self.name
        return name[:-3] if name.endswith(".md") else name

    @property
    def folder(self) -> str:
        return self.path.rsplit("/", 1)[0] if "/" in self.path else ""


@dataclass(frozen=True)
class CollectionIndex:
    """The README-style index note of one PARA subfolder."""

    folder: str
    name: str
    ref: DocumentRef


@dataclass
class AggregationResult:
    entities: list[str] = field(default_factory=list)
    duration_by_entity: dict[str, str] = field(default_factory=dict)
    total: Duration | None = None


# ── Tasks ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class TaskSection:
    kind: str  # header, block
    label: str


@dataclass
class TaskNode:
    text: str = ""
    completed: bool = False
    path: str = ""
    section: TaskSection | None = None
    children: list[TaskNode] = field(default_factory=list)
    line: int = 0
    tags: list[str] = field(default_factory=list)
    completion: date | None = None

    def walk(self):
        yield self
        for child in self.children:
            yield from child.walk()


class TaskMode(str, Enum):
    COMPLETED_ON = "completed"
    RECORDED_ON = "recorded"


@dataclass(frozen=True)
class TaskQuery:
    mode: TaskMode = TaskMode.COMPLETED_ON
    start: date | None = None
    end: date | None = None

    @property
    def window(self) -> DateRange:
        return DateRange(self.start, self.end)


# ── Settings ──────────────────────────────────────────────────


def _text(d: dict[str, Any], key: str, default: str) -> str:
    # 'habitHeader:' with no value loads as None
    value = d.get(key)
    return default if value is None else str(value)


@dataclass
class Settings:
    periodic_notes_path: str = "PeriodicNotes"
    projects_path: str = "1. Projects"
    areas_path: str = "2. Areas"
    resources_path: str = "3. Resources"
    archives_path: str = "4. Archives"
    project_list_header: str = "Project List"
    area_list_header: str = "First Things Dimension"
    habit_header: str = "Habit"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Settings:
        if not d or not isinstance(d, dict):
            return cls()
        defaults = cls()
        return cls(
            periodic_notes_path=_text(d, "periodicNotesPath", defaults.periodic_notes_path),
            projects_path=_text(d, "projectsPath", defaults.projects_path),
            areas_path=_text(d, "areasPath", defaults.areas_path),
            resources_path=_text(d, "resourcesPath", defaults.resources_path),
            archives_path=_text(d, "archivesPath", defaults.archives_path),
            project_list_header=_text(d, "projectListHeader", defaults.project_list_header),
            area_list_header=_text(d, "areaListHeader", defaults.area_list_header),
            habit_header=_text(d, "habitHeader", defaults.habit_header),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "periodicNotesPath": self.periodic_notes_path,
            "projectsPath": self.projects_path,
            "areasPath": self.areas_path,
            "resourcesPath": self.resources_path,
            "archivesPath": self.archives_path,
            "projectListHeader": self.project_list_header,
            "areaListHeader": self.area_list_header,
            "habitHeader": self.habit_header,
        }
