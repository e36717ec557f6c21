"""Periodic note names -> calendar periods, ranges, and sub-period keys.

Recognised note names (the file stem, directory and '.md' ignored):
    2024-03-15   day
    2024-W11     week (ISO)
    2024-03      month
    2024-Q1      quarter
    2024         year
"""

from __future__ import annotations

import calendar
import re
from datetime import date, timedelta
from pathlib import PurePosixPath
from typing import Iterator

from periodic_para.errors import UnrecognizedPeriod
from periodic_para.models import DateRange, Granularity, Period

_PATTERNS = [
    (Granularity.DAY, re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")),
    (Granularity.WEEK, re.compile(r"^(\d{4})-W(\d{2})$")),
    (Granularity.MONTH, re.compile(r"^(\d{4})-(\d{2})$")),
    (Granularity.QUARTER, re.compile(r"^(\d{4})-Q(\d)$")),
    (Granularity.YEAR, re.compile(r"^(\d{4})$")),
]

QUARTERS = ["Q1", "Q2", "Q3", "Q4"]


# ── Construction ──────────────────────────────────────────────


def _key(granularity: Granularity, day: date) -> str:
    if granularity is Granularity.DAY:
        return day.isoformat()
    if granularity is Granularity.WEEK:
        year, week, _ = day.isocalendar()
        return f"{year}-W{week:02d}"
    if granularity is Granularity.MONTH:
        return f"{day.year}-{day.month:02d}"
    if granularity is Granularity.QUARTER:
        return f"{day.year}-Q{(day.month - 1) // 3 + 1}"
    return str(day.year)


def _bounds(granularity: Granularity, day: date) -> tuple[date, date]:
    if granularity is Granularity.DAY:
        return day, day
    if granularity is Granularity.WEEK:
        monday = day - timedelta(days=day.weekday())
        return monday, monday + timedelta(days=6)
    if granularity is Granularity.MONTH:
        last = calendar.monthrange(day.year, day.month)[1]
        return day.replace(day=1), day.replace(day=last)
    if granularity is Granularity.QUARTER:
        first_month = (day.month - 1) // 3 * 3 + 1
        last_month = first_month + 2
        last = calendar.monthrange(day.year, last_month)[1]
        return date(day.year, first_month, 1), date(day.year, last_month, last)
    return date(day.year, 1, 1), date(day.year, 12, 31)


def period_containing(granularity: Granularity, day: date) -> Period:
    """The period of the given granularity that contains *day*."""
    start, end = _bounds(granularity, day)
    return Period(granularity, _key(granularity, day), start, end)


def _anchor(granularity: Granularity, groups: tuple[str, ...]) -> date:
    year = int(groups[0])
    if granularity is Granularity.DAY:
        return date(year, int(groups[1]), int(groups[2]))
    if granularity is Granularity.WEEK:
        return date.fromisocalendar(year, int(groups[1]), 1)
    if granularity is Granularity.MONTH:
        return date(year, int(groups[1]), 1)
    if granularity is Granularity.QUARTER:
        quarter = int(groups[1])
        if not 1 <= quarter <= 4:
            raise ValueError(f"quarter out of range: {quarter}")
        return date(year, (quarter - 1) * 3 + 1, 1)
    return date(year, 1, 1)


def parse_period(path: str) -> Period:
    """Map a periodic note path to its Period. Raises UnrecognizedPeriod."""
    stem = PurePosixPath(path.replace("\\", "/")).name
    if stem.endswith(".md"):
        stem = stem[:-3]
    for granularity, pattern in _PATTERNS:
        m = pattern.match(stem)
        if not m:
            continue
        try:
            anchor = _anchor(granularity, m.groups())
        except ValueError:
            raise UnrecognizedPeriod(path) from None
        return period_containing(granularity, anchor)
    raise UnrecognizedPeriod(path)


def period_range(period: Period | None) -> DateRange:
    """Calendar bounds of a period. None (no period) is an open range."""
    if period is None:
        return DateRange()
    return DateRange(period.start, period.end)


def range_for_path(path: str) -> DateRange:
    """Range implied by a note path; open (no bounds) for non-periodic notes."""
    try:
        return period_range(parse_period(path))
    except UnrecognizedPeriod:
        return DateRange()


# ── Expansion ─────────────────────────────────────────────────


def iter_days(start: date, end: date) -> Iterator[date]:
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


class SubPeriods:
    """Restartable sequence of sub-period keys touching a period's range."""

    def __init__(self, period: Period, granularity: Granularity) -> None:
        self.period = period
        self.granularity = granularity

    def __iter__(self) -> Iterator[str]:
        if self.granularity is Granularity.QUARTER and self.period.granularity is Granularity.YEAR:
            # a year always has exactly these four
            year = self.period.start.year
            return (f"{year}-{q}" for q in QUARTERS)
        return self._walk()

    def _walk(self) -> Iterator[str]:
        day = self.period.start
        while day <= self.period.end:
            sub = period_containing(self.granularity, day)
            yield sub.key
            day = sub.end + timedelta(days=1)

    def periods(self) -> Iterator[Period]:
        for key in self:
            yield parse_period(key)


def enumerate_subperiods(period: Period, granularity: Granularity) -> SubPeriods:
    return SubPeriods(period, granularity)


def related_period_keys(period: Period) -> dict[str, list[str]]:
    """Week, month and quarter keys whose whole range lies inside *period*."""
    out: dict[str, list[str]] = {"weeks": [], "months": [], "quarters": []}
    groups = [
        ("weeks", Granularity.WEEK),
        ("months", Granularity.MONTH),
        ("quarters", Granularity.QUARTER),
    ]
    for name, granularity in groups:
        for sub in enumerate_subperiods(period, granularity).periods():
            if sub.start >= period.start and sub.end <= period.end:
                out[name].append(sub.key)
    return out
