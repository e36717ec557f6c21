"""Time-spent tokens of the form '<hours>hr<minutes>' (e.g. '4hr20', '2hr')."""

from __future__ import annotations

import re

from periodic_para.models import Duration

DURATION_RE = re.compile(r"(\d+)hr(\d+)?")


def parse_duration(text: str | None) -> Duration | None:
    """Return the first duration token in *text*, or None if there is none."""
    if not text:
        return None
    m = DURATION_RE.search(text)
    if not m:
        return None
    hours = int(m.group(1))
    minutes = int(m.group(2) or 0)
    return Duration.from_minutes(hours * 60 + minutes)


def _coerce(value: Duration | str | None) -> Duration | None:
    if value is None or isinstance(value, Duration):
        return value
    return parse_duration(value)


def add_durations(a: Duration | None, b: Duration | None) -> Duration | None:
    """Sum two durations, carrying minute overflow. None is the identity."""
    if a is None:
        return b
    if b is None:
        return a
    minutes = a.minutes + b.minutes
    carry = minutes // 60
    return Duration(hours=a.hours + b.hours + carry, minutes=minutes % 60)


def duration_percent(part: Duration | str | None, whole: Duration | str | None) -> str | None:
    """'NN.NN%' of part/whole. None when either side is missing or whole is zero."""
    part = _coerce(part)
    whole = _coerce(whole)
    if part is None or whole is None or whole.total_minutes() == 0:
        return None
    return f"{part.total_minutes() / whole.total_minutes() * 100:.2f}%"


def format_duration(d: Duration) -> str:
    return f"{d.hours}hr{d.minutes}"
