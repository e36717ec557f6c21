"""Tag predicates for the task query language."""

from __future__ import annotations

import re
from typing import Iterable

from periodic_para.errors import NoTagsDeclared

_CONTAINS_RE = re.compile(r'contains\(\s*tags\s*,\s*"#?([^"]+)"\s*\)')


def normalize_tags(raw: object) -> list[str]:
    """Front matter 'tags' -> list of tag names without '#', order kept, no dupes."""
    if not raw:
        return []
    if isinstance(raw, str):
        items = re.split(r"[,\s]+", raw)
    elif isinstance(raw, (list, tuple)):
        items = []
        for item in raw:
            items.extend(re.split(r"[,\s]+", str(item)))
    else:
        items = [str(raw)]
    out: list[str] = []
    for item in items:
        tag = item.strip().lstrip("#")
        if tag and tag not in out:
            out.append(tag)
    return out


def has_common_prefix(tags_a: Iterable[str], tags_b: Iterable[str]) -> bool:
    """True if some tag in *tags_a* starts with some tag in *tags_b*.

    Plain string prefix, so 'work2' matches 'work'.
    """
    tags_b = list(tags_b)
    for a in tags_a:
        for b in tags_b:
            if a.startswith(b):
                return True
    return False


def build_tag_predicate(tags: Iterable[str]) -> str:
    """'contains(tags, "#a") OR contains(tags, "#b")'. Raises NoTagsDeclared."""
    clauses = [f'contains(tags, "#{tag.lstrip("#")}")' for tag in tags]
    if not clauses:
        raise NoTagsDeclared()
    return " OR ".join(clauses)


def parse_tag_predicate(text: str) -> list[str]:
    """Tag names referenced by the contains() clauses of a predicate."""
    return _CONTAINS_RE.findall(text)
