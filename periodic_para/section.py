"""Header-delimited section extraction from raw markdown."""

from __future__ import annotations


def extract_section(raw_text: str, header: str) -> list[str]:
    """Return the lines between '# {header}' and the next header line.

    Both boundary lines are excluded. If the header is missing, or is the
    last header in the document, the result is empty: a section is only
    recognised when another header closes it.
    """
    lines = raw_text.splitlines()
    target = f"# {header}"
    for i, line in enumerate(lines):
        if line.rstrip("\r") != target:
            continue
        body: list[str] = []
        for following in lines[i + 1:]:
            if following.startswith("#"):
                return body
            body.append(following)
        return []
    return []
