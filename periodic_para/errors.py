"""Error taxonomy for Periodic PARA.

Nothing here is fatal to the host: handlers catch ParaError and mount an
inline diagnostic instead.
"""

from __future__ import annotations

from dataclasses import dataclass


NO_README_EXIST = "No README file exists in "
NO_FRONT_MATTER_TAG = "No front matter tags found in the current file"
NO_VIEW_PROVIDED = "No view provided"
NO_VIEW_EXISTED = "View does not exist"


class ParaError(Exception):
    """Base class. ``message`` is what the user sees."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class UnrecognizedPeriod(ParaError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Not a periodic note: {path}")
        self.path = path


class MissingDocument(ParaError):
    def __init__(self, link: str) -> None:
        super().__init__(f"Document not found: {link}")
        self.link = link


class NoTagsDeclared(ParaError):
    def __init__(self) -> None:
        super().__init__(NO_FRONT_MATTER_TAG)


class NoQueryBlockContent(ParaError):
    def __init__(self) -> None:
        super().__init__(NO_VIEW_PROVIDED)


class UnknownViewName(ParaError):
    def __init__(self, view: str) -> None:
        super().__init__(f"{NO_VIEW_EXISTED}: {view}")
        self.view = view


@dataclass(frozen=True)
class MissingIndexDocument:
    """Recoverable: a PARA subfolder without a README. Collected, never raised."""

    folder: str

    @property
    def message(self) -> str:
        return NO_README_EXIST + self.folder


def render_error(message: str, source_path: str = "") -> str:
    """Inline diagnostic block mounted in place of a view's output."""
    lines = ["```periodic-para-error", message]
    if source_path:
        lines.append(f"in: {source_path}")
    lines.append("```")
    return "\n".join(lines)


def render_warning(message: str) -> str:
    return f"> [!warning] {message}"
