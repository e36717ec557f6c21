"""Filesystem-backed markdown document store.

Paths handed out and accepted here are vault-relative POSIX strings
('1. Projects/Alpha/README.md'). Hidden directories ('.obsidian',
'.periodic-para', ...) are not part of the vault.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from periodic_para.errors import MissingDocument
from periodic_para.fileio import parse_frontmatter, read_text
from periodic_para.models import DocumentRef

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VaultEntry:
    path: str
    is_folder: bool

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]


class DocumentStore(Protocol):
    async def read(self, ref: DocumentRef) -> str: ...

    def resolve(self, link: str, source_path: str = "") -> DocumentRef | None: ...

    def children(self, folder: str) -> list[VaultEntry] | None: ...

    def frontmatter(self, path: str) -> dict[str, Any]: ...

    def link_text(self, ref: DocumentRef) -> str: ...

    def documents(self) -> list[DocumentRef]: ...


def _clean_link(link: str) -> str:
    """'Note#Heading|Alias' -> 'Note'."""
    link = link.split("|", 1)[0]
    link = link.split("#", 1)[0]
    return link.strip().replace("\\", "/").strip("/")


class FileVault:
    """DocumentStore over a directory of markdown files."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self._docs: list[str] | None = None

    def refresh(self) -> None:
        self._docs = None

    def _paths(self) -> list[str]:
        if self._docs is None:
            docs = []
            for p in self.root.rglob("*.md"):
                rel = p.relative_to(self.root)
                if any(part.startswith(".") for part in rel.parts):
                    continue
                docs.append(rel.as_posix())
            self._docs = sorted(docs)
        return self._docs

    def documents(self) -> list[DocumentRef]:
        return [DocumentRef(p) for p in self._paths()]

    async def read(self, ref: DocumentRef) -> str:
        return await asyncio.to_thread(self.read_sync, ref)

    def read_sync(self, ref: DocumentRef) -> str:
        path = self.root / ref.path
        if not path.is_file():
            raise MissingDocument(ref.path)
        try:
            return read_text(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Unreadable document %s: %s", ref.path, e)
            raise MissingDocument(ref.path) from e

    def resolve(self, link: str, source_path: str = "") -> DocumentRef | None:
        """Resolve link text the way wiki-links resolve.

        A link containing '/' is tried as a vault path first. Otherwise the
        nearest document with that name wins: same folder as the source,
        then the shortest path, then alphabetical.
        """
        target = _clean_link(link)
        if not target:
            return None
        if target.endswith(".md"):
            target = target[:-3]
        paths = self._paths()

        if "/" in target:
            exact = f"{target}.md"
            if exact in paths:
                return DocumentRef(exact)
            suffix = f"/{exact}"
            candidates = [p for p in paths if p.endswith(suffix)]
        else:
            candidates = [p for p in paths if DocumentRef(p).stem == target]

        if not candidates:
            return None
        source_folder = DocumentRef(source_path).folder if source_path else None

        def rank(p: str) -> tuple[int, int, str]:
            same_folder = 0 if source_folder is not None and DocumentRef(p).folder == source_folder else 1
            return (same_folder, p.count("/"), p)

        return DocumentRef(min(candidates, key=rank))

    def children(self, folder: str) -> list[VaultEntry] | None:
        """Immediate children of a vault folder, or None if it is not a folder."""
        path = self.root / folder if folder else self.root
        if not path.is_dir():
            return None
        entries = []
        for child in sorted(path.iterdir(), key=lambda p: p.name):
            if child.name.startswith("."):
                continue
            rel = child.relative_to(self.root).as_posix()
            entries.append(VaultEntry(rel, child.is_dir()))
        return entries

    def frontmatter(self, path: str) -> dict[str, Any]:
        if not path:
            return {}
        try:
            text = read_text(self.root / path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Unreadable front matter in %s: %s", path, e)
            return {}
        fm, _body = parse_frontmatter(text)
        return fm

    def link_text(self, ref: DocumentRef) -> str:
        """Shortest unambiguous link: the bare name if unique, else the path."""
        stem = ref.stem
        same_name = [p for p in self._paths() if DocumentRef(p).stem == stem]
        if len(same_name) <= 1:
            return stem
        return ref.path[:-3] if ref.path.endswith(".md") else ref.path
