"""Link resolution, PARA collection listings, and declared tags."""

from __future__ import annotations

import logging
import re

from periodic_para.errors import MissingIndexDocument, render_warning
from periodic_para.models import CollectionIndex, DocumentRef
from periodic_para.tags import has_common_prefix, normalize_tags
from periodic_para.vault import DocumentStore

logger = logging.getLogger(__name__)

README_RE = re.compile(r"README\.md$")


class DocumentLocator:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def resolve(
        self,
        link: str,
        source_path: str = "",
        folder: str | None = None,
    ) -> DocumentRef | None:
        """Resolve *link*; None if unresolved or outside *folder* when given."""
        ref = self.store.resolve(link, source_path)
        if ref is None:
            return None
        if folder and folder not in ref.path:
            return None
        return ref

    def tags_of(self, path: str) -> list[str]:
        return normalize_tags(self.store.frontmatter(path).get("tags"))

    def list_collection_indexes(
        self,
        folder: str,
        tags: list[str] | None = None,
    ) -> tuple[list[CollectionIndex], list[MissingIndexDocument]] | None:
        """README of each first-level subfolder of *folder*, in name order.

        Subfolders without a README are reported as warnings and skipped.
        With *tags*, only READMEs whose tags share a prefix with them are kept.
        Returns None if *folder* does not exist.
        """
        entries = self.store.children(folder)
        if entries is None:
            return None

        found: list[CollectionIndex] = []
        missing: list[MissingIndexDocument] = []
        for sub in entries:
            if not sub.is_folder:
                continue
            children = self.store.children(sub.path) or []
            readme = next(
                (c for c in children if not c.is_folder and README_RE.search(c.name)),
                None,
            )
            if readme is None:
                logger.warning("No README in %s", sub.path)
                missing.append(MissingIndexDocument(sub.path))
                continue
            if tags and not has_common_prefix(self.tags_of(readme.path), tags):
                continue
            found.append(CollectionIndex(folder=sub.path, name=sub.name, ref=DocumentRef(readme.path)))
        return found, missing

    def render_collection(self, folder: str, tags: list[str] | None = None) -> str:
        """Numbered '[[link|name]]' list of a PARA folder's READMEs."""
        listed = self.list_collection_indexes(folder, tags)
        if listed is None:
            return f"No files in {folder}"
        found, missing = listed
        lines = [render_warning(w.message) for w in missing]
        for i, index in enumerate(found, start=1):
            lines.append(f"{i}. [[{self.store.link_text(index.ref)}|{index.name}]]")
        return "\n".join(lines)
