"""Composition root: wires settings, vault, locator, aggregator and views."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from periodic_para.aggregator import PeriodicAggregator
from periodic_para.errors import MissingDocument, NO_VIEW_PROVIDED, render_error
from periodic_para.locator import DocumentLocator
from periodic_para.models import DocumentRef, Settings
from periodic_para.task_index import VaultTaskIndex
from periodic_para.vault import FileVault
from periodic_para.views import ViewRegistry, find_blocks
from periodic_para.workspace import load_settings, vault_root


@dataclass
class ParaApp:
    root: Path
    settings: Settings
    vault: FileVault
    locator: DocumentLocator
    aggregator: PeriodicAggregator
    index: VaultTaskIndex
    views: ViewRegistry

    async def render_view(self, source_path: str, view: str) -> str:
        return await self.views.render(source_path, view)

    async def render_note(self, source_path: str) -> str:
        """Render every view block embedded in a note, in order."""
        try:
            text = await self.vault.read(DocumentRef(source_path))
        except MissingDocument as e:
            return render_error(e.message, source_path)
        blocks = find_blocks(text)
        if not blocks:
            return render_error(NO_VIEW_PROVIDED, source_path)
        parts = [await self.views.render(source_path, body) for body in blocks]
        return "\n\n".join(parts)


def build_app(root: Path | None = None, settings: Settings | None = None) -> ParaApp:
    if root is None:
        root = vault_root()
    if settings is None:
        settings = load_settings(root)
    vault = FileVault(root)
    locator = DocumentLocator(vault)
    aggregator = PeriodicAggregator(vault, locator, settings)
    index = VaultTaskIndex(vault)
    views = ViewRegistry(settings, locator, aggregator, index)
    return ParaApp(root, settings, vault, locator, aggregator, index, views)
