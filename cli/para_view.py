#!/usr/bin/env python3
"""Periodic PARA viewer — renders a note's views in the terminal with Textual."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.widgets import Footer, Header, Markdown

from periodic_para import ParaApp, ViewName, build_app
from periodic_para.workspace import log_level, vault_root


class ViewerApp(App):
    """Shows the rendered output of one note (or one view of it)."""

    TITLE = "Periodic PARA"
    BINDINGS = [
        Binding("r", "refresh", "Re-render"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self, para: ParaApp, path: str, view: str | None = None) -> None:
        super().__init__()
        self.para = para
        self.path = path
        self.view = view

    def compose(self) -> ComposeResult:
        yield Header()
        with VerticalScroll():
            yield Markdown("", id="output")
        yield Footer()

    async def on_mount(self) -> None:
        self.sub_title = f"{self.path} · {self.view or 'all blocks'}"
        await self.action_refresh()

    async def action_refresh(self) -> None:
        self.para.vault.refresh()
        if self.view:
            text = await self.para.render_view(self.path, self.view)
        else:
            text = await self.para.render_note(self.path)
        await self.query_one("#output", Markdown).update(text or "_(nothing to show)_")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Render Periodic PARA views of a note.")
    parser.add_argument("path", help="note path relative to the vault, e.g. PeriodicNotes/2024/2024-01-01.md")
    parser.add_argument("--view", choices=[v.value for v in ViewName], default=None)
    parser.add_argument("--print", dest="print_only", action="store_true", help="print markdown and exit")
    args = parser.parse_args(argv)

    logging.basicConfig(level=log_level(), format="%(levelname)s %(name)s: %(message)s")

    root = vault_root()
    if not root.exists():
        print(f"Vault not found: {root}")
        print("Set PARA_VAULT_ROOT to your vault directory.")
        sys.exit(1)

    para = build_app(root)
    if args.print_only:
        if args.view:
            print(asyncio.run(para.render_view(args.path, args.view)))
        else:
            print(asyncio.run(para.render_note(args.path)))
        return

    ViewerApp(para, args.path, args.view).run()


if __name__ == "__main__":
    main()
