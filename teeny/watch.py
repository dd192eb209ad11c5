"""File watching and incremental rebuilds for Teeny.

watchdog delivers events on its own observer thread; the handler here only
hands each changed path to the asyncio loop. All reconciliation runs on the
loop, one event at a time, so it interleaves with HTTP requests only at
I/O boundaries.

Key objects:
- ChangeKind: What a changed path is, which decides what to rebuild.
- classify_change: Map a project-relative path to its ChangeKind.
- WatchLoop: Consumes change events and drives the SiteBuilder.
"""

from __future__ import annotations

import asyncio
import os
from enum import Enum
from pathlib import Path

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .build import SiteBuilder
from .registry import PageRegistry
from .utils import PAGES_DIR, STATIC_DIR, TEMPLATES_DIR, is_hidden, is_html, is_markdown

WATCHED_DIRS = (PAGES_DIR, STATIC_DIR, TEMPLATES_DIR)
WATCH_MODES = ("incremental", "restart")


class ChangeKind(Enum):
    PAGE = "page"
    TEMPLATE = "template"
    PAGE_ASSET = "page_asset"
    TEMPLATE_ASSET = "template_asset"
    STATIC_ASSET = "static_asset"
    IGNORED = "ignored"


ASSET_KINDS = frozenset(
    {ChangeKind.PAGE_ASSET, ChangeKind.TEMPLATE_ASSET, ChangeKind.STATIC_ASSET}
)


def classify_change(path: Path) -> ChangeKind:
    """Classify a project-relative path by its root and extension.

    Args:
        path: Path relative to the project root.

    Returns:
        The kind of change, IGNORED for hidden files and paths outside the
        watched roots.
    """
    parts = path.parts
    if len(parts) < 2 or any(is_hidden(part) for part in parts):
        return ChangeKind.IGNORED
    root = parts[0]
    if root == STATIC_DIR:
        return ChangeKind.STATIC_ASSET
    if root == TEMPLATES_DIR:
        return ChangeKind.TEMPLATE if is_html(path) else ChangeKind.TEMPLATE_ASSET
    if root == PAGES_DIR:
        return ChangeKind.PAGE if is_markdown(path) else ChangeKind.PAGE_ASSET
    return ChangeKind.IGNORED


class _ChangeHandler(FileSystemEventHandler):
    """Forwards created, modified and moved-to file paths to the event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop, queue: asyncio.Queue):
        super().__init__()
        self.loop = loop
        self.queue = queue

    def on_any_event(self, event):
        if event.is_directory:
            return
        if event.event_type in ("created", "modified"):
            changed = event.src_path
        elif event.event_type == "moved":
            changed = event.dest_path
        else:
            # Deletions leave stale registry entries and output files behind.
            return
        self.loop.call_soon_threadsafe(self.queue.put_nowait, Path(os.fsdecode(changed)))


class WatchLoop:
    """Turns filesystem changes into the smallest rebuild that covers them.

    Attributes:
        builder: Builder performing page, template and asset updates.
        mode: ``incremental`` to rebuild only what a change affects, or
            ``restart`` to run a complete build on every change.
        queue: Paths waiting to be handled, filled by the watchdog thread.
    """

    def __init__(self, builder: SiteBuilder, mode: str = "incremental"):
        if mode not in WATCH_MODES:
            raise ValueError(f"Unknown watch mode: {mode!r}")
        self.builder = builder
        self.mode = mode
        self.queue: asyncio.Queue[Path] = asyncio.Queue()
        self._observer: Observer | None = None

    def start(self) -> None:
        """Start watching the source directories that exist.

        Must be called from within the running event loop.
        """
        handler = _ChangeHandler(asyncio.get_running_loop(), self.queue)
        observer = Observer()
        for folder in WATCHED_DIRS:
            watch_path = self.builder.project_root / folder
            if watch_path.exists():
                observer.schedule(handler, str(watch_path), recursive=True)
        observer.start()
        self._observer = observer

    def stop(self) -> None:
        if self._observer:
            self._observer.stop()
            self._observer.join()
            self._observer = None

    async def run(self) -> None:
        while True:
            path = await self.queue.get()
            await self.handle_change(path)

    def _relative(self, path: Path) -> Path | None:
        if not path.is_absolute():
            return path
        try:
            return path.relative_to(self.builder.project_root)
        except ValueError:
            return None

    async def handle_change(self, path: Path) -> ChangeKind:
        """Rebuild whatever a single changed path affects.

        Args:
            path: Absolute or project-relative path of the changed file.

        Returns:
            The classification that decided the action.

        Raises:
            TemplateStructureError: If a template lacks an ``html`` element.
        """
        rel = self._relative(path)
        kind = classify_change(rel) if rel is not None else ChangeKind.IGNORED
        if kind is ChangeKind.IGNORED:
            return kind

        print(f"Detected change in file {rel.as_posix()}.")
        try:
            if self.mode == "restart":
                await self._full_rebuild()
            elif kind in ASSET_KINDS:
                await self.builder.copy_asset(rel)
            elif kind is ChangeKind.PAGE:
                await self.builder.process_page(rel)
            else:
                await self.builder.rebuild_template(rel.as_posix())
        except OSError as exc:
            print(f"Could not rebuild after change to {rel.as_posix()}: {exc}")
        return kind

    async def _full_rebuild(self) -> None:
        self.builder.registry = PageRegistry()
        await self.builder.build()
