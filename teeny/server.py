"""Development server for Teeny.

Serves the built site over plain HTTP while the watch loop keeps it current:
- ``/`` serves ``index.html``.
- A path whose last segment has no ``.`` gets ``.html`` appended.
- Everything else is served as-is; misses get a fixed 404 page.

Key objects:
- DevServer: aiohttp application serving the output directory.
- develop: Build once, then serve and watch until cancelled.
"""

from __future__ import annotations

import mimetypes
from pathlib import Path

import aiofiles
import aiofiles.os
from aiohttp import web

from .build import SiteBuilder
from .registry import PageRegistry
from .watch import WatchLoop

NOT_FOUND_BODY = "<h1>404: Page not found</h1>"


def resolve_request_path(url_path: str) -> str:
    """Map a request path to a file path relative to the output root.

    Examples:
        >>> resolve_request_path("/")
        'index.html'
        >>> resolve_request_path("/blog/post")
        'blog/post.html'
        >>> resolve_request_path("/style.css")
        'style.css'
    """
    if url_path in ("", "/"):
        return "index.html"
    last_segment = url_path.rsplit("/", 1)[-1]
    if "." not in last_segment:
        url_path += ".html"
    return url_path.lstrip("/")


class DevServer:
    """HTTP server for the output directory.

    Attributes:
        output_dir: Directory files are served from.
        port: TCP port to listen on.
        app: The aiohttp application.
    """

    def __init__(self, output_dir: Path, port: int = 8000):
        self.output_dir = output_dir
        self.port = port
        self.app = web.Application()
        self.app.router.add_get("/{tail:.*}", self.handle)
        self._runner: web.AppRunner | None = None

    async def handle(self, request: web.Request) -> web.Response:
        root = self.output_dir.resolve()
        target = (root / resolve_request_path(request.path)).resolve()
        if not target.is_relative_to(root) or not await aiofiles.os.path.isfile(
            target
        ):
            return web.Response(
                status=404, text=NOT_FOUND_BODY, content_type="text/html"
            )
        async with aiofiles.open(target, "rb") as f:
            data = await f.read()
        content_type, _ = mimetypes.guess_type(target.name)
        return web.Response(
            body=data, content_type=content_type or "application/octet-stream"
        )

    async def start(self) -> None:  # pragma: no cover - integration path
        self._runner = web.AppRunner(self.app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, port=self.port)
        await site.start()
        print(f"Development server starting on http://localhost:{self.port}")

    async def stop(self) -> None:  # pragma: no cover - integration path
        if self._runner:
            await self._runner.cleanup()
            self._runner = None


async def develop(
    project_root: Path, port: int = 8000, mode: str = "incremental"
) -> None:  # pragma: no cover - integration path
    """Build the site, then serve it and rebuild on changes until cancelled.

    Args:
        project_root: Root directory of the project.
        port: Port for the HTTP server.
        mode: Watch mode, ``incremental`` or ``restart``.
    """
    builder = SiteBuilder(project_root, PageRegistry())
    await builder.build()
    server = DevServer(builder.output_dir, port)
    watcher = WatchLoop(builder, mode=mode)
    await server.start()
    watcher.start()
    try:
        await watcher.run()
    finally:
        watcher.stop()
        await server.stop()
