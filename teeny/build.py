"""Site building functionality for Teeny.

This module contains the build orchestrator. A full build wipes the output
directory, copies passthrough assets, then renders every Markdown page
through its template. The same object performs the single-file operations
the watch loop needs for incremental rebuilds.

Key objects:
- SiteBuilder: Full builds, single page builds, template fan-out, asset copies.
- build_site: Run a full build for a project directory.
- load_config: Load optional settings from teeny.yaml.
"""

from __future__ import annotations

import asyncio
import shutil
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os
import yaml

from .content import Page, read_page
from .registry import PageRegistry
from .templates import MissingTemplateError, TemplateEngine
from .utils import (
    OUTPUT_DIR,
    PAGES_DIR,
    STATIC_DIR,
    TEMPLATES_DIR,
    Outcome,
    attempt,
    ensure_clean_dir,
    is_hidden,
    is_html,
    is_markdown,
)

CONFIG_FILE = "teeny.yaml"

DEFAULT_CONFIG = {
    "port": 8000,
    "watch": "incremental",
}


@dataclass
class BuildResult:
    """Result of a site build operation.

    Attributes:
        pages: Pages that were written.
        output_dir: Directory where the site was built.
    """

    pages: list[Page]
    output_dir: Path


def load_config(project_root: Path) -> dict[str, Any]:
    """Load site configuration from teeny.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.
    """
    config_path = project_root / CONFIG_FILE
    config = DEFAULT_CONFIG.copy()
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
            if isinstance(loaded, dict):
                config.update(
                    {key: value for key, value in loaded.items() if key in DEFAULT_CONFIG}
                )
    return config


def _ignore_for(exclude: Callable[[Path], bool] | None):
    """Build a copytree ``ignore`` callable skipping hidden and excluded files."""

    def ignore(directory: str, names: list[str]) -> set[str]:
        skipped = set()
        for name in names:
            if is_hidden(name):
                skipped.add(name)
            elif exclude is not None and exclude(Path(name)):
                if not Path(directory, name).is_dir():
                    skipped.add(name)
        return skipped

    return ignore


class SiteBuilder:
    """Builds the site and keeps the page registry current.

    Attributes:
        project_root: Root directory of the project.
        registry: Page/template index updated on every processed page.
        engine: Template engine used to render pages.
        output_dir: Absolute output directory.
    """

    def __init__(
        self,
        project_root: Path,
        registry: PageRegistry,
        engine: TemplateEngine | None = None,
    ):
        self.project_root = project_root
        self.registry = registry
        self.engine = engine or TemplateEngine(project_root)
        self.output_dir = project_root / OUTPUT_DIR

    async def build(self) -> BuildResult:
        """Run a full build.

        Returns:
            BuildResult listing the pages written.

        Raises:
            TemplateStructureError: If any template lacks an ``html`` element.
            FileNotFoundError: If the pages directory does not exist.
        """
        await asyncio.to_thread(ensure_clean_dir, self.output_dir)
        await attempt(self._copy_tree, TEMPLATES_DIR, is_html)
        await attempt(self._copy_tree, PAGES_DIR, is_markdown)
        await attempt(self._copy_tree, STATIC_DIR, None)

        pages_dir = self.project_root / PAGES_DIR
        if not await aiofiles.os.path.isdir(pages_dir):
            raise FileNotFoundError(f"Expected pages directory at {pages_dir}")
        pages = await self._process_directory(Path(PAGES_DIR))
        return BuildResult(pages=pages, output_dir=self.output_dir)

    async def _process_directory(self, directory: Path) -> list[Page]:
        """Process every Markdown page below a directory.

        Entries of one directory run concurrently and are all awaited
        before returning.
        """
        names = await aiofiles.os.listdir(self.project_root / directory)
        tasks = []
        for name in sorted(names):
            if is_hidden(name):
                continue
            rel = directory / name
            if await aiofiles.os.path.isdir(self.project_root / rel):
                tasks.append(self._process_directory(rel))
            elif is_markdown(rel):
                tasks.append(self.process_page(rel))
        results = await asyncio.gather(*tasks)

        pages: list[Page] = []
        for result in results:
            if isinstance(result, list):
                pages.extend(result)
            elif result is not None:
                pages.append(result)
        return pages

    async def process_page(self, page_path: Path) -> Page | None:
        """Render one page and write its output file.

        The page is recorded in the registry before rendering, so a page
        whose template is missing is still rebuilt once that template
        appears.

        Args:
            page_path: Project-relative page path.

        Returns:
            The processed page, or None if its template does not exist.

        Raises:
            TemplateStructureError: If the template lacks an ``html`` element.
        """
        page = await read_page(self.project_root, page_path)
        self.registry.record_page(page.path, page.template)
        try:
            html = await self.engine.render(page.metadata, page.body, page.template)
        except MissingTemplateError as exc:
            print(f"Template {exc.source_path} not found; skipping page {page.path}.")
            return None
        await self._write(page.output_path, html)
        return page

    async def rebuild_template(self, template_path: str) -> list[Page]:
        """Reprocess every page that depends on a template.

        Args:
            template_path: Project-relative template path.

        Returns:
            Pages that were written.
        """
        dependents = sorted(self.registry.pages_using(template_path))
        results = await asyncio.gather(*(self.process_page(p) for p in dependents))
        return [page for page in results if page is not None]

    async def copy_asset(self, path: Path) -> Outcome:
        """Copy a single source file to its mirrored output location.

        Args:
            path: Project-relative path under pages/, templates/ or static/.

        Returns:
            Outcome of the best-effort copy.
        """
        rel = Path(*path.parts[1:])
        return await attempt(
            self._copy_file, self.project_root / path, self.output_dir / rel
        )

    async def _copy_tree(
        self, source: str, exclude: Callable[[Path], bool] | None
    ) -> None:
        await asyncio.to_thread(
            shutil.copytree,
            self.project_root / source,
            self.output_dir,
            ignore=_ignore_for(exclude),
            dirs_exist_ok=True,
        )

    async def _copy_file(self, source: Path, dest: Path) -> None:
        await aiofiles.os.makedirs(dest.parent, exist_ok=True)
        await asyncio.to_thread(shutil.copy2, source, dest)

    async def _write(self, rel_path: Path, html: str) -> None:
        target = self.project_root / rel_path
        await aiofiles.os.makedirs(target.parent, exist_ok=True)
        async with aiofiles.open(target, "w", encoding="utf-8") as f:
            await f.write(html)


async def build_site(
    project_root: Path, registry: PageRegistry | None = None
) -> BuildResult:
    """Build the entire static site.

    Args:
        project_root: Root directory of the project.
        registry: Registry to populate; a fresh one is used when omitted.

    Returns:
        BuildResult containing the written pages and output directory.
    """
    builder = SiteBuilder(
        project_root, registry if registry is not None else PageRegistry()
    )
    return await builder.build()
