"""Utility functions for Teeny.

This module contains path classification helpers and the filesystem
primitives shared by the build orchestrator and the watch loop.

Key functions:
    is_markdown: Check if a path is a Markdown file.
    is_html: Check if a path is an HTML file.
    is_hidden: Check if a path's basename is dot-prefixed.
    ensure_clean_dir: Ensure a directory exists and is empty.
    output_path_for: Derive the output file for a page.
    attempt: Run a best-effort coroutine and return its Outcome.
"""

from __future__ import annotations

import shutil
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

PAGES_DIR = "pages"
TEMPLATES_DIR = "templates"
STATIC_DIR = "static"
OUTPUT_DIR = "public"
DEFAULT_TEMPLATE = f"{TEMPLATES_DIR}/default.html"


@dataclass(frozen=True)
class Outcome:
    """Result of a best-effort operation.

    Attributes:
        ok: Whether the operation completed.
        error: The absorbed error when it did not.
    """

    ok: bool
    error: OSError | None = None


async def attempt(func: Callable[..., Awaitable[Any]], *args: Any) -> Outcome:
    """Await ``func(*args)``, absorbing filesystem errors.

    Only used for operations whose failure must not stop a build, such as
    copying a source directory that does not exist.

    Args:
        func: Coroutine function to run.
        *args: Positional arguments for ``func``.

    Returns:
        Outcome describing success or the ignored failure.
    """
    try:
        await func(*args)
    except OSError as exc:
        return Outcome(ok=False, error=exc)
    return Outcome(ok=True)


def is_markdown(path: Path) -> bool:
    """Check if a path is a Markdown file.

    Args:
        path: Path to check.

    Returns:
        True if the file has .md extension (case-insensitive).
    """
    return path.suffix.lower() == ".md"


def is_html(path: Path) -> bool:
    """Check if a path is an HTML file.

    Args:
        path: Path to check.

    Returns:
        True if the file has .html extension (case-insensitive).
    """
    return path.suffix.lower() == ".html"


def is_hidden(path: Path | str) -> bool:
    """Check if the basename of a path starts with a dot."""
    return Path(path).name.startswith(".")


def ensure_clean_dir(path: Path) -> None:
    """Ensure a directory exists and is empty.

    If the directory exists, removes all contents. Creates the
    directory if it doesn't exist.

    Args:
        path: Directory path to clean or create.
    """
    if path.exists():
        shutil.rmtree(str(path), ignore_errors=True)
        if path.exists():
            # Fallback for stubborn directories
            for item in path.rglob("*"):
                if item.is_file():
                    item.unlink()
            for item in sorted(
                [p for p in path.rglob("*") if p.is_dir()], reverse=True
            ):
                item.rmdir()
            path.rmdir()
    path.mkdir(parents=True, exist_ok=True)


def template_path_for(name: str | None) -> str:
    """Return the project-relative template path for a front matter value."""
    if not name:
        return DEFAULT_TEMPLATE
    return f"{TEMPLATES_DIR}/{name}.html"


def output_path_for(page_path: Path) -> Path:
    """Derive the project-relative output file for a page.

    Strips the pages root and the Markdown extension, then appends .html
    under the output root, keeping the page's subdirectories.

    Args:
        page_path: Project-relative page path, e.g. ``pages/blog/post.md``.

    Returns:
        Project-relative output path, e.g. ``public/blog/post.html``.

    Examples:
        >>> output_path_for(Path("pages/index.md")).as_posix()
        'public/index.html'
    """
    rel = page_path.relative_to(PAGES_DIR)
    return Path(OUTPUT_DIR) / rel.parent / f"{rel.stem}.html"
