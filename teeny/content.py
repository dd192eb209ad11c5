"""Page loading for Teeny.

This module reads page files, splits their YAML front matter from the
Markdown body, and resolves the template each page uses.

Key objects:
- Page: Dataclass representing one parsed page.
- extract_frontmatter: Split a text blob into metadata and body.
- parse_page: Build a Page from its path and raw text.
- read_page: Read and parse a page file asynchronously.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import aiofiles
import yaml

from .utils import output_path_for, template_path_for

FRONTMATTER_RE = re.compile(
    r"^---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|$)", re.DOTALL
)


@dataclass
class Page:
    """Represents a page source file after front matter parsing.

    Attributes:
        path: Project-relative path of the source, under pages/.
        text: Raw file content.
        metadata: Front matter values as strings.
        body: Markdown body following the front matter.
        template: Project-relative path of the template the page uses.
    """

    path: Path
    text: str
    metadata: dict[str, str] = field(default_factory=dict)
    body: str = ""
    template: str = ""

    @property
    def output_path(self) -> Path:
        """Project-relative path of the generated HTML file."""
        return output_path_for(self.path)


def extract_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Extract YAML frontmatter from content.

    Args:
        text: Raw file content.

    Returns:
        Tuple of (frontmatter dict, remaining content).
    """
    match = FRONTMATTER_RE.match(text)
    if not match:
        return {}, text
    try:
        data = yaml.safe_load(match.group(1) or "") or {}
        if not isinstance(data, dict):
            return {}, text
        return data, text[match.end() :]
    except yaml.YAMLError:
        return {}, text


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def parse_page(path: Path, text: str) -> Page:
    """Build a Page from its path and raw text.

    Args:
        path: Project-relative page path.
        text: Raw page content.

    Returns:
        Page with metadata, body and resolved template.
    """
    frontmatter, body = extract_frontmatter(text)
    metadata = {str(key): _stringify(value) for key, value in frontmatter.items()}
    return Page(
        path=path,
        text=text,
        metadata=metadata,
        body=body,
        template=template_path_for(metadata.get("template")),
    )


async def read_page(project_root: Path, path: Path) -> Page:
    """Read a page file and parse it.

    Args:
        project_root: Root directory of the project.
        path: Project-relative page path.

    Returns:
        The parsed Page.
    """
    async with aiofiles.open(project_root / path, encoding="utf-8") as f:
        text = await f.read()
    return parse_page(path, text)
