"""Template rendering engine for Teeny.

Templates are plain HTML files. The engine substitutes literal ``{{ key }}``
placeholders with front matter values, injects the rendered Markdown into
the element with id ``page-content``, resolves the document title, and
serializes the result.

Key classes:
- TemplateEngine: Produces the final HTML document for one page.
- TemplateError: Base error carrying the offending template path.
- TemplateStructureError: The template has no ``html`` element.
- MissingTemplateError: The template file does not exist.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from pathlib import Path

import aiofiles

from .html_utils import HtmlDocument
from .protocols import Document, MarkdownConverter
from .renderers import MarkdownRenderer

__all__ = [
    "CONTENT_ELEMENT_ID",
    "MissingTemplateError",
    "TemplateEngine",
    "TemplateError",
    "TemplateStructureError",
    "substitute_placeholders",
]

CONTENT_ELEMENT_ID = "page-content"
TITLE_PLACEHOLDER = "{{ title }}"


class TemplateError(Exception):
    """Error while rendering a page through a template.

    Attributes:
        source_path: Path to the template that caused the error.
        message: Human-readable error message.
    """

    def __init__(self, source_path: Path | str, message: str):
        self.source_path = Path(source_path)
        self.message = message
        super().__init__(f"{source_path}: {message}")


class TemplateStructureError(TemplateError):
    """The template is structurally invalid; the build cannot continue."""


class MissingTemplateError(TemplateError):
    """The template a page asks for does not exist."""


def substitute_placeholders(text: str, metadata: Mapping[str, str]) -> str:
    """Replace ``{{ key }}`` tokens with metadata values.

    Only the exact single-space spelling is recognised. Placeholders without
    a matching key are left as they are. The text is scanned once, so values
    that themselves look like placeholders are inserted verbatim.

    Args:
        text: Raw template text.
        metadata: Page front matter.

    Returns:
        Template text with known placeholders replaced.

    Examples:
        >>> substitute_placeholders("<b>{{ a }}</b>{{ b }}", {"a": "1"})
        '<b>1</b>{{ b }}'
    """
    if not metadata:
        return text
    tokens = {f"{{{{ {key} }}}}": value for key, value in metadata.items()}
    pattern = re.compile(
        "|".join(re.escape(token) for token in sorted(tokens, key=len, reverse=True))
    )
    return pattern.sub(lambda match: tokens[match.group(0)], text)


class TemplateEngine:
    """Renders pages into their HTML templates.

    Attributes:
        project_root: Directory template paths are relative to.
        markdown: Converter used for page bodies.
        parse: Factory turning HTML text into a Document.
    """

    def __init__(
        self,
        project_root: Path,
        markdown: MarkdownConverter | None = None,
        parse: Callable[[str], Document] = HtmlDocument.parse,
    ):
        """Initialize the template engine.

        Args:
            project_root: Root directory of the project.
            markdown: Optional custom Markdown converter.
            parse: Optional custom document parser.
        """
        self.project_root = project_root
        self.markdown = markdown or MarkdownRenderer()
        self.parse = parse

    async def load_template(self, template_path: str) -> str:
        """Read a template's raw text.

        Raises:
            MissingTemplateError: If the file does not exist.
        """
        try:
            async with aiofiles.open(
                self.project_root / template_path, encoding="utf-8"
            ) as f:
                return await f.read()
        except FileNotFoundError as exc:
            raise MissingTemplateError(template_path, "template not found") from exc

    async def render(
        self, metadata: Mapping[str, str], body: str, template_path: str
    ) -> str:
        """Render one page.

        Args:
            metadata: Page front matter.
            body: Markdown body.
            template_path: Project-relative template path.

        Returns:
            The serialized ``html`` element.

        Raises:
            MissingTemplateError: If the template does not exist.
            TemplateStructureError: If the template has no ``html`` element.
        """
        raw = await self.load_template(template_path)
        return self.render_text(metadata, body, raw, template_path)

    def render_text(
        self,
        metadata: Mapping[str, str],
        body: str,
        raw_template: str,
        template_path: str = "<template>",
    ) -> str:
        """Render a page against already loaded template text."""
        document = self.parse(substitute_placeholders(raw_template, metadata))
        content_html = self.markdown.render(body)

        anchor = document.get_element_by_id(CONTENT_ELEMENT_ID)
        if anchor is not None:
            document.set_inner_html(anchor, content_html)
        else:
            print(
                f"Could not find element with id '{CONTENT_ELEMENT_ID}' in template "
                f"{template_path}. Generating page without markdown content."
            )

        if not document.get_elements_by_tag_name("html"):
            raise TemplateStructureError(
                template_path, "templates should contain the 'html' tag"
            )

        title = self._resolve_title(document, metadata)
        if title:
            document.set_title(title)
        return document.serialize()

    def _resolve_title(
        self, document: Document, metadata: Mapping[str, str]
    ) -> str | None:
        """Pick the page title.

        Precedence: a title already written in the template (other than the
        bare placeholder), then front matter ``title``, then the first h1.
        """
        existing = document.get_title()
        if existing and existing.strip() and existing.strip() != TITLE_PLACEHOLDER:
            return None
        if metadata.get("title"):
            return metadata["title"]
        headings = document.get_elements_by_tag_name("h1")
        if headings:
            return document.inner_html(headings[0])
        return None
