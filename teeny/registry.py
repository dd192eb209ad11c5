"""Page/template dependency tracking for Teeny.

The registry keeps two indexes in step: which template each page uses, and
which pages use each template. The watch loop relies on the second one to
fan a template change out into the pages that must be rebuilt.

Every mutation happens in a single synchronous call with no await inside,
so under asyncio no other task can observe a page half-moved between two
templates.
"""

from __future__ import annotations

from pathlib import Path


class PageRegistry:
    """Bidirectional page <-> template index.

    Attributes:
        _template_by_page: Page path to the template path it currently uses.
        _pages_by_template: Template path to the set of pages using it.
    """

    def __init__(self) -> None:
        self._template_by_page: dict[Path, str] = {}
        self._pages_by_template: dict[str, set[Path]] = {}

    def record_page(self, page_path: Path, template_path: str) -> None:
        """Record that a page uses a template.

        Moves the page out of its previous template's set when the template
        changed, then adds it to the new one. Calling it again with the same
        arguments leaves the indexes unchanged.

        Args:
            page_path: Project-relative page path.
            template_path: Project-relative template path.
        """
        previous = self._template_by_page.get(page_path)
        if previous is not None and previous != template_path:
            pages = self._pages_by_template.get(previous)
            if pages is not None:
                pages.discard(page_path)
                if not pages:
                    del self._pages_by_template[previous]
        self._pages_by_template.setdefault(template_path, set()).add(page_path)
        self._template_by_page[page_path] = template_path

    def pages_using(self, template_path: str) -> frozenset[Path]:
        """Return the pages currently depending on a template."""
        return frozenset(self._pages_by_template.get(template_path, ()))

    def template_for(self, page_path: Path) -> str | None:
        """Return the template recorded for a page, or None if unknown."""
        return self._template_by_page.get(page_path)

    def __contains__(self, page_path: object) -> bool:
        return page_path in self._template_by_page

    def __len__(self) -> int:
        return len(self._template_by_page)
