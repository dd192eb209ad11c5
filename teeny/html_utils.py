"""HTML document handle for Teeny.

This module wraps BeautifulSoup behind the small set of DOM operations the
template engine needs, so the rest of the code never touches the parser's
API directly.

Classes:
    HtmlDocument: Parsed document satisfying the Document protocol.
"""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

_PARSER = "html.parser"


class HtmlDocument:
    """A parsed HTML document.

    Attributes:
        soup: The underlying BeautifulSoup tree.
    """

    def __init__(self, soup: BeautifulSoup):
        self.soup = soup

    @classmethod
    def parse(cls, text: str) -> HtmlDocument:
        """Parse HTML text into a document.

        Args:
            text: Complete HTML source.

        Returns:
            A new HtmlDocument.
        """
        return cls(BeautifulSoup(text, _PARSER))

    def get_element_by_id(self, element_id: str) -> Tag | None:
        return self.soup.find(id=element_id)

    def get_elements_by_tag_name(self, name: str) -> list[Tag]:
        return self.soup.find_all(name)

    def set_inner_html(self, element: Tag, html: str) -> None:
        """Replace the children of an element with parsed HTML.

        Args:
            element: Element whose content is replaced.
            html: HTML fragment to insert.
        """
        element.clear()
        fragment = BeautifulSoup(html, _PARSER)
        for node in list(fragment.contents):
            element.append(node.extract())

    def inner_html(self, element: Tag) -> str:
        return element.decode_contents()

    def get_title(self) -> str | None:
        title = self.soup.find("title")
        if title is None:
            return None
        return title.get_text()

    def set_title(self, value: str) -> None:
        """Set the document title.

        Creates a ``<title>`` inside ``<head>`` when the document has none,
        adding the ``<head>`` as the first child of ``<html>`` if needed.

        Args:
            value: Title text. Markup characters are escaped on output.
        """
        title = self.soup.find("title")
        if title is None:
            head = self.soup.find("head")
            if head is None:
                root = self.soup.find("html")
                if root is None:
                    return
                head = self.soup.new_tag("head")
                root.insert(0, head)
            title = self.soup.new_tag("title")
            head.append(title)
        title.string = value

    def serialize(self) -> str:
        """Return the outer HTML of the root ``html`` element.

        Raises:
            ValueError: If the document has no ``html`` element.
        """
        root = self.soup.find("html")
        if root is None:
            raise ValueError("document has no html element")
        return str(root)
