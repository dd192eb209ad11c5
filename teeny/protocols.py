"""Protocol definitions for Teeny.

These protocols describe the two external capabilities the template engine
relies on, so any conforming Markdown converter or DOM-manipulation library
can be substituted in tests or in alternative builds.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class MarkdownConverter(Protocol):
    """Protocol for turning Markdown text into an HTML string."""

    @abstractmethod
    def render(self, text: str) -> str:
        """Render Markdown source to HTML.

        Args:
            text: Markdown body of a page.

        Returns:
            HTML fragment.
        """
        ...


@runtime_checkable
class Document(Protocol):
    """Opaque handle on a parsed HTML document.

    The template engine only needs to find elements, replace the inner
    content of one of them, read and set the document title, and serialize
    the result back to text.
    """

    @abstractmethod
    def get_element_by_id(self, element_id: str) -> Any | None:
        """Return the first element with the given id, or None."""
        ...

    @abstractmethod
    def get_elements_by_tag_name(self, name: str) -> list[Any]:
        """Return all elements with the given tag name in document order."""
        ...

    @abstractmethod
    def set_inner_html(self, element: Any, html: str) -> None:
        """Replace the children of ``element`` with parsed ``html``."""
        ...

    @abstractmethod
    def inner_html(self, element: Any) -> str:
        """Serialize the children of ``element``."""
        ...

    @abstractmethod
    def get_title(self) -> str | None:
        """Return the text of the title element, or None when absent."""
        ...

    @abstractmethod
    def set_title(self, value: str) -> None:
        """Set the title, creating the element when needed."""
        ...

    @abstractmethod
    def serialize(self) -> str:
        """Serialize the root ``html`` element including its own tag."""
        ...
