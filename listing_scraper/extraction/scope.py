"""
Document scope: the capability boundary between extraction and the browser.

Extraction code only talks to a ``DocumentScope``. The browser layer
supplies a concrete binding; ``SoupScope`` binds to a snapshot of the
rendered DOM (``page.content()``) parsed with BeautifulSoup, with hrefs
resolved against the page URL the way ``element.href`` resolves them.
"""

import re
from typing import Any, Iterator, List, Optional, Protocol

from bs4 import BeautifulSoup
from bs4.element import Tag

from listing_scraper.utils.url_utils import resolve_href


_WS_RE = re.compile(r"\s+")


def normalize_text(text: Optional[str]) -> str:
    """Collapse whitespace runs and trim; None becomes ""."""
    if not text:
        return ""
    return _WS_RE.sub(" ", text).strip()


class DocumentScope(Protocol):
    """Read-only view of a rendered document."""

    @property
    def url(self) -> str: ...

    @property
    def root(self) -> Any: ...

    def select_one(self, root: Any, selector: str) -> Optional[Any]: ...

    def select(self, root: Any, selector: str) -> List[Any]: ...

    def text(self, element: Any) -> str: ...

    def attr(self, element: Any, name: str) -> Optional[str]: ...

    def href(self, element: Any) -> str: ...

    def parent(self, element: Any) -> Optional[Any]: ...

    def ancestors(self, element: Any) -> Iterator[Any]: ...


class SoupScope:
    """
    DocumentScope over an HTML snapshot.

    Args:
        html: Serialized DOM (typically ``await page.content()``)
        url: URL the document was loaded from, used to resolve hrefs

    Example:
        >>> scope = SoupScope('<a href="/company/acme">Acme</a>', "https://www.linkedin.com/jobs/")
        >>> scope.href(scope.select_one(scope.root, "a"))
        'https://www.linkedin.com/company/acme'
    """

    def __init__(self, html: str, url: str = ""):
        self._soup = BeautifulSoup(html or "", "html.parser")
        self._url = url or ""

    @property
    def url(self) -> str:
        return self._url

    @property
    def root(self) -> BeautifulSoup:
        return self._soup

    def select_one(self, root: Tag, selector: str) -> Optional[Tag]:
        return root.select_one(selector)

    def select(self, root: Tag, selector: str) -> List[Tag]:
        return list(root.select(selector))

    def text(self, element: Optional[Tag]) -> str:
        if element is None:
            return ""
        return normalize_text(element.get_text())

    def attr(self, element: Optional[Tag], name: str) -> Optional[str]:
        if element is None:
            return None
        value = element.get(name)
        if isinstance(value, list):
            # multi-valued attributes such as class
            return " ".join(value)
        return value

    def href(self, element: Optional[Tag]) -> str:
        """Resolved href of an anchor-like element, "" when it has none."""
        if element is None:
            return ""
        return resolve_href(self._url, self.attr(element, "href"))

    def parent(self, element: Optional[Tag]) -> Optional[Tag]:
        if element is None:
            return None
        parent = element.parent
        if parent is None or isinstance(parent, BeautifulSoup):
            return None
        return parent

    def ancestors(self, element: Tag) -> Iterator[Tag]:
        node = self.parent(element)
        while node is not None:
            yield node
            node = self.parent(node)
