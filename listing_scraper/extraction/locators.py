"""
Locator strategies.

Each strategy is a small immutable value with one capability,
``try_resolve(scope, root) -> element | None``. A selector chain is a tuple
of strategies evaluated first-match-wins by the resolver.
"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from listing_scraper.extraction.scope import DocumentScope


@dataclass(frozen=True)
class Css:
    """First element under root matching a CSS selector."""
    selector: str

    def try_resolve(self, scope: DocumentScope, root: Any) -> Optional[Any]:
        return scope.select_one(root, self.selector)

    def __str__(self) -> str:
        return self.selector


@dataclass(frozen=True)
class HrefContains:
    """First anchor whose resolved href contains a path marker."""
    marker: str

    def try_resolve(self, scope: DocumentScope, root: Any) -> Optional[Any]:
        for anchor in scope.select(root, "a[href]"):
            if self.marker in scope.href(anchor):
                return anchor
        return None

    def __str__(self) -> str:
        return f"a[href~{self.marker}]"


@dataclass(frozen=True)
class AriaLabelContains:
    """First element whose aria-label contains text, case-insensitively."""
    text: str
    tag: str = "a"

    def try_resolve(self, scope: DocumentScope, root: Any) -> Optional[Any]:
        needle = self.text.lower()
        for element in scope.select(root, f"{self.tag}[aria-label]"):
            if needle in (scope.attr(element, "aria-label") or "").lower():
                return element
        return None

    def __str__(self) -> str:
        return f"{self.tag}[aria-label~{self.text}]"


@dataclass(frozen=True)
class InCompanyElement:
    """
    Descendant of the card's resolved company-name element.

    The resolver evaluates this strategy against the company element instead
    of the card, and skips it when no company element was found.
    """
    selector: str = "a"

    def try_resolve(self, scope: DocumentScope, root: Any) -> Optional[Any]:
        return scope.select_one(root, self.selector)

    def __str__(self) -> str:
        return f"<company> {self.selector}"


SelectorChain = Tuple[Any, ...]
