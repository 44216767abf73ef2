"""
Field resolution for job cards and detail pages.

Every logical field is resolved by walking its selector chain and stopping
at the first strategy that matches; values from different strategies are
never merged. A chain that matches nothing yields "" (text fields) or None
(elements). Company links get a stricter, three-stage treatment because
navigation and post links are easily mistaken for company links.
"""

from typing import Any, Iterable, List, Optional, Tuple

from listing_scraper.core.logging import get_logger
from listing_scraper.extraction.locators import InCompanyElement, SelectorChain
from listing_scraper.extraction.scope import DocumentScope
from listing_scraper.extraction.selectors import (
    CARD_CONTAINER_SELECTORS,
    CARD_ID_ATTRIBUTES,
    COMPANY_CHAIN,
    COMPANY_LINK_CHAIN,
    COMPANY_TEXT_MARKERS,
    DETAIL_COMPANY_LINK_SELECTORS,
    LINK_CHAIN,
    LOCATION_CHAIN,
    POSTED_DATE_CHAIN,
    TITLE_CHAIN,
)
from listing_scraper.utils.url_utils import COMPANY_HREF_MARKER, canonical_company_url, canonical_job_url

logger = get_logger(__name__)

# Field name -> chain, for resolve_field()
FIELD_CHAINS = {
    "title": TITLE_CHAIN,
    "company": COMPANY_CHAIN,
    "location": LOCATION_CHAIN,
    "posted_date": POSTED_DATE_CHAIN,
    "url": LINK_CHAIN,
}


def resolve_first(scope: DocumentScope, root: Any, chain: SelectorChain) -> Optional[Any]:
    """
    Return the first element produced by a chain, or None.

    A strategy that raises (for example a selector the parser rejects) is
    treated as a miss.
    """
    if root is None:
        return None
    for strategy in chain:
        try:
            element = strategy.try_resolve(scope, root)
        except Exception as e:
            logger.debug(f"Locator {strategy} failed: {e}")
            continue
        if element is not None:
            return element
    return None


def resolve_text(scope: DocumentScope, root: Any, chain: SelectorChain) -> str:
    return scope.text(resolve_first(scope, root, chain))


def resolve_field(scope: DocumentScope, card: Any, field: str) -> str:
    """
    Resolve one logical field of a card to a string.

    ``title``, ``company`` and ``location`` use element text; ``posted_date``
    falls back to the element's ``datetime`` attribute; ``url`` is the
    resolved href of the link element with tracking parameters dropped.

    Raises:
        KeyError: For an unknown field name
    """
    chain = FIELD_CHAINS[field]
    element = resolve_first(scope, card, chain)
    if element is None:
        return ""
    if field == "url":
        return canonical_job_url(scope.href(element))
    if field == "posted_date":
        return scope.text(element) or (scope.attr(element, "datetime") or "").strip()
    return scope.text(element)


def resolve_cards(scope: DocumentScope) -> Tuple[Optional[str], List[Any]]:
    """
    Locate the card set on a listing page.

    Container selectors are tried in priority order; the first selector with
    at least one match is used for every card.

    Returns:
        Tuple of (winning selector or None, cards in DOM order)
    """
    for selector in CARD_CONTAINER_SELECTORS:
        try:
            cards = scope.select(scope.root, selector)
        except Exception as e:
            logger.debug(f"Card selector {selector!r} failed: {e}")
            continue
        if cards:
            return selector, cards
    return None, []


def card_id(scope: DocumentScope, card: Any, index: int) -> str:
    """Native identifier of a card, or ``job_<index>``."""
    for name in CARD_ID_ATTRIBUTES:
        value = (scope.attr(card, name) or "").strip()
        if value:
            return value
    return f"job_{index}"


def _first_valid(scope: DocumentScope, elements: Iterable[Any]) -> str:
    for element in elements:
        canonical = canonical_company_url(scope.href(element))
        if canonical:
            return canonical
    return ""


def resolve_company_url(scope: DocumentScope, card: Any, company_element: Optional[Any] = None) -> str:
    """
    Resolve the canonical company URL for a card.

    Stages:
        1. each company-link strategy in order; the first match whose href
           validates wins (a match that fails validation does not stop the chain)
        2. every anchor in the card, first valid href
        3. if a company-name element with text was resolved, company anchors
           among its parent's descendants

    Args:
        scope: Document scope
        card: Card element
        company_element: Element resolved for the company field, if any

    Returns:
        Canonical company URL, or "" if nothing qualified
    """
    for strategy in COMPANY_LINK_CHAIN:
        root = company_element if isinstance(strategy, InCompanyElement) else card
        if root is None:
            continue
        try:
            element = strategy.try_resolve(scope, root)
        except Exception as e:
            logger.debug(f"Company locator {strategy} failed: {e}")
            continue
        if element is None:
            continue
        canonical = canonical_company_url(scope.href(element))
        if canonical:
            return canonical

    canonical = _first_valid(scope, scope.select(card, "a"))
    if canonical:
        return canonical

    if company_element is not None and scope.text(company_element):
        parent = scope.parent(company_element)
        if parent is not None:
            return _first_valid(scope, scope.select(parent, f"a[href*='{COMPANY_HREF_MARKER}']"))

    return ""


def resolve_detail_company_url(scope: DocumentScope) -> str:
    """
    Resolve the canonical company URL from a whole job detail page.

    Tries every match of each detail selector in order, then any anchor whose
    href carries the company marker, then a last-resort pass over elements
    whose text mentions the company and the anchors beneath them.

    With the current selector table the first selector already checks every
    company anchor, so the later passes only fire if that table is narrowed.
    They keep the resolution order stable when it is.

    Returns:
        Canonical company URL, or "" if nothing qualified
    """
    root = scope.root

    for selector in DETAIL_COMPANY_LINK_SELECTORS:
        try:
            matches = scope.select(root, selector)
        except Exception as e:
            logger.debug(f"Detail selector {selector!r} failed: {e}")
            continue
        canonical = _first_valid(scope, matches)
        if canonical:
            return canonical

    anchors = [a for a in scope.select(root, "a[href]") if COMPANY_HREF_MARKER in scope.href(a)]
    canonical = _first_valid(scope, anchors)
    if canonical:
        return canonical

    return _company_text_fallback(scope, root)


def _company_text_fallback(scope: DocumentScope, root: Any) -> str:
    """
    Find a company anchor under the first element whose text names the company.

    Only ancestors of company anchors can succeed, so text is read for those
    elements alone, visited in document order.
    """
    candidates = [a for a in scope.select(root, f"a[href*='{COMPANY_HREF_MARKER}']")]
    if not candidates:
        return ""

    holders = set()
    for anchor in candidates:
        for node in scope.ancestors(anchor):
            holders.add(id(node))

    for element in scope.select(root, "*"):
        if id(element) not in holders:
            continue
        text = scope.text(element)
        if any(marker in text for marker in COMPANY_TEXT_MARKERS):
            canonical = _first_valid(scope, scope.select(element, f"a[href*='{COMPANY_HREF_MARKER}']"))
            if canonical:
                return canonical
    return ""
