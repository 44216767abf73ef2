"""
Listing extraction over a rendered job search page.

One pass walks the card set in DOM order, resolves each card's fields,
applies the acceptance predicate and stops once ``max_results`` records
have been accepted. A malformed card is logged and skipped; it never aborts
the pass. A page with no cards yields an EMPTY result rather than an error,
since that is what both an empty search and a challenge page look like.
"""

from typing import Any, List, Optional, Set

from listing_scraper.core.error_logger import ErrorLogger, get_error_logger
from listing_scraper.core.error_models import ErrorComponent, ErrorSeverity, ErrorStage, ErrorType
from listing_scraper.core.errors import ExtractionFault
from listing_scraper.core.logging import get_logger
from listing_scraper.extraction.resolver import (
    card_id,
    resolve_cards,
    resolve_company_url,
    resolve_field,
    resolve_first,
)
from listing_scraper.extraction.scope import DocumentScope
from listing_scraper.extraction.selectors import COMPANY_CHAIN, TITLE_CHAIN
from listing_scraper.models import (
    ExtractionResult,
    ExtractionStatus,
    ListingRecord,
    ScrapeOptions,
)

logger = get_logger(__name__)


def accepts_title(title: str, keywords: Optional[List[str]] = None) -> bool:
    """
    Acceptance predicate for a card.

    A title is required. When keywords are configured the title must also
    contain one of them, case-insensitively.

    Examples:
        >>> accepts_title("Senior Engineer")
        True
        >>> accepts_title("")
        False
        >>> accepts_title("Office Manager", ["engineer", "developer"])
        False
    """
    if not title:
        return False
    if not keywords:
        return True
    lowered = title.lower()
    return any(keyword in lowered for keyword in keywords)


def build_record(
    scope: DocumentScope,
    card: Any,
    index: int,
    include_company_url: bool = False,
) -> ListingRecord:
    """
    Resolve every field of one card into a ListingRecord.

    ``company_url`` is only resolved when requested and stays None when no
    qualifying link exists.
    """
    company_element = resolve_first(scope, card, COMPANY_CHAIN)
    title_element = resolve_first(scope, card, TITLE_CHAIN)

    record = ListingRecord(
        id=card_id(scope, card, index),
        title=scope.text(title_element),
        company=scope.text(company_element),
        location=resolve_field(scope, card, "location"),
        posted_date=resolve_field(scope, card, "posted_date"),
        url=resolve_field(scope, card, "url"),
    )

    if include_company_url:
        company_url = resolve_company_url(scope, card, company_element)
        if company_url:
            record.company_url = company_url

    return record


def _dedupe_key(record: ListingRecord) -> Optional[str]:
    if record.id and not record.id.startswith("job_"):
        return f"id::{record.id}"
    if record.url:
        return f"url::{record.url}"
    return None


def extract_listings(
    scope: DocumentScope,
    options: Optional[ScrapeOptions] = None,
    error_logger: Optional[ErrorLogger] = None,
) -> ExtractionResult:
    """
    Extract job listings from a listing page.

    Args:
        scope: Scope over the listing page's current DOM
        options: Scrape options (defaults: no company URLs, 50 results)
        error_logger: Sink for per-card faults (defaults to the process logger)

    Returns:
        ExtractionResult with records in DOM card order. ``status`` is EMPTY
        when no container selector matched any card.

    Example:
        >>> result = extract_listings(SoupScope(html, url), ScrapeOptions(max_results=10))
        >>> [r.title for r in result.records][:2]
        ['Senior Engineer', 'Data Analyst']
    """
    options = options or ScrapeOptions()
    error_logger = error_logger or get_error_logger()

    selector, cards = resolve_cards(scope)
    if not cards:
        logger.info("Found 0 job cards with any container selector")
        return ExtractionResult(status=ExtractionStatus.EMPTY)

    logger.info(f"Found {len(cards)} job cards with selector: {selector}")

    records: List[ListingRecord] = []
    seen: Set[str] = set()
    skipped = 0
    duplicates = 0
    visited = 0

    for index, card in enumerate(cards):
        if len(records) >= options.max_results:
            break
        visited += 1

        try:
            record = build_record(scope, card, index, options.include_company_url)
        except Exception as e:
            skipped += 1
            error_logger.log_exception(
                ExtractionFault(index, e),
                component=ErrorComponent.EXTRACTOR,
                stage=ErrorStage.EXTRACT_CARD,
                url=scope.url or None,
                severity=ErrorSeverity.WARNING,
                error_type=ErrorType.EXTRACTION_FAULT,
                metadata={"card_index": index, "card_selector": selector},
            )
            continue

        logger.debug(f"Card {index}: title={record.title!r} company={record.company!r}")

        if not accepts_title(record.title, options.title_keywords):
            continue

        if options.dedupe:
            key = _dedupe_key(record)
            if key is not None:
                if key in seen:
                    duplicates += 1
                    continue
                seen.add(key)

        records.append(record)

    if duplicates:
        logger.info(f"Dedupe: dropped {duplicates} duplicate cards")

    return ExtractionResult(
        records=records,
        status=ExtractionStatus.OK,
        card_selector=selector,
        cards_seen=visited,
        cards_skipped=skipped,
        duplicates=duplicates,
    )
