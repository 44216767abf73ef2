"""
Extraction engine for job search pages.

Module Structure:
- scope: DocumentScope protocol and the BeautifulSoup snapshot binding
- locators: locator strategy values used in selector chains
- selectors: ordered selector chains per logical field
- resolver: first-match chain evaluation and company-URL resolution
- extractor: card iteration, acceptance, dedupe and result ceiling

Nothing here needs playwright; the browser layer lives in
listing_scraper.crawler.
"""

from listing_scraper.extraction.scope import DocumentScope, SoupScope, normalize_text
from listing_scraper.extraction.resolver import (
    resolve_cards,
    resolve_company_url,
    resolve_detail_company_url,
    resolve_field,
    resolve_first,
)
from listing_scraper.extraction.extractor import accepts_title, build_record, extract_listings

__all__ = [
    "DocumentScope",
    "SoupScope",
    "normalize_text",
    "resolve_cards",
    "resolve_company_url",
    "resolve_detail_company_url",
    "resolve_field",
    "resolve_first",
    "accepts_title",
    "build_record",
    "extract_listings",
]
