"""
listing_scraper: resilient job-card extraction with human-paced browsing.

Subpackages:
- core: configuration, logging, error records
- extraction: document scope, selector chains, field resolution, listing extraction
- crawler: pacing controller, browser interaction, detail-page enrichment, runner
- utils: URL rules, retry, file helpers
"""

from listing_scraper.models import (
    EnrichmentStats,
    ExtractionResult,
    ExtractionStatus,
    ListingRecord,
    PacingMode,
    PageResult,
    ScrapeOptions,
)

__version__ = "0.1.0"

__all__ = [
    "EnrichmentStats",
    "ExtractionResult",
    "ExtractionStatus",
    "ListingRecord",
    "PacingMode",
    "PageResult",
    "ScrapeOptions",
]
