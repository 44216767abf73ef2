"""
Per-page handler for a loaded job search page.

The handler is built with explicit dependencies and invoked directly by the
runner for each listing page. It performs the visit steps in order:
fingerprint variation, bounded load wait, settle delay, progressive scroll,
extraction, optional detail-page enrichment, closing delay.
"""

import asyncio
from typing import Optional

from playwright.async_api import Page

from listing_scraper.core.error_logger import ErrorLogger, get_error_logger
from listing_scraper.core.error_models import ErrorComponent, ErrorSeverity, ErrorStage, ErrorType
from listing_scraper.core.errors import PageVisitError
from listing_scraper.core.logging import get_logger
from listing_scraper.crawler.enricher import DetailPageEnricher
from listing_scraper.crawler.navigation import (
    Sleep,
    apply_fingerprint,
    auto_scroll,
    pause,
    snapshot_scope,
    wait_for_dom,
)
from listing_scraper.crawler.pacing import PacingController
from listing_scraper.extraction.extractor import extract_listings
from listing_scraper.models import PageResult, ScrapeOptions

logger = get_logger(__name__)

DEFAULT_LOAD_TIMEOUT_MS = 15_000


class ListingPageHandler:
    """
    Extracts one batch of listings from a loaded page.

    Args:
        options: Scrape options for every page this handler visits
        pacing: Pacing controller (default: unseeded)
        enricher: Detail-page enricher (default: built from pacing)
        load_timeout_ms: Bound on the initial DOMContentLoaded wait
        sleep: Async sleeper taking seconds
        error_logger: Sink for structured faults

    Example:
        >>> handler = ListingPageHandler(ScrapeOptions(include_company_url=True))
        >>> result = await handler.handle(page)
        >>> result.batch()[0]["companyUrl"]
        'https://www.linkedin.com/company/acme'
    """

    def __init__(
        self,
        options: ScrapeOptions,
        pacing: Optional[PacingController] = None,
        enricher: Optional[DetailPageEnricher] = None,
        load_timeout_ms: int = DEFAULT_LOAD_TIMEOUT_MS,
        sleep: Sleep = asyncio.sleep,
        error_logger: Optional[ErrorLogger] = None,
    ):
        self.options = options
        self.pacing = pacing or PacingController()
        self._error_logger = error_logger or get_error_logger()
        self._sleep = sleep
        self.enricher = enricher or DetailPageEnricher(
            self.pacing, sleep=sleep, error_logger=self._error_logger
        )
        self.load_timeout_ms = load_timeout_ms

    async def handle(self, page: Page) -> PageResult:
        """
        Run one visit against a page that has already been navigated.

        Returns:
            PageResult holding the batch in DOM card order

        Raises:
            PageVisitError: If the page failed before its DOM was snapshotted
        """
        listing_url = page.url
        options = self.options

        stage = ErrorStage.FINGERPRINT
        try:
            await apply_fingerprint(page, self.pacing.fingerprint_variation(), self._sleep)
            stage = ErrorStage.WAIT_FOR_LOAD
            await wait_for_dom(page, self.load_timeout_ms)
            await pause(self._sleep, self.pacing.settle_delay())

            stage = ErrorStage.SCROLL
            await auto_scroll(page, self.pacing.scroll_pacing(), self._sleep)
            await pause(self._sleep, self.pacing.lazy_load_delay())

            stage = ErrorStage.SNAPSHOT
            scope = await snapshot_scope(page)
        except Exception as e:
            raise PageVisitError(f"Listing page failed at {stage}: {e}", url=listing_url, stage=stage) from e

        extraction = extract_listings(scope, options, self._error_logger)
        records = extraction.records

        enrichment = None
        logger.debug(f"includeCompanyUrl = {options.include_company_url}, jobs = {len(records)}")
        if options.include_company_url and records:
            enrichment = await self.enricher.enrich(page, records, limit=options.enrich_limit)

        if records:
            summary = f"Extracted {len(records)} jobs"
            if options.include_company_url:
                with_urls = sum(1 for r in records if r.company_url)
                summary += f" ({with_urls} with company URLs)"
            logger.info(summary)
        else:
            self._error_logger.log_error(
                component=ErrorComponent.EXTRACTOR,
                stage=ErrorStage.RESOLVE_CARDS,
                error_type=ErrorType.EMPTY_RESULT,
                message="No job listings found - the page may be empty or a login/challenge wall",
                url=listing_url,
                severity=ErrorSeverity.WARNING,
                metadata={
                    "cards_seen": extraction.cards_seen,
                    "card_selector": extraction.card_selector,
                },
            )

        await pause(self._sleep, self.pacing.closing_delay())

        return PageResult(
            url=listing_url,
            records=records,
            status=extraction.status,
            enrichment=enrichment,
        )
