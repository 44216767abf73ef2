"""
Detail-page enrichment of company URLs.

Listing cards often lack a usable company link. For each such record the
enricher opens the job's detail page in the same page context and resolves
the company link there. Visits are strictly sequential because they share
one page; a failure for one record is logged and the batch carries on.
"""

import asyncio
from typing import List, Optional

from playwright.async_api import Page

from listing_scraper.core.error_logger import ErrorLogger, get_error_logger
from listing_scraper.core.error_models import ErrorComponent, ErrorSeverity, ErrorStage, ErrorType
from listing_scraper.core.errors import NavigationFault
from listing_scraper.core.logging import get_logger
from listing_scraper.crawler.navigation import Sleep, pause, snapshot_scope
from listing_scraper.crawler.pacing import PacingController
from listing_scraper.extraction.resolver import resolve_detail_company_url
from listing_scraper.models import EnrichmentStats, ListingRecord

logger = get_logger(__name__)

DEFAULT_DETAIL_TIMEOUT_MS = 15_000


def records_needing_company_url(records: List[ListingRecord], limit: Optional[int] = None) -> List[ListingRecord]:
    """Records without a company URL but with a detail URL, in order, capped at limit."""
    pending = [r for r in records if not r.company_url and r.url]
    if limit is not None:
        pending = pending[:limit]
    return pending


class DetailPageEnricher:
    """
    Resolves ``company_url`` by visiting detail pages one at a time.

    Args:
        pacing: Source of post-navigation and between-visit delays
        timeout_ms: Navigation timeout per detail page
        sleep: Async sleeper taking seconds
        error_logger: Sink for navigation faults
    """

    def __init__(
        self,
        pacing: PacingController,
        timeout_ms: int = DEFAULT_DETAIL_TIMEOUT_MS,
        sleep: Sleep = asyncio.sleep,
        error_logger: Optional[ErrorLogger] = None,
    ):
        self.pacing = pacing
        self.timeout_ms = timeout_ms
        self._sleep = sleep
        self._error_logger = error_logger or get_error_logger()

    async def _resolve_one(self, page: Page, record: ListingRecord) -> str:
        await page.goto(record.url, wait_until="domcontentloaded", timeout=self.timeout_ms)
        await pause(self._sleep, self.pacing.detail_visit_delay())
        scope = await snapshot_scope(page)
        return resolve_detail_company_url(scope)

    async def enrich(
        self,
        page: Page,
        records: List[ListingRecord],
        limit: Optional[int] = None,
    ) -> EnrichmentStats:
        """
        Fill in ``company_url`` on records that lack one.

        Args:
            page: Page to navigate; it is left on the last detail page visited
            records: Records in extraction order; mutated in place
            limit: Maximum number of detail pages to visit (None = all)

        Returns:
            EnrichmentStats for this batch
        """
        pending = records_needing_company_url(records, limit)
        eligible = sum(1 for r in records if not r.company_url and r.url)
        stats = EnrichmentStats(skipped=eligible - len(pending))

        logger.info(f"Extracting company URLs from {len(pending)} job pages ({len(records)} jobs total)")

        for position, record in enumerate(pending, start=1):
            stats.attempted += 1
            logger.info(f"Visiting job page {position}/{len(pending)}: {record.title}")
            try:
                company_url = await self._resolve_one(page, record)
            except Exception as e:
                stats.failed += 1
                self._error_logger.log_exception(
                    NavigationFault(record.url, e),
                    component=ErrorComponent.ENRICHER,
                    stage=ErrorStage.NAVIGATE_DETAIL,
                    url=record.url,
                    severity=ErrorSeverity.WARNING,
                    error_type=ErrorType.NAVIGATION_FAULT,
                    metadata={"record_id": record.id, "title": record.title},
                )
            else:
                if company_url:
                    record.company_url = company_url
                    stats.resolved += 1
                    logger.info(f"Found company URL for {record.company or record.title}: {company_url}")
                else:
                    logger.warning(f"No company URL found for {record.company or record.title}")

            if position < len(pending):
                await pause(self._sleep, self.pacing.between_details_delay())

        with_urls = sum(1 for r in records if r.company_url)
        logger.info(f"Company URL extraction complete: {with_urls}/{len(records)} jobs have company URLs")
        return stats
