# listing_scraper/crawler/runner.py
# Drives the page handler over a list of job search URLs with one browser page.
# Enforces the pacing mode's request-rate ceiling and pre/post navigation
# delays, retries failed listing-page loads, and hands each page's batch to a
# sink. Results go to stdout (or --out) as JSON lines.

import argparse
import asyncio
import random
import sys
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Callable, List, Optional

from playwright.async_api import Page, async_playwright

from listing_scraper.core.config import Config, get_config
from listing_scraper.core.error_logger import ErrorLogger, get_error_logger
from listing_scraper.core.error_models import ErrorComponent, ErrorSeverity, ErrorStage
from listing_scraper.core.errors import PageSetupError, PageVisitError
from listing_scraper.core.logging import get_logger, setup_logging
from listing_scraper.crawler.enricher import DetailPageEnricher
from listing_scraper.crawler.handler import ListingPageHandler
from listing_scraper.crawler.navigation import Sleep, hide_webdriver, pause
from listing_scraper.crawler.pacing import PacingController
from listing_scraper.models import PageResult, ScrapeOptions
from listing_scraper.utils.files import read_urls_from_file, write_jsonl
from listing_scraper.utils.retry import RetryConfig, retry_async_with_backoff

logger = get_logger(__name__)

UA_POOL = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:128.0) Gecko/20100101 Firefox/128.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14.6; rv:128.0) Gecko/20100101 Firefox/128.0",
    "Mozilla/5.0 (X11; Linux x86_64; rv:127.0) Gecko/20100101 Firefox/127.0",
]

BLOCK_RESOURCE_TYPES = {"media", "font"}

DEFAULT_HANDLER_TIMEOUT_S = 120.0

Sink = Callable[[PageResult], None]


class RequestThrottle:
    """
    Spaces request starts so that at most ``per_minute`` begin in any minute.

    Args:
        per_minute: Request-rate ceiling
        sleep: Async sleeper taking seconds
        clock: Monotonic clock in seconds
    """

    def __init__(self, per_minute: int, sleep: Sleep = asyncio.sleep, clock: Callable[[], float] = time.monotonic):
        if per_minute <= 0:
            raise ValueError("per_minute must be positive")
        self.interval = 60.0 / per_minute
        self._sleep = sleep
        self._clock = clock
        self._last: Optional[float] = None

    async def wait(self) -> float:
        """Block until the next request may start; returns seconds waited."""
        waited = 0.0
        if self._last is not None:
            waited = max(0.0, self._last + self.interval - self._clock())
            if waited > 0:
                await self._sleep(waited)
        self._last = self._clock()
        return waited


class ListingRunner:
    """
    Visits listing pages sequentially on a single page.

    Args:
        handler: Per-page handler
        options: Scrape options (pacing mode drives delays and the rate ceiling)
        nav_timeout_ms: Timeout for each listing-page navigation
        retry: Retry policy for listing-page navigation
        handler_timeout_s: Bound on one handler visit (None disables it)
        sleep: Async sleeper taking seconds
        error_logger: Sink for structured faults
    """

    def __init__(
        self,
        handler: ListingPageHandler,
        options: ScrapeOptions,
        nav_timeout_ms: int = 60_000,
        retry: Optional[RetryConfig] = None,
        handler_timeout_s: Optional[float] = DEFAULT_HANDLER_TIMEOUT_S,
        sleep: Sleep = asyncio.sleep,
        error_logger: Optional[ErrorLogger] = None,
    ):
        self.handler = handler
        self.options = options
        self.pacing = handler.pacing
        self.nav_timeout_ms = nav_timeout_ms
        self.retry = retry or RetryConfig()
        self.handler_timeout_s = handler_timeout_s
        self._sleep = sleep
        self._error_logger = error_logger or get_error_logger()
        self.throttle = RequestThrottle(self.pacing.request_rate_ceiling(options.mode), sleep=sleep)

    async def load(self, page: Page, url: str) -> None:
        """
        Navigate to a listing page, retrying per the retry policy.

        Raises:
            PageSetupError: If every attempt failed
        """
        async def attempt():
            await pause(self._sleep, self.pacing.inter_request_delay(self.options.mode))
            await page.goto(url, wait_until="domcontentloaded", timeout=self.nav_timeout_ms)

        try:
            await retry_async_with_backoff(attempt, config=self.retry, sleep=self._sleep)
        except Exception as e:
            raise PageSetupError(f"Failed to load {url}: {e}", url=url) from e
        await pause(self._sleep, self.pacing.post_navigation_delay())

    async def visit(self, page: Page, url: str) -> PageResult:
        """
        Run the handler on a loaded page within the handler timeout.

        Raises:
            PageVisitError: If the handler failed or ran out of time
        """
        try:
            return await asyncio.wait_for(self.handler.handle(page), timeout=self.handler_timeout_s)
        except asyncio.TimeoutError as e:
            raise PageVisitError(
                f"Handler exceeded {self.handler_timeout_s}s on {url}",
                url=url,
                stage=ErrorStage.HANDLE_PAGE,
            ) from e

    async def run_page(self, page: Page, url: str) -> PageResult:
        await self.throttle.wait()
        await self.load(page, url)
        return await self.visit(page, url)

    async def run(self, page: Page, urls: List[str], sink: Sink) -> List[PageResult]:
        """
        Visit every URL in order, pushing each page's result to sink.

        A listing page that cannot be loaded, or that fails after loading,
        is logged and skipped.
        """
        results: List[PageResult] = []
        for url in urls:
            logger.info(f"[seed] {url}")
            try:
                result = await self.run_page(page, url)
            except PageSetupError as e:
                self._error_logger.log_exception(
                    e,
                    component=ErrorComponent.RUNNER,
                    stage=ErrorStage.LOAD_PAGE,
                    url=url,
                    severity=ErrorSeverity.ERROR,
                )
                continue
            except PageVisitError as e:
                self._error_logger.log_exception(
                    e,
                    component=ErrorComponent.NAVIGATION,
                    stage=e.stage,
                    url=url,
                    severity=ErrorSeverity.ERROR,
                )
                continue
            sink(result)
            results.append(result)
        return results


@asynccontextmanager
async def browser_page(pw, headless: bool = True):
    """Launch Firefox with a randomized user agent and yield a single page."""
    browser = await pw.firefox.launch(headless=headless)
    context = await browser.new_context(
        user_agent=random.choice(UA_POOL),
        locale="en-US",
        timezone_id="America/New_York",
    )

    async def _route(route):
        if route.request.resource_type in BLOCK_RESOURCE_TYPES:
            return await route.abort()
        return await route.continue_()

    await context.route("**/*", _route)
    try:
        page = await context.new_page()
        await hide_webdriver(page)
        yield page
    finally:
        await context.close()
        await browser.close()


def jsonl_sink(stream) -> Sink:
    def _sink(result: PageResult) -> None:
        write_jsonl(stream, result.batch())
    return _sink


async def crawl(urls: List[str], options: ScrapeOptions, config: Config, sink: Sink) -> List[PageResult]:
    error_logger = ErrorLogger(config.error_log_dir)
    pacing = PacingController()
    enricher = DetailPageEnricher(pacing, timeout_ms=config.detail_timeout_ms, error_logger=error_logger)
    handler = ListingPageHandler(
        options,
        pacing=pacing,
        enricher=enricher,
        load_timeout_ms=config.load_timeout_ms,
        error_logger=error_logger,
    )
    runner = ListingRunner(
        handler,
        options,
        nav_timeout_ms=config.nav_timeout_ms,
        retry=RetryConfig(max_retries=config.max_retries),
        error_logger=error_logger,
    )
    async with async_playwright() as pw:
        async with browser_page(pw, headless=config.headless) as page:
            return await runner.run(page, urls, sink)


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Extract job listings from LinkedIn job search pages.")
    ap.add_argument("urls", nargs="*", help="Job search URLs (default: START_URLS_FILE)")
    ap.add_argument("--urls-file", type=Path, help="File with one URL per line")
    ap.add_argument("--include-company-url", action="store_true", default=None,
                    help="Resolve company URLs, visiting detail pages when needed")
    ap.add_argument("--max-results", type=int, help="Maximum records per page")
    ap.add_argument("--mode", choices=["conservative", "fast"], help="Pacing mode")
    ap.add_argument("--enrich-limit", type=int, help="Maximum detail pages visited per listing page")
    ap.add_argument("--title-keywords", help="Comma-separated keywords a title must contain")
    ap.add_argument("--out", type=Path, help="Write JSON lines here instead of stdout")
    ap.add_argument("--headed", action="store_true", help="Run with a visible browser")
    ap.add_argument("--verbose", action="store_true")
    return ap


def options_from_args(args: argparse.Namespace, config: Config) -> ScrapeOptions:
    """Config values, overridden by any flags given on the command line."""
    base = ScrapeOptions.from_config(config)
    overrides = {}
    if args.include_company_url is not None:
        overrides["include_company_url"] = args.include_company_url
    if args.max_results is not None:
        overrides["max_results"] = args.max_results
    if args.mode is not None:
        overrides["mode"] = args.mode
    if args.enrich_limit is not None:
        overrides["enrich_limit"] = args.enrich_limit
    if args.title_keywords is not None:
        overrides["title_keywords"] = [k for k in args.title_keywords.split(",")]
    return ScrapeOptions(**{**base.model_dump(), **overrides})


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    config = get_config()
    if args.headed:
        config.headless = False

    try:
        config.validate()
    except ValueError as e:
        print(f"[error] {e}", file=sys.stderr)
        return 2

    setup_logging(level="DEBUG" if args.verbose else config.log_level, log_dir=config.log_dir, console=args.out is not None)

    urls = list(args.urls)
    if not urls:
        url_file = args.urls_file or config.start_urls_file
        if not url_file.exists():
            print(f"[error] URLs file not found: {url_file}", file=sys.stderr)
            return 1
        urls = read_urls_from_file(url_file)
    if not urls:
        print("[error] No URLs to scrape.", file=sys.stderr)
        return 1

    options = options_from_args(args, config)

    try:
        if args.out:
            args.out.parent.mkdir(parents=True, exist_ok=True)
            with open(args.out, "a", encoding="utf-8") as stream:
                asyncio.run(crawl(urls, options, config, jsonl_sink(stream)))
        else:
            asyncio.run(crawl(urls, options, config, jsonl_sink(sys.stdout)))
    except KeyboardInterrupt:
        print("\n[abort] KeyboardInterrupt - stopping crawl.", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
