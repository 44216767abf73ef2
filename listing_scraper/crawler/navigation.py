"""
Browser interaction for listing and detail pages.

This module applies pacing parameters to a live Playwright page: viewport
and pointer variation, bounded load waits, progressive scrolling, and
snapshotting the rendered DOM into a DocumentScope for extraction.
"""

import asyncio
from typing import Awaitable, Callable

from playwright.async_api import Error as PlaywrightError, Page, TimeoutError as PlaywrightTimeoutError

from listing_scraper.core.logging import get_logger
from listing_scraper.crawler.pacing import FingerprintVariation, ScrollPacing
from listing_scraper.extraction.scope import SoupScope

logger = get_logger(__name__)

Sleep = Callable[[float], Awaitable[None]]

HIDE_WEBDRIVER_JS = "Object.defineProperty(navigator, 'webdriver', {get: () => undefined});"
SCROLL_HEIGHT_JS = "()=>(document.scrollingElement||document.documentElement).scrollHeight|0"
SCROLL_BY_JS = "(d) => window.scrollBy(0, d)"

MAX_SCROLL_STEPS = 400


async def pause(sleep: Sleep, ms: int) -> None:
    """Await a millisecond delay through the injected sleeper."""
    await sleep(ms / 1000)


async def hide_webdriver(page: Page) -> None:
    """Install the navigator.webdriver override for every future document."""
    await page.add_init_script(HIDE_WEBDRIVER_JS)


async def apply_fingerprint(page: Page, variation: FingerprintVariation, sleep: Sleep = asyncio.sleep) -> None:
    """
    Resize the viewport and move the pointer along the drawn path.

    Args:
        page: Playwright page instance
        variation: Viewport and pointer moves from the PacingController
        sleep: Async sleeper taking seconds
    """
    await page.set_viewport_size(variation.viewport.as_dict())
    for move in variation.moves:
        await page.mouse.move(move.x, move.y)
        await pause(sleep, move.pause_ms)


async def wait_for_dom(page: Page, timeout_ms: int) -> bool:
    """
    Wait for DOMContentLoaded with a bound.

    A timeout is not fatal: extraction runs against whatever DOM is present.

    Returns:
        True if the load state was reached, False on timeout
    """
    try:
        await page.wait_for_load_state("domcontentloaded", timeout=timeout_ms)
        return True
    except PlaywrightTimeoutError:
        logger.info(f"DOMContentLoaded not reached within {timeout_ms}ms, continuing with partial DOM")
        return False


async def scroll_height(page: Page) -> int:
    return int(await page.evaluate(SCROLL_HEIGHT_JS) or 0)


async def auto_scroll(
    page: Page,
    pacing: ScrollPacing,
    sleep: Sleep = asyncio.sleep,
    max_steps: int = MAX_SCROLL_STEPS,
) -> int:
    """
    Scroll down in fixed steps until the scrolled distance passes the page height.

    The height is re-read on every step so lazily appended cards extend the
    scroll. A browser error (evaluation timeout, destroyed execution context
    after a redirect) ends the session early and extraction still runs.

    Args:
        page: Playwright page instance
        pacing: Step distance and interval for this session
        sleep: Async sleeper taking seconds
        max_steps: Hard cap on the number of steps

    Returns:
        Total distance scrolled in pixels
    """
    total = 0
    try:
        for _ in range(max_steps):
            height = await scroll_height(page)
            await page.evaluate(SCROLL_BY_JS, pacing.step_px)
            total += pacing.step_px
            if total >= height:
                break
            await pause(sleep, pacing.interval_ms)
    except PlaywrightError as e:
        logger.info(f"Scrolling stopped after {total}px: {e}")
    return total


async def snapshot_scope(page: Page) -> SoupScope:
    """Serialize the current DOM and bind it as a DocumentScope."""
    html = await page.content()
    return SoupScope(html, url=page.url)
