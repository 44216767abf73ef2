"""
Unit tests for browser interaction helpers.
"""

import pytest
from playwright.async_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from listing_scraper.crawler.navigation import (
    HIDE_WEBDRIVER_JS,
    apply_fingerprint,
    auto_scroll,
    hide_webdriver,
    pause,
    snapshot_scope,
    wait_for_dom,
)
from listing_scraper.crawler.pacing import FingerprintVariation, PointerMove, ScrollPacing, Viewport

from tests.conftest import FakePage


class TestPause:

    @pytest.mark.asyncio
    async def test_converts_milliseconds(self, sleep):
        await pause(sleep, 2500)
        assert sleep.calls == [2.5]


class TestApplyFingerprint:

    @pytest.mark.asyncio
    async def test_sets_viewport_and_moves_pointer(self, sleep):
        variation = FingerprintVariation(
            viewport=Viewport(1366, 768),
            moves=(PointerMove(10, 20, 100), PointerMove(300, 400, 200)),
        )
        page = FakePage()
        await apply_fingerprint(page, variation, sleep)
        assert page.viewport == {"width": 1366, "height": 768}
        assert page.mouse.moves == [(10, 20), (300, 400)]
        assert sleep.calls == [0.1, 0.2]


class TestWaitForDom:

    @pytest.mark.asyncio
    async def test_reached(self):
        page = FakePage()
        assert await wait_for_dom(page, 1000) is True
        assert page.load_states == ["domcontentloaded"]

    @pytest.mark.asyncio
    async def test_timeout_is_not_fatal(self):
        class SlowPage(FakePage):
            async def wait_for_load_state(self, state, timeout=None):
                raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")

        assert await wait_for_dom(SlowPage(), 1000) is False


class TestAutoScroll:

    @pytest.mark.asyncio
    async def test_scrolls_past_page_height(self, sleep):
        page = FakePage(scroll_height=1000)
        total = await auto_scroll(page, ScrollPacing(step_px=250, interval_ms=150), sleep)
        assert total == 1000
        assert page.scrolled == 1000
        # no pause after the final step
        assert sleep.calls == [0.15, 0.15, 0.15]

    @pytest.mark.asyncio
    async def test_step_cap(self, sleep):
        page = FakePage(scroll_height=10_000)
        total = await auto_scroll(page, ScrollPacing(step_px=100, interval_ms=100), sleep, max_steps=5)
        assert total == 500

    @pytest.mark.asyncio
    async def test_timeout_ends_session(self, sleep):
        class StuckPage(FakePage):
            async def evaluate(self, script, arg=None):
                if "scrollBy" in script and self.scrolled >= 200:
                    raise PlaywrightTimeoutError("Timeout 30000ms exceeded.")
                return await super().evaluate(script, arg)

        total = await auto_scroll(StuckPage(scroll_height=5000), ScrollPacing(step_px=100, interval_ms=100), sleep)
        assert total == 200

    @pytest.mark.asyncio
    async def test_destroyed_context_ends_session(self, sleep):
        """Test a redirect mid-scroll stops scrolling instead of failing the page."""
        class RedirectedPage(FakePage):
            async def evaluate(self, script, arg=None):
                if "scrollHeight" in script and self.scrolled >= 300:
                    raise PlaywrightError("Execution context was destroyed, most likely because of a navigation")
                return await super().evaluate(script, arg)

        total = await auto_scroll(RedirectedPage(scroll_height=5000), ScrollPacing(step_px=100, interval_ms=100), sleep)
        assert total == 300


class TestSnapshotAndInit:

    @pytest.mark.asyncio
    async def test_snapshot_scope_binds_url(self):
        page = FakePage(url="https://www.linkedin.com/jobs/view/1/", html="<a href='/company/acme'>Acme</a>")
        scope = await snapshot_scope(page)
        assert scope.url == "https://www.linkedin.com/jobs/view/1/"
        assert scope.href(scope.select_one(scope.root, "a")) == "https://www.linkedin.com/company/acme"

    @pytest.mark.asyncio
    async def test_hide_webdriver(self):
        page = FakePage()
        await hide_webdriver(page)
        assert page.init_scripts == [HIDE_WEBDRIVER_JS]
