"""
Pytest Configuration and Shared Fixtures

This file contains pytest configuration and fixtures that are available
to all tests in the test suite.
"""

import random
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pytest

from listing_scraper.core.error_logger import ErrorLogger
from listing_scraper.crawler.pacing import PacingController


LISTING_URL = "https://www.linkedin.com/jobs/search/?keywords=engineer&location=Berlin"


# ============================================================================
# Paths and Directories
# ============================================================================

@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def test_output_dir(tmp_path: Path) -> Path:
    """Create a temporary output directory for tests."""
    output_dir = tmp_path / "test_output"
    output_dir.mkdir(exist_ok=True)
    return output_dir


# ============================================================================
# Sample HTML Fixtures
# ============================================================================

@pytest.fixture
def listing_url() -> str:
    return LISTING_URL


@pytest.fixture
def guest_card_html() -> str:
    """A public (logged-out) search result card."""
    return """
    <li>
      <div class="base-card base-search-card job-search-card" data-entity-urn="urn:li:jobPosting:3801">
        <a class="base-card__full-link"
           href="https://www.linkedin.com/jobs/view/senior-engineer-at-acme-3801?refId=abc&amp;trackingId=xyz">
          <span class="sr-only">Senior Engineer</span>
        </a>
        <div class="base-search-card__info">
          <h3 class="base-search-card__title">Senior Engineer</h3>
          <h4 class="base-search-card__subtitle">
            <a class="hidden-nested-link"
               href="https://www.linkedin.com/company/acme?trk=public_jobs_jserp-result_job-search-card-subtitle">
              Acme
            </a>
          </h4>
          <div class="base-search-card__metadata">
            <span class="job-search-card__location">Berlin, Germany</span>
            <time class="job-search-card__listdate" datetime="2026-10-12">1 week ago</time>
          </div>
        </div>
      </div>
    </li>
    """


@pytest.fixture
def make_card():
    """Build a logged-in layout card; omitted fields are left out of the markup."""

    def _make(
        job_id: Optional[str] = None,
        title: str = "Data Analyst",
        href: str = "/jobs/view/4021/",
        company: Optional[str] = "Globex",
        company_href: Optional[str] = None,
        location: Optional[str] = "Remote",
        posted: Optional[str] = "1 day ago",
        extra: str = "",
    ) -> str:
        id_attr = f' data-occludable-job-id="{job_id}"' if job_id else ""
        company_html = ""
        if company is not None:
            if company_href:
                company_html = (
                    f'<div class="job-card-container__company-name">'
                    f'<a href="{company_href}">{company}</a></div>'
                )
            else:
                company_html = f'<div class="job-card-container__company-name">{company}</div>'
        location_html = (
            f'<ul><li class="job-card-container__metadata-item">{location}</li></ul>'
            if location is not None else ""
        )
        posted_html = f'<time datetime="2026-10-18">{posted}</time>' if posted is not None else ""
        return (
            f'<li class="jobs-search-results__list-item"{id_attr}>'
            f'<div class="job-card-container">'
            f'<a class="job-card-list__title job-card-container__link" href="{href}">{title}</a>'
            f"{company_html}{location_html}{posted_html}{extra}"
            f"</div></li>"
        )

    return _make


@pytest.fixture
def listing_page():
    """Wrap card markup in a search results page."""

    def _page(cards: Iterable[str]) -> str:
        return (
            "<html><head><title>Jobs | LinkedIn</title></head><body>"
            '<main><ul class="jobs-search__results-list">'
            + "".join(cards)
            + "</ul></main></body></html>"
        )

    return _page


@pytest.fixture
def detail_page():
    """A job detail page whose top card links to the given company."""

    def _detail(company_href: Optional[str] = "https://www.linkedin.com/company/globex/?trk=top-card") -> str:
        link = (
            f'<a class="topcard__org-name-link" href="{company_href}">Globex</a>'
            if company_href else "<span>Globex</span>"
        )
        return (
            "<html><body>"
            '<nav><a href="https://www.linkedin.com/jobs/">Jobs</a></nav>'
            f'<section class="top-card-layout__card"><h1>Data Analyst</h1>{link}</section>'
            "</body></html>"
        )

    return _detail


# ============================================================================
# Browser Fakes
# ============================================================================

class FakeMouse:
    def __init__(self):
        self.moves: List[tuple] = []

    async def move(self, x, y):
        self.moves.append((x, y))


class FakePage:
    """
    Minimal stand-in for a Playwright page.

    ``pages`` maps URLs to the HTML served after goto(); URLs in ``failing``
    raise on navigation.
    """

    def __init__(
        self,
        url: str = "",
        html: str = "",
        pages: Optional[Dict[str, str]] = None,
        failing: Iterable[str] = (),
        scroll_height: int = 1000,
    ):
        self.url = url
        self._html = html
        self.pages = pages or {}
        self.failing = set(failing)
        self.scroll_height = scroll_height
        self.visited: List[str] = []
        self.goto_kwargs: List[dict] = []
        self.viewport: Optional[dict] = None
        self.mouse = FakeMouse()
        self.scrolled = 0
        self.load_states: List[str] = []
        self.init_scripts: List[str] = []

    async def goto(self, url, wait_until=None, timeout=None):
        self.visited.append(url)
        self.goto_kwargs.append({"wait_until": wait_until, "timeout": timeout})
        if url in self.failing:
            raise TimeoutError(f"Timeout {timeout}ms exceeded navigating to {url}")
        self.url = url
        self._html = self.pages.get(url, "<html><body></body></html>")

    async def content(self):
        return self._html

    async def set_viewport_size(self, size):
        self.viewport = size

    async def wait_for_load_state(self, state, timeout=None):
        self.load_states.append(state)

    async def evaluate(self, script, arg=None):
        if "scrollHeight" in script:
            return self.scroll_height
        self.scrolled += arg or 0
        return None

    async def add_init_script(self, script):
        self.init_scripts.append(script)


class RecordingSleep:
    """Async sleeper that records requested durations instead of waiting."""

    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def total(self) -> float:
        return sum(self.calls)


@pytest.fixture
def fake_page_factory():
    return FakePage


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def pacing() -> PacingController:
    """Deterministic pacing controller."""
    return PacingController(random.Random(1234))


@pytest.fixture
def error_logger(tmp_path: Path) -> ErrorLogger:
    """Error logger writing into the test's temporary directory."""
    return ErrorLogger(tmp_path / "errors")


# ============================================================================
# Test Markers
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )
