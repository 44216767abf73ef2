"""
Browser-side components: pacing, navigation, enrichment and the page handler.

Module Structure:
- pacing: randomized delays, rate ceilings and fingerprint variation (no playwright dependency)
- navigation: viewport/pointer variation, load waits, scrolling, DOM snapshots (requires playwright)
- enricher: sequential detail-page visits resolving company URLs (requires playwright)
- handler: per-page control flow (requires playwright)
- runner: browser launch, rate ceiling, retries and the CLI (requires playwright)
"""

from listing_scraper.crawler.pacing import (
    DelayBounds,
    FingerprintVariation,
    PacingController,
    PointerMove,
    ScrollPacing,
    Viewport,
)

_LAZY = {
    "apply_fingerprint": "listing_scraper.crawler.navigation",
    "auto_scroll": "listing_scraper.crawler.navigation",
    "snapshot_scope": "listing_scraper.crawler.navigation",
    "wait_for_dom": "listing_scraper.crawler.navigation",
    "hide_webdriver": "listing_scraper.crawler.navigation",
    "DetailPageEnricher": "listing_scraper.crawler.enricher",
    "ListingPageHandler": "listing_scraper.crawler.handler",
    "ListingRunner": "listing_scraper.crawler.runner",
    "RequestThrottle": "listing_scraper.crawler.runner",
}


# Lazy loading for playwright-dependent names
def __getattr__(name):
    if name in _LAZY:
        import importlib
        return getattr(importlib.import_module(_LAZY[name]), name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "DelayBounds",
    "FingerprintVariation",
    "PacingController",
    "PointerMove",
    "ScrollPacing",
    "Viewport",
    *_LAZY,
]
