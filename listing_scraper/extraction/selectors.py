"""
Selector chains for LinkedIn job search pages.

Order matters in every table: the current layout comes first, generic and
legacy fallbacks come last. Resolution stops at the first match, so moving
a generic entry up will shadow everything below it.
"""

from listing_scraper.extraction.locators import (
    AriaLabelContains,
    Css,
    HrefContains,
    InCompanyElement,
    SelectorChain,
)
from listing_scraper.utils.url_utils import COMPANY_HREF_MARKER, COMPANY_PATH_MARKER


# Card containers, tried in order; the first selector with any match wins
CARD_CONTAINER_SELECTORS = (
    "[data-occludable-job-id]",
    ".jobs-search__results-list .job-card-container",
    ".job-search-card",
    "[data-job-id]",
    ".base-card",
    ".job-card-list__title",
    ".jobs-search-results-list .job-card-container",
    ".job-search-card__contents",
    "[data-test-id*='job-card']",
    ".job-search-card__contents-wrapper",
    ".base-search-card",
    ".jobs-search-two-pane__job-card-container",
    ".job-card-container",
    ".job-card",
    "[data-occludable-entity-urn]",
    "[data-control-name='job_card']",
)

# Native card identifiers, in priority order
CARD_ID_ATTRIBUTES = ("data-occludable-job-id", "data-job-id")

TITLE_CHAIN: SelectorChain = (
    Css(".base-card__full-link"),
    Css("h3 a"),
    Css(".job-card-list__title"),
    Css(".job-search-card__title"),
    Css("a[data-control-name]"),
    Css("h3"),
    Css("a"),
    Css(".job-card-container__link"),
    Css(".base-search-card__title"),
    Css("[data-test-id*='job-title']"),
)

COMPANY_CHAIN: SelectorChain = (
    Css(".hidden-nested-link"),
    Css(".job-search-card__subtitle-link"),
    Css(".job-card-container__company-name"),
    Css(".job-card-company-name"),
    Css("[data-field='experience-company-logo'] + span"),
    Css(".job-card-container__company-name a"),
    Css(".base-search-card__subtitle"),
    Css("[data-test-id*='company-name']"),
)

LOCATION_CHAIN: SelectorChain = (
    Css(".job-search-card__location"),
    Css(".job-result-card__location"),
    Css(".job-card-container__metadata-item"),
    Css(".job-card-location"),
    Css(".base-search-card__location"),
    Css("[data-test-id*='location']"),
)

POSTED_DATE_CHAIN: SelectorChain = (
    Css(".job-search-card__listdate"),
    Css("time"),
    Css(".job-card-container__footer-job-time"),
    Css(".job-card-container__time-posted"),
    Css("[data-test-id*='posted-date']"),
)

LINK_CHAIN: SelectorChain = (
    Css(".base-card__full-link"),
    Css("h3 a"),
    Css("a[data-control-name]"),
    Css("a"),
    Css(".job-card-container__link"),
    Css(".base-search-card__title"),
    Css("[data-test-id*='job-title'] a"),
)

# Company link inside a card; each match must still pass URL validation
COMPANY_LINK_CHAIN: SelectorChain = (
    Css(".hidden-nested-link"),
    Css(".job-search-card__subtitle-link"),
    Css(".job-card-container__company-name a"),
    Css(".job-card-company-name a"),
    Css(".base-card__subtitle a"),
    Css("a[data-field='experience-company-logo']"),
    Css("[data-test-id*='company-logo'] a"),
    Css("[data-test-id*='company-name'] a"),
    Css(".job-creator-module a"),
    Css(".company-details-link"),
    Css(".top-card-layout__card a[href*='/company/']"),
    HrefContains(COMPANY_HREF_MARKER),
    AriaLabelContains("company"),
    InCompanyElement("a"),
    Css("span[class*='company'] a"),
    Css("div[class*='company'] a"),
    Css("span[class*='Company'] a"),
    Css("div[class*='Company'] a"),
)

# Detail page: every match of each selector is checked before moving on
DETAIL_COMPANY_LINK_SELECTORS = (
    "a[href*='/company/']",
    ".top-card-layout__card a[href*='/company/']",
    ".jobs-company__link[href*='/company/']",
    "[data-field='company-details-link']",
    ".ember-view a[href*='/company/']",
    ".topcard__org-name-link[href*='/company/']",
    ".job-details-company__link[href*='/company/']",
    ".company-name-link[href*='/company/']",
    ".org-nav-item a[href*='/company/']",
    "div[data-test-id='entity-name'] a[href*='/company/']",
    "span[aria-label*='Company'] a[href*='/company/']",
    f"a[href*='{COMPANY_PATH_MARKER}']",
)

# Text that marks the region of a detail page holding the company link
COMPANY_TEXT_MARKERS = ("Company", "View page")
