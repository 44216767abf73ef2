"""
Unit tests for listing extraction over job search pages.
"""

import pytest

from listing_scraper.extraction import extractor
from listing_scraper.extraction.extractor import accepts_title, build_record, extract_listings
from listing_scraper.extraction.scope import SoupScope
from listing_scraper.models import ExtractionStatus, ScrapeOptions


def _scope(listing_page, cards, url):
    return SoupScope(listing_page(cards), url)


class TestAcceptsTitle:
    """Tests for the acceptance predicate."""

    def test_non_empty_title(self):
        assert accepts_title("Senior Engineer") is True

    def test_empty_title(self):
        assert accepts_title("") is False

    def test_keywords_case_insensitive(self):
        assert accepts_title("Senior ENGINEER", ["engineer"]) is True

    def test_keywords_reject(self):
        assert accepts_title("Office Manager", ["engineer", "developer"]) is False

    def test_empty_keyword_list_accepts_all(self):
        assert accepts_title("Office Manager", []) is True


class TestBareCard:
    """A card with only an id and a title link."""

    CARD = '<li data-occludable-job-id="123"><a href="https://linkedin.com/jobs/view/123">Senior Engineer</a></li>'

    def test_fields(self, listing_page, listing_url):
        """Test missing fields resolve to empty strings."""
        result = extract_listings(_scope(listing_page, [self.CARD], listing_url))
        assert result.status == ExtractionStatus.OK
        assert len(result.records) == 1

        record = result.records[0]
        assert record.id == "123"
        assert record.title == "Senior Engineer"
        assert record.company == ""
        assert record.location == ""
        assert record.posted_date == ""
        assert record.url == "https://linkedin.com/jobs/view/123"
        assert record.company_url is None

    def test_output_omits_company_url(self, listing_page, listing_url):
        result = extract_listings(_scope(listing_page, [self.CARD], listing_url))
        output = result.records[0].to_output()
        assert "companyUrl" not in output
        assert output["postedDate"] == ""
        assert output["scrapedAt"]

    def test_company_url_resolved_from_nested_link(self, listing_page, listing_url):
        """Test a company link in the card is validated and canonicalized."""
        card = (
            '<li data-occludable-job-id="123">'
            '<a href="https://linkedin.com/jobs/view/123">Senior Engineer</a>'
            '<a href="https://linkedin.com/company/acme?trk=x">Acme</a>'
            "</li>"
        )
        options = ScrapeOptions(include_company_url=True)
        result = extract_listings(_scope(listing_page, [card], listing_url), options)
        record = result.records[0]
        assert record.company_url == "https://linkedin.com/company/acme"
        assert record.to_output()["companyUrl"] == "https://linkedin.com/company/acme"

    def test_company_url_not_resolved_unless_requested(self, listing_page, listing_url):
        card = (
            '<li data-occludable-job-id="123">'
            '<a href="https://linkedin.com/jobs/view/123">Senior Engineer</a>'
            '<a href="https://linkedin.com/company/acme?trk=x">Acme</a>'
            "</li>"
        )
        result = extract_listings(_scope(listing_page, [card], listing_url))
        assert result.records[0].company_url is None


class TestGuestLayout:
    """Tests against the public search result layout."""

    def test_all_fields(self, listing_page, listing_url, guest_card_html):
        options = ScrapeOptions(include_company_url=True)
        result = extract_listings(_scope(listing_page, [guest_card_html], listing_url), options)

        assert result.card_selector == ".job-search-card"
        record = result.records[0]
        assert record.id == "job_0"
        assert record.title == "Senior Engineer"
        assert record.company == "Acme"
        assert record.location == "Berlin, Germany"
        assert record.posted_date == "1 week ago"
        assert record.url == "https://www.linkedin.com/jobs/view/senior-engineer-at-acme-3801"
        assert record.company_url == "https://www.linkedin.com/company/acme"


class TestExtractListings:
    """Tests for extract_listings orchestration."""

    def test_empty_page(self, listing_url):
        """Test a page without cards is an EMPTY result, not an error."""
        scope = SoupScope("<html><body><div class='authwall'>Sign in</div></body></html>", listing_url)
        result = extract_listings(scope)
        assert result.status == ExtractionStatus.EMPTY
        assert result.is_empty
        assert result.records == []
        assert result.card_selector is None

    def test_preserves_dom_order(self, listing_page, listing_url, make_card):
        cards = [make_card(job_id=str(i), title=f"Engineer {i}") for i in range(5)]
        result = extract_listings(_scope(listing_page, cards, listing_url))
        assert [r.id for r in result.records] == ["0", "1", "2", "3", "4"]

    def test_max_results_is_a_hard_stop(self, listing_page, listing_url, make_card):
        """Test that the result cap keeps the first cards and stops visiting."""
        cards = [make_card(job_id=str(i), title=f"Engineer {i}") for i in range(10)]
        result = extract_listings(_scope(listing_page, cards, listing_url), ScrapeOptions(max_results=3))
        assert [r.title for r in result.records] == ["Engineer 0", "Engineer 1", "Engineer 2"]
        assert result.cards_seen == 3

    def test_untitled_cards_do_not_count_toward_cap(self, listing_page, listing_url):
        cards = [
            '<li data-occludable-job-id="1"><span>sponsored</span></li>',
            '<li data-occludable-job-id="2"><h3>Backend Engineer</h3></li>',
            '<li data-occludable-job-id="3"><h3>Frontend Engineer</h3></li>',
        ]
        result = extract_listings(_scope(listing_page, cards, listing_url), ScrapeOptions(max_results=2))
        assert [r.id for r in result.records] == ["2", "3"]

    def test_title_keywords(self, listing_page, listing_url, make_card):
        cards = [
            make_card(job_id="1", title="Python Developer"),
            make_card(job_id="2", title="Office Manager"),
            make_card(job_id="3", title="Data Engineer"),
        ]
        options = ScrapeOptions(title_keywords=["Developer", "engineer"])
        result = extract_listings(_scope(listing_page, cards, listing_url), options)
        assert [r.id for r in result.records] == ["1", "3"]

    def test_dedupe_by_native_id(self, listing_page, listing_url, make_card):
        """Test the first occurrence of a repeated card wins."""
        cards = [
            make_card(job_id="7", title="First"),
            make_card(job_id="8", title="Other"),
            make_card(job_id="7", title="Repeat"),
        ]
        result = extract_listings(_scope(listing_page, cards, listing_url))
        assert [r.title for r in result.records] == ["First", "Other"]
        assert result.duplicates == 1

    def test_dedupe_by_url_without_native_id(self, listing_page, listing_url, make_card):
        cards = [
            make_card(title="First", href="/jobs/view/55/?trk=a"),
            make_card(title="Repeat", href="/jobs/view/55/?trk=b"),
        ]
        result = extract_listings(_scope(listing_page, cards, listing_url))
        assert [r.title for r in result.records] == ["First"]

    def test_dedupe_disabled(self, listing_page, listing_url, make_card):
        cards = [make_card(job_id="7", title="First"), make_card(job_id="7", title="Repeat")]
        result = extract_listings(_scope(listing_page, cards, listing_url), ScrapeOptions(dedupe=False))
        assert len(result.records) == 2
        assert result.duplicates == 0

    def test_faulty_card_is_skipped(self, listing_page, listing_url, make_card, error_logger, monkeypatch):
        """Test that one malformed card is logged and the pass continues."""
        original = extractor.build_record

        def flaky(scope, card, index, include_company_url=False):
            if index == 1:
                raise AttributeError("'NoneType' object has no attribute 'get'")
            return original(scope, card, index, include_company_url)

        monkeypatch.setattr(extractor, "build_record", flaky)
        cards = [make_card(job_id=str(i), title=f"Engineer {i}") for i in range(3)]
        result = extract_listings(_scope(listing_page, cards, listing_url), error_logger=error_logger)

        assert [r.id for r in result.records] == ["0", "2"]
        assert result.cards_skipped == 1

        errors = error_logger.read_errors()
        assert len(errors) == 1
        assert errors[0]["error_type"] == "extraction_fault"
        assert errors[0]["severity"] == "warning"
        assert errors[0]["metadata"]["card_index"] == 1
        assert errors[0]["url"] == listing_url

    def test_company_url_from_company_name_link(self, listing_page, listing_url, make_card):
        cards = [make_card(job_id="1", company_href="/company/globex/life/?trk=x")]
        result = extract_listings(
            _scope(listing_page, cards, listing_url), ScrapeOptions(include_company_url=True)
        )
        assert result.records[0].company == "Globex"
        assert result.records[0].company_url == "https://www.linkedin.com/company/globex/life"

    def test_company_url_absent_when_only_invalid_links(self, listing_page, listing_url, make_card):
        cards = [make_card(job_id="1", company_href="https://www.linkedin.com/company/globex/jobs/")]
        result = extract_listings(
            _scope(listing_page, cards, listing_url), ScrapeOptions(include_company_url=True)
        )
        assert result.records[0].company_url is None


class TestBuildRecord:

    def test_positional_id(self, listing_page, listing_url, make_card):
        scope = _scope(listing_page, [make_card()], listing_url)
        card = scope.select_one(scope.root, "li")
        record = build_record(scope, card, 9)
        assert record.id == "job_9"
        assert record.url == "https://www.linkedin.com/jobs/view/4021/"
        assert record.location == "Remote"
        assert record.posted_date == "1 day ago"

    @pytest.mark.parametrize("include", [False, True])
    def test_company_url_only_when_requested(self, listing_page, listing_url, make_card, include):
        scope = _scope(listing_page, [make_card(company_href="/company/globex")], listing_url)
        card = scope.select_one(scope.root, "li")
        record = build_record(scope, card, 0, include_company_url=include)
        expected = "https://www.linkedin.com/company/globex" if include else None
        assert record.company_url == expected
