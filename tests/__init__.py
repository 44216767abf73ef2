"""
listing_scraper Test Suite

Structure:
- unit/: Fast, isolated unit tests (HTML fixtures and a fake page, no browser)
- conftest.py: Shared fixtures and browser fakes
"""
